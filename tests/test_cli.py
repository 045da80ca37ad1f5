"""Tests for the infrakit command line."""
import subprocess
from unittest.mock import Mock, patch

import pytest
import yaml
from typer.testing import CliRunner

from infrakit.cli import app
from infrakit.core import config as config_module

runner = CliRunner()

ANSWERS = {
    "git_repo": "git@github.com:acme/shop-api.git",
    "docker_user": "acme",
    "deploy_server": "deploy@10.0.0.5",
    "app_port": 8080,
}


class TestHelp:
    """Help output for every command."""

    def test_main_help(self):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "terraform" in result.output
        assert "cicd" in result.output

    @pytest.mark.parametrize("command", [
        ["terraform", "--help"],
        ["terraform", "init", "--help"],
        ["terraform", "files", "--help"],
        ["cicd", "--help"],
        ["cicd", "check", "--help"],
        ["cicd", "setup", "--help"],
        ["cicd", "files", "--help"],
        ["cicd", "webhook", "--help"],
        ["version", "--help"],
    ])
    def test_help_does_not_crash(self, command):
        result = runner.invoke(app, command)

        assert result.exit_code == 0
        assert len(result.output) > 0
        assert "Traceback" not in result.output

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "infrakit v" in result.output


class TestTerraformCommands:

    def test_init_writes_project(self, tmp_path):
        result = runner.invoke(app, [
            "terraform", "init",
            "--output-dir", str(tmp_path),
            "--region", "eu-west-1",
        ])

        assert result.exit_code == 0, result.output
        project = tmp_path / "terraform-ubuntu-project"
        assert (project / "modules" / "ec2" / "main.tf").exists()
        assert 'region = "eu-west-1"' in (project / "terraform.tfvars").read_text()
        assert "terraform init" in result.output

    def test_init_rejects_bad_region(self, tmp_path):
        result = runner.invoke(app, [
            "terraform", "init", "--output-dir", str(tmp_path), "--region", "mars",
        ])

        assert result.exit_code == 1
        assert "Error" in result.output
        assert not (tmp_path / "terraform-ubuntu-project").exists()

    def test_files_lists_without_writing(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["terraform", "files"])

        assert result.exit_code == 0
        assert "modules/ec2/outputs.tf" in result.output
        assert list(tmp_path.iterdir()) == []

    def test_files_show_prints_content(self):
        result = runner.invoke(app, ["terraform", "files", "--show", "versions.tf"])

        assert result.exit_code == 0
        assert result.output == 'terraform {\n  required_version = ">= 1.5.0"\n}\n'

    def test_files_show_unknown(self):
        result = runner.invoke(app, ["terraform", "files", "--show", "nope.tf"])
        assert result.exit_code == 1


class TestCICDFilesCommand:

    def test_writes_from_options(self, tmp_path):
        result = runner.invoke(app, [
            "cicd", "files", "--dir", str(tmp_path),
            "--repo", ANSWERS["git_repo"],
            "--docker-user", "acme",
            "--deploy-server", "deploy@10.0.0.5",
            "--port", "8080",
        ])

        assert result.exit_code == 0, result.output
        assert "EXPOSE 8080" in (tmp_path / "Dockerfile").read_text()
        assert 'IMAGE = "acme/shop-api:${BUILD_NUMBER}"' in (tmp_path / "Jenkinsfile").read_text()

    def test_prompts_for_missing_answers(self, tmp_path):
        result = runner.invoke(
            app,
            ["cicd", "files", "--dir", str(tmp_path)],
            input="git@github.com:acme/shop-api.git\nacme\ndeploy@10.0.0.5\n\n",
        )

        assert result.exit_code == 0, result.output
        assert "Enter your GitHub SSH repo URL" in result.output
        assert "Enter app container port (default 3000)" in result.output
        assert "EXPOSE 3000" in (tmp_path / "Dockerfile").read_text()

    def test_reads_answers_file(self, tmp_path):
        answers = tmp_path / "answers.yml"
        answers.write_text(yaml.safe_dump(ANSWERS))
        checkout = tmp_path / "checkout"
        checkout.mkdir()

        result = runner.invoke(app, ["cicd", "files", "--dir", str(checkout), "--answers", str(answers)])

        assert result.exit_code == 0, result.output
        assert "-p 8080:8080" in (checkout / "Jenkinsfile").read_text()

    def test_does_not_overwrite(self, tmp_path):
        (tmp_path / "Dockerfile").write_text("FROM custom\n")

        result = runner.invoke(app, [
            "cicd", "files", "--dir", str(tmp_path),
            "--repo", ANSWERS["git_repo"],
            "--docker-user", "acme",
            "--deploy-server", "deploy@10.0.0.5",
            "--port", "8080",
        ])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "Dockerfile").read_text() == "FROM custom\n"
        assert (tmp_path / "Jenkinsfile").exists()
        assert "already exists" in result.output

    def test_invalid_docker_user(self, tmp_path):
        result = runner.invoke(app, [
            "cicd", "files", "--dir", str(tmp_path),
            "--repo", ANSWERS["git_repo"],
            "--docker-user", "Not Valid",
            "--deploy-server", "deploy@10.0.0.5",
            "--port", "8080",
        ])

        assert result.exit_code == 1
        assert "Error" in result.output
        assert not (tmp_path / "Dockerfile").exists()

    def test_missing_answers_file(self, tmp_path):
        result = runner.invoke(app, [
            "cicd", "files", "--dir", str(tmp_path), "--answers", str(tmp_path / "nope.yml"),
        ])
        assert result.exit_code == 1


class TestCICDMockMode:
    """Commands that shell out, run with INFRAKIT_MOCK=1."""

    @pytest.fixture(autouse=True)
    def mock_mode(self, monkeypatch):
        monkeypatch.setenv("INFRAKIT_MOCK", "1")

    def test_check(self):
        result = runner.invoke(app, ["cicd", "check"])

        assert result.exit_code == 0, result.output
        assert "git" in result.output
        assert "docker" in result.output
        assert "jenkins" in result.output

    def test_setup(self, tmp_path):
        answers = tmp_path / "answers.yml"
        answers.write_text(yaml.safe_dump({**ANSWERS, "github_token": "test-token"}))

        result = runner.invoke(app, ["cicd", "setup", "--answers", str(answers)])

        assert result.exit_code == 0, result.output
        assert "CI/CD setup complete" in result.output
        assert "shop-api" in result.output

    def test_setup_prompts_for_token(self):
        result = runner.invoke(
            app,
            [
                "cicd", "setup",
                "--repo", ANSWERS["git_repo"],
                "--docker-user", "acme",
                "--deploy-server", "deploy@10.0.0.5",
                "--port", "8080",
            ],
            input="test-token\n",
        )

        assert result.exit_code == 0, result.output
        assert "Enter your GitHub Personal Access Token" in result.output
        assert "test-token" not in result.output

    def test_setup_skip_webhook_needs_no_token(self):
        result = runner.invoke(app, [
            "cicd", "setup",
            "--repo", ANSWERS["git_repo"],
            "--docker-user", "acme",
            "--deploy-server", "deploy@10.0.0.5",
            "--port", "8080",
            "--skip-webhook",
        ])

        assert result.exit_code == 0, result.output
        assert "Personal Access Token" not in result.output

    def test_webhook(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "env-token")

        result = runner.invoke(app, [
            "cicd", "webhook", "--repo", ANSWERS["git_repo"], "--jenkins-host", "10.0.0.2",
        ])

        assert result.exit_code == 0, result.output
        assert "Webhook created" in result.output

    def test_webhook_rejects_non_github_repo(self):
        result = runner.invoke(app, [
            "cicd", "webhook", "--repo", "git@gitlab.com:acme/shop-api.git", "--token", "t",
        ])

        assert result.exit_code == 1
        assert "Not a GitHub repository URL" in result.output

    def test_webhook_accepts_ssh_scheme_url(self):
        result = runner.invoke(app, [
            "cicd", "webhook", "--repo", "ssh://git@github.com/acme/shop-api.git", "--token", "t",
        ])

        assert result.exit_code == 0, result.output
        assert "Webhook created" in result.output

    def test_webhook_prompts_only_for_repo_and_token(self):
        result = runner.invoke(app, ["cicd", "webhook"], input=f"{ANSWERS['git_repo']}\ntest-token\n")

        assert result.exit_code == 0, result.output
        assert "Enter your GitHub SSH repo URL" in result.output
        assert "Docker Hub" not in result.output
        assert "deployment server" not in result.output


class TestCICDSetupFailures:
    """Setup outside mock mode with subprocess.run patched."""

    @pytest.fixture(autouse=True)
    def workspace(self, fresh_config, tmp_path, monkeypatch):
        workspace = tmp_path / "workspace"
        monkeypatch.setenv("INFRAKIT_JENKINS_WORKSPACE", str(workspace))
        config_module.reset_config()
        return workspace

    def _invoke_setup(self):
        return runner.invoke(app, [
            "cicd", "setup",
            "--repo", ANSWERS["git_repo"],
            "--docker-user", "acme",
            "--deploy-server", "deploy@10.0.0.5",
            "--skip-prereqs",
            "--skip-webhook",
        ], input="\n")

    def test_sudo_tee_failure_is_reported(self, workspace):
        def fake_run(cmd, *args, **kwargs):
            if cmd[:2] == ['sudo', 'tee']:
                raise subprocess.CalledProcessError(
                    1, cmd, stderr="sudo: a terminal is required to read the password"
                )
            if 'clone' in cmd:
                (workspace / "shop-api").mkdir(parents=True)
            return Mock(returncode=0, stdout="abc123\n", stderr="")

        with patch('subprocess.run', side_effect=fake_run):
            result = self._invoke_setup()

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Error:" in result.output
        assert "CI/CD setup complete" not in result.output

    def test_clone_timeout_is_reported(self):
        def fake_run(cmd, *args, **kwargs):
            if 'clone' in cmd:
                raise subprocess.TimeoutExpired(cmd, kwargs.get('timeout'))
            return Mock(returncode=0, stdout="", stderr="")

        with patch('subprocess.run', side_effect=fake_run):
            result = self._invoke_setup()

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "timed out" in result.output
