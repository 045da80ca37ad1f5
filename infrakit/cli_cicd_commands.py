"""CI/CD CLI commands - check, setup, files, webhook."""
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from infrakit.core.errors import InfrakitError
from infrakit.models.cicd import (
    DEFAULT_APP_PORT,
    CheckResult,
    CICDSettings,
    SetupSummary,
    WebhookSettings,
)

# Module-level console instance (will be set by register function)
console: Console = Console()

PROMPTS = {
    "git_repo": "Enter your GitHub SSH repo URL",
    "docker_user": "Enter your Docker Hub username",
    "deploy_server": "Enter your deployment server (ssh user@ip)",
    "app_port": f"Enter app container port (default {DEFAULT_APP_PORT})",
    "github_token": "Enter your GitHub Personal Access Token",
}


def collect_settings(
    provided: Dict[str, Any],
    fields: List[str],
    verbose: bool = False,
    model: Type[WebhookSettings] = CICDSettings,
) -> WebhookSettings:
    """Fill in missing answers interactively and validate them.

    Args:
        provided: Answers from options and/or an answers file
        fields: Which answers this command needs, in prompt order
        model: Settings model the answers are validated into
    """
    from infrakit.cli_support import handle_cli_error

    answers = {k: v for k, v in provided.items() if v not in (None, "")}

    for name in fields:
        if name in answers:
            continue
        if name == "app_port":
            answers[name] = typer.prompt(PROMPTS[name], default=DEFAULT_APP_PORT, type=int, show_default=False)
        elif name == "github_token":
            answers[name] = typer.prompt(PROMPTS[name], hide_input=True)
        else:
            answers[name] = typer.prompt(PROMPTS[name])

    try:
        return model(**{k: answers[k] for k in model.model_fields if k in answers})
    except ValidationError as e:
        handle_cli_error(e, console, verbose)


def _answers(answers_file: Optional[str], **overrides) -> Dict[str, Any]:
    from infrakit.cli_support import handle_cli_error, load_answers

    try:
        answers = load_answers(answers_file)
    except (FileNotFoundError, ValueError) as e:
        handle_cli_error(e, console)
    answers.update({k: v for k, v in overrides.items() if v is not None})
    return answers


def _print_checks(checks: List[CheckResult]) -> None:
    table = Table(title="Prerequisites", show_header=True)
    table.add_column("Tool", style="cyan")
    table.add_column("Status")
    table.add_column("Details", style="dim")

    colors = {"present": "green", "installed": "green", "missing": "yellow", "failed": "red"}
    for check in checks:
        color = colors[check.status]
        table.add_row(check.name, f"[{color}]{check.status}[/{color}]", check.message)

    console.print(table)


def _print_summary(summary: SetupSummary) -> None:
    def created(flag: bool) -> str:
        return "[green]created[/green]" if flag else "[dim]already existed[/dim]"

    lines = [
        f"[bold]Repository:[/bold] {summary.repo_name}",
        f"[bold]Deployment server:[/bold] {summary.deploy_server}, [bold]App port:[/bold] {summary.app_port}",
    ]
    if summary.sync:
        lines.append(f"[bold]Checkout:[/bold] {summary.sync.path} ({summary.sync.action})")
    lines.append(f"[bold]Dockerfile:[/bold] {created(summary.dockerfile_created)}")
    lines.append(f"[bold]Jenkinsfile:[/bold] {created(summary.jenkinsfile_created)}")
    if summary.webhook:
        lines.append(f"[bold]Webhook:[/bold] {summary.webhook.status.replace('_', ' ')}")

    console.print(Panel("\n".join(lines), title="✅ CI/CD setup complete!", border_style="green"))


def check():
    """Check (and install) git and Docker, and detect Jenkins."""
    from infrakit.cli_support import is_mock
    from infrakit.services.prerequisites import PrerequisiteChecker

    console.print("🔹 Checking prerequisites...")
    checks = PrerequisiteChecker(mock=is_mock()).check_all()
    _print_checks(checks)

    if any(c.status == "failed" for c in checks):
        raise typer.Exit(1)


def setup(
    answers_file: Optional[str] = typer.Option(None, "--answers", "-a", help="YAML file with pre-filled answers"),
    repo: Optional[str] = typer.Option(None, "--repo", help="GitHub SSH repo URL"),
    docker_user: Optional[str] = typer.Option(None, "--docker-user", help="Docker Hub username"),
    deploy_server: Optional[str] = typer.Option(None, "--deploy-server", help="Deployment server (user@ip)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help=f"App container port (default {DEFAULT_APP_PORT})"),
    token: Optional[str] = typer.Option(None, "--token", envvar="GITHUB_TOKEN", help="GitHub personal access token"),
    jenkins_host: Optional[str] = typer.Option(None, "--jenkins-host", help="Host GitHub should call (default: first local IP)"),
    skip_prereqs: bool = typer.Option(False, "--skip-prereqs", help="Do not check or install git/docker"),
    skip_webhook: bool = typer.Option(False, "--skip-webhook", help="Do not create the GitHub webhook"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show tracebacks on error"),
):
    """Wire a GitHub repository into Docker, Jenkins and a push webhook.

    Clones (or pulls) the repo into the Jenkins workspace, adds a Dockerfile
    and Jenkinsfile when they are missing, and registers a GitHub webhook
    that triggers Jenkins on push. Existing files are never overwritten.

    Examples:
        infrakit cicd setup
        infrakit cicd setup --answers answers.yml --skip-prereqs
    """
    from infrakit.cli_support import handle_cli_error, is_mock
    from infrakit.core.cicd_setup import CICDSetup

    fields = ["git_repo", "docker_user", "deploy_server", "app_port"]
    if not skip_webhook:
        fields.append("github_token")

    settings = collect_settings(
        _answers(
            answers_file,
            git_repo=repo,
            docker_user=docker_user,
            deploy_server=deploy_server,
            app_port=port,
            github_token=token,
        ),
        fields,
        verbose,
    )

    runner = CICDSetup(mock=is_mock(), jenkins_host=jenkins_host)
    try:
        summary = runner.run(settings, skip_prereqs=skip_prereqs, skip_webhook=skip_webhook)
    except InfrakitError as e:
        handle_cli_error(e, console, verbose)

    if summary.checks:
        _print_checks(summary.checks)
    console.print()
    _print_summary(summary)


def files(
    directory: Path = typer.Option(Path("."), "--dir", "-d", help="Local checkout to write into"),
    answers_file: Optional[str] = typer.Option(None, "--answers", "-a", help="YAML file with pre-filled answers"),
    repo: Optional[str] = typer.Option(None, "--repo", help="GitHub SSH repo URL"),
    docker_user: Optional[str] = typer.Option(None, "--docker-user", help="Docker Hub username"),
    deploy_server: Optional[str] = typer.Option(None, "--deploy-server", help="Deployment server (user@ip)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help=f"App container port (default {DEFAULT_APP_PORT})"),
):
    """Write a Dockerfile and Jenkinsfile into a local checkout (missing files only)."""
    from infrakit.cli_support import handle_cli_error, is_mock, print_info, print_success
    from infrakit.scaffold.cicd_files import CICDFileGenerator

    if not directory.is_dir():
        handle_cli_error(FileNotFoundError(f"Directory not found: {directory}"), console)

    settings = collect_settings(
        _answers(answers_file, git_repo=repo, docker_user=docker_user, deploy_server=deploy_server, app_port=port),
        ["git_repo", "docker_user", "deploy_server", "app_port"],
    )

    generator = CICDFileGenerator(mock=is_mock())
    try:
        results = {
            "Dockerfile": generator.write_dockerfile(directory, settings),
            "Jenkinsfile": generator.write_jenkinsfile(directory, settings),
        }
    except (InfrakitError, OSError) as e:
        handle_cli_error(e, console)

    for name, written in results.items():
        if written:
            print_success(console, f"Created {directory / name}")
        else:
            print_info(console, f"{name} already exists, skipping creation.")


def webhook(
    repo: Optional[str] = typer.Option(None, "--repo", help="GitHub SSH repo URL"),
    token: Optional[str] = typer.Option(None, "--token", envvar="GITHUB_TOKEN", help="GitHub personal access token"),
    jenkins_host: Optional[str] = typer.Option(None, "--jenkins-host", help="Host GitHub should call (default: first local IP)"),
):
    """Create a push webhook that points GitHub at Jenkins."""
    from infrakit.cli_support import handle_cli_error, is_mock, print_info, print_success
    from infrakit.core.cicd_setup import CICDSetup

    settings = collect_settings(
        {"git_repo": repo, "github_token": token},
        ["git_repo", "github_token"],
        model=WebhookSettings,
    )

    try:
        result = CICDSetup(mock=is_mock(), jenkins_host=jenkins_host).create_webhook(settings)
    except InfrakitError as e:
        handle_cli_error(e, console)

    if result.status == "created":
        print_success(console, f"Webhook created: {result.hook_url}")
    else:
        print_info(console, f"Webhook already exists: {result.hook_url}")


def register_cicd_commands(app: typer.Typer, shared_console: Console):
    """Register cicd commands with the main Typer app."""
    global console
    console = shared_console

    cicd_app = typer.Typer(help="CI/CD wiring: git, Docker, Jenkins and GitHub webhooks")
    cicd_app.command()(check)
    cicd_app.command()(setup)
    cicd_app.command()(files)
    cicd_app.command()(webhook)

    app.add_typer(cicd_app, name="cicd")
