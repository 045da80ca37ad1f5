"""CI/CD setup orchestration.

Runs the steps in order:
1. Prerequisite checks (git, docker, jenkins)
2. Clone or pull the app repo into the Jenkins workspace
3. Dockerfile if missing
4. Jenkinsfile if missing
5. GitHub push webhook pointing at Jenkins
"""
from pathlib import Path
from typing import Optional

from infrakit.core.config import InfrakitConfig, get_config
from infrakit.core.logger import get_logger
from infrakit.models.cicd import CICDSettings, SetupSummary, WebhookResult, WebhookSettings
from infrakit.scaffold.cicd_files import CICDFileGenerator
from infrakit.services.git_manager import GitManager
from infrakit.services.github_webhook import (
    GitHubClient,
    detect_host_ip,
    jenkins_hook_url,
    repo_api_url,
)
from infrakit.services.prerequisites import PrerequisiteChecker

logger = get_logger(__name__)


class CICDSetup:
    """Wires an application repository into Docker, Jenkins and GitHub."""

    def __init__(
        self,
        config: Optional[InfrakitConfig] = None,
        mock: bool = False,
        checker: Optional[PrerequisiteChecker] = None,
        git: Optional[GitManager] = None,
        files: Optional[CICDFileGenerator] = None,
        jenkins_host: Optional[str] = None,
    ):
        self.config = config or get_config()
        self.mock = mock
        self.checker = checker or PrerequisiteChecker(mock=mock)
        self.git = git or GitManager(user=self.config.jenkins_user, mock=mock)
        self.files = files or CICDFileGenerator(mock=mock)
        self.jenkins_host = jenkins_host

    @property
    def workspace(self) -> Path:
        return Path(self.config.jenkins_workspace)

    def create_webhook(self, settings: WebhookSettings) -> WebhookResult:
        """Register the Jenkins endpoint as a push webhook on the GitHub repo."""
        host = self.jenkins_host or ("127.0.0.1" if self.mock else detect_host_ip())
        hook_url = jenkins_hook_url(host, self.config.jenkins_port)
        api_url = repo_api_url(settings.git_repo, self.config.github_api)

        client = GitHubClient(settings.github_token, timeout=self.config.http_timeout, mock=self.mock)
        return client.create_webhook(api_url, hook_url)

    def run(
        self,
        settings: CICDSettings,
        skip_prereqs: bool = False,
        skip_webhook: bool = False,
    ) -> SetupSummary:
        """Run the full setup.

        Raises:
            GitError: The repository could not be cloned or pulled
            FileWriteError: A pipeline file could not be written
            WebhookError: GitHub rejected the webhook
        """
        summary = SetupSummary(
            repo_name=settings.repo_name,
            deploy_server=settings.deploy_server,
            app_port=settings.app_port,
        )

        if not skip_prereqs:
            logger.info("Checking prerequisites...")
            summary.checks = self.checker.check_all()
            for check in summary.checks:
                if check.status == "failed":
                    logger.error(check.message)
                elif check.status == "missing":
                    logger.warning(check.message)
                else:
                    logger.info(check.message)

        summary.sync = self.git.sync_repo(settings.git_repo, self.workspace)
        repo_path = Path(summary.sync.path)

        # The workspace belongs to the jenkins user, so writes go through sudo
        use_sudo = bool(self.config.jenkins_user)
        summary.dockerfile_created = self.files.write_dockerfile(repo_path, settings, sudo=use_sudo)
        summary.jenkinsfile_created = self.files.write_jenkinsfile(repo_path, settings, sudo=use_sudo)

        if skip_webhook:
            summary.webhook = WebhookResult(status="skipped")
        else:
            summary.webhook = self.create_webhook(settings)

        logger.info(f"CI/CD setup complete for {settings.repo_name}")
        return summary
