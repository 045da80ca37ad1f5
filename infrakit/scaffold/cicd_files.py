"""Dockerfile and Jenkinsfile generation for the application repository."""
import subprocess
from pathlib import Path
from typing import Optional

from infrakit.core.config import get_config
from infrakit.core.errors import FileWriteError
from infrakit.core.logger import get_logger
from infrakit.core.template_renderer import TemplateRenderer
from infrakit.models.cicd import CICDSettings

logger = get_logger(__name__)


class CICDFileGenerator:
    """Renders the pipeline files and writes them only when missing."""

    def __init__(self, renderer: Optional[TemplateRenderer] = None, mock: bool = False):
        self.renderer = renderer or TemplateRenderer()
        self.mock = mock

    def render_dockerfile(self, settings: CICDSettings) -> str:
        """Render a Node.js Dockerfile exposing the app port."""
        return self.renderer.render("cicd/Dockerfile.j2", {"app_port": settings.app_port})

    def render_jenkinsfile(self, settings: CICDSettings) -> str:
        """Render the build/test/push/deploy pipeline."""
        return self.renderer.render("cicd/Jenkinsfile.j2", {
            "docker_user": settings.docker_user,
            "repo_name": settings.repo_name,
            "git_repo": settings.git_repo,
            "deploy_server": settings.deploy_server,
            "app_port": settings.app_port,
        })

    def write_if_missing(self, path: Path, content: str, sudo: bool = False) -> bool:
        """Write content to path unless a file is already there.

        Args:
            path: Target file
            content: File content
            sudo: Pipe through `sudo tee` (for root-owned workspaces)

        Returns:
            True if the file was written, False if it already existed

        Raises:
            FileWriteError: The write (or `sudo tee`) failed
        """
        path = Path(path)
        if path.exists():
            logger.info(f"{path.name} already exists, skipping creation.")
            return False

        logger.info(f"Creating {path.name}...")

        if self.mock:
            logger.info(f"MOCK: Would write {path}")
            return True

        if sudo:
            try:
                subprocess.run(
                    ['sudo', 'tee', str(path)],
                    input=content,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.PIPE,
                    text=True,
                    check=True,
                    timeout=get_config().command_timeout,
                )
            except subprocess.CalledProcessError as e:
                logger.error(f"Failed to write {path}: {e}")
                if e.stderr:
                    logger.error(f"Error output: {e.stderr}")
                raise FileWriteError(f"Failed to write {path} via sudo tee", e.stderr or "") from e
            except subprocess.TimeoutExpired as e:
                # sudo waiting on a password prompt ends up here
                raise FileWriteError(f"Timed out writing {path} via sudo tee") from e
            except FileNotFoundError as e:
                raise FileWriteError(f"sudo not found, cannot write {path}") from e
        else:
            try:
                path.write_text(content)
            except OSError as e:
                raise FileWriteError(f"Failed to write {path}: {e}") from e
        return True

    def write_dockerfile(self, repo_path: Path, settings: CICDSettings, sudo: bool = False) -> bool:
        return self.write_if_missing(Path(repo_path) / "Dockerfile", self.render_dockerfile(settings), sudo)

    def write_jenkinsfile(self, repo_path: Path, settings: CICDSettings, sudo: bool = False) -> bool:
        return self.write_if_missing(Path(repo_path) / "Jenkinsfile", self.render_jenkinsfile(settings), sudo)
