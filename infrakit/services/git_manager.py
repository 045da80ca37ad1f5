"""Git repository management for the Jenkins workspace."""
import subprocess
from pathlib import Path
from typing import List, Optional

from infrakit.core.config import get_config
from infrakit.core.errors import GitError
from infrakit.core.logger import get_logger
from infrakit.models.cicd import SyncResult, repo_name_from_url

logger = get_logger(__name__)


class GitManager:
    """Clones and updates the application repository as the Jenkins user."""

    def __init__(self, user: Optional[str] = None, mock: bool = False):
        """Initialize git manager.

        Args:
            user: Run commands as this user via `sudo -u` (None runs as the caller)
            mock: Log commands instead of running them
        """
        self.user = user
        self.mock = mock
        self.timeout = get_config().command_timeout

    def _as_user(self, cmd: List[str]) -> List[str]:
        if self.user:
            return ['sudo', '-u', self.user] + cmd
        return cmd

    def _run(self, cmd: List[str], cwd: Optional[Path] = None) -> subprocess.CompletedProcess:
        """Run a command as the configured user.

        Raises:
            subprocess.CalledProcessError: Command exited non-zero
            GitError: Command timed out or its executable is missing
        """
        full_cmd = self._as_user(cmd)
        logger.debug(f"Running: {' '.join(full_cmd)} (cwd={cwd})")
        try:
            return subprocess.run(
                full_cmd,
                cwd=str(cwd) if cwd else None,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            logger.error(f"Command timed out after {self.timeout}s: {' '.join(full_cmd)}")
            raise GitError(f"'{' '.join(cmd)}' timed out after {self.timeout}s") from e
        except FileNotFoundError as e:
            raise GitError(f"Command not found: {full_cmd[0]}") from e

    def ensure_workspace(self, workspace: Path) -> None:
        """Create the workspace directory owned by the configured user."""
        if self.mock:
            logger.info(f"MOCK: Would create workspace {workspace}")
            return

        try:
            self._run(['mkdir', '-p', str(workspace)])
        except subprocess.CalledProcessError as e:
            raise GitError(f"Failed to create workspace {workspace}: {e}", e.stderr or "") from e

    def repo_exists(self, path: Path) -> bool:
        """Check whether the repository directory is already present."""
        if self.mock:
            logger.info(f"MOCK: Would check for repository at {path}")
            return False
        return Path(path).is_dir()

    def clone_repo(self, url: str, workspace: Path) -> None:
        """Clone url into workspace/<repo_name>."""
        if self.mock:
            logger.info(f"MOCK: Would clone {url} into {workspace}")
            return

        try:
            self._run(['git', 'clone', url], cwd=workspace)
            logger.info(f"✓ Cloned {url}")
        except subprocess.CalledProcessError as e:
            logger.error(f"Failed to clone repository: {e}")
            if e.stderr:
                logger.error(f"Error output: {e.stderr}")
            raise GitError(f"Failed to clone {url}", e.stderr or "") from e

    def pull_repo(self, path: Path) -> None:
        """Pull latest changes in an existing checkout."""
        if self.mock:
            logger.info(f"MOCK: Would git pull in {path}")
            return

        try:
            result = self._run(['git', 'pull'], cwd=path)
            logger.info("✓ Pulled latest changes")
            if result.stdout:
                logger.debug(f"Git output: {result.stdout}")
        except subprocess.CalledProcessError as e:
            logger.error(f"Failed to pull repository: {e}")
            if e.stderr:
                logger.error(f"Error output: {e.stderr}")
            raise GitError(f"Failed to pull {path}", e.stderr or "") from e

    def get_current_commit(self, path: Path) -> Optional[str]:
        """Get the checked-out commit hash, or None if it cannot be read."""
        if self.mock:
            return "mock-commit-hash-1234567890"

        try:
            result = self._run(['git', 'rev-parse', 'HEAD'], cwd=path)
            return result.stdout.strip()
        except (subprocess.CalledProcessError, GitError) as e:
            logger.error(f"Failed to get commit hash: {e}")
            return None

    def sync_repo(self, url: str, workspace: Path) -> SyncResult:
        """Clone the repository, or pull it if it is already in the workspace.

        Raises:
            GitError: Creating the workspace, cloning, or pulling failed
        """
        workspace = Path(workspace)
        repo_name = repo_name_from_url(url)
        repo_path = workspace / repo_name

        self.ensure_workspace(workspace)

        if not self.repo_exists(repo_path):
            logger.info(f"Cloning repository {repo_name}...")
            self.clone_repo(url, workspace)
            action = "cloned"
        else:
            logger.info(f"Repository {repo_name} exists. Pulling latest changes...")
            self.pull_repo(repo_path)
            action = "pulled"

        return SyncResult(
            repo_name=repo_name,
            path=str(repo_path),
            action=action,
            commit=self.get_current_commit(repo_path),
        )
