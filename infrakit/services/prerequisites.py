"""Host prerequisite checks for the CI/CD toolchain.

Installs git and Docker through apt when they are missing. Jenkins is only
detected; installing it is left to the operator.
"""
import shutil
import subprocess
from typing import List, Optional

from infrakit.core.config import get_config
from infrakit.core.logger import get_logger
from infrakit.models.cicd import CheckResult

logger = get_logger(__name__)


class PrerequisiteChecker:
    """Checks for (and installs) the tools the pipeline relies on."""

    GIT_INSTALL = [
        ['sudo', 'apt', 'update'],
        ['sudo', 'apt', 'install', '-y', 'git'],
    ]

    DOCKER_INSTALL = [
        ['sudo', 'apt', 'install', '-y', 'docker.io'],
        ['sudo', 'systemctl', 'enable', 'docker'],
        ['sudo', 'systemctl', 'start', 'docker'],
    ]

    def __init__(self, mock: bool = False, timeout: Optional[int] = None):
        self.mock = mock
        self.timeout = timeout or get_config().command_timeout

    def command_exists(self, name: str) -> bool:
        """Return True when `name` is on PATH."""
        if self.mock:
            return True
        return shutil.which(name) is not None

    def service_active(self, name: str) -> bool:
        """Return True when the systemd unit is active."""
        if self.mock:
            return True

        try:
            result = subprocess.run(
                ['systemctl', 'is-active', '--quiet', name],
                capture_output=True,
                text=True,
                check=False,
                timeout=self.timeout,
            )
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            logger.debug(f"Could not query service {name}: {e}")
            return False
        return result.returncode == 0

    def _run_steps(self, steps: List[List[str]]) -> Optional[str]:
        """Run install commands in order; return an error message on the first failure."""
        for cmd in steps:
            logger.debug(f"Running: {' '.join(cmd)}")
            try:
                subprocess.run(cmd, capture_output=True, text=True, check=True, timeout=self.timeout)
            except subprocess.CalledProcessError as e:
                logger.error(f"Command failed: {' '.join(cmd)}: {e}")
                if e.stderr:
                    logger.error(f"Error output: {e.stderr}")
                return f"'{' '.join(cmd)}' exited with {e.returncode}"
            except (FileNotFoundError, subprocess.TimeoutExpired) as e:
                logger.error(f"Command failed: {' '.join(cmd)}: {e}")
                return str(e)
        return None

    def ensure_git(self) -> CheckResult:
        """Install git via apt when it is not on PATH."""
        if self.command_exists('git'):
            return CheckResult('git', 'present', "Git already installed.")

        logger.info("Git not found. Installing...")
        error = self._run_steps(self.GIT_INSTALL)
        if error:
            return CheckResult('git', 'failed', f"Git installation failed: {error}")
        return CheckResult('git', 'installed', "Git installed.")

    def ensure_docker(self) -> CheckResult:
        """Install, enable and start docker.io when docker is not on PATH."""
        if self.command_exists('docker'):
            return CheckResult('docker', 'present', "Docker already installed.")

        logger.info("Docker not found. Installing...")
        error = self._run_steps(self.DOCKER_INSTALL)
        if error:
            return CheckResult('docker', 'failed', f"Docker installation failed: {error}")
        return CheckResult('docker', 'installed', "Docker installed and started.")

    def check_jenkins(self) -> CheckResult:
        """Detect a running Jenkins (java on PATH and the jenkins unit active)."""
        if self.command_exists('java') and self.service_active('jenkins'):
            return CheckResult('jenkins', 'present', "Jenkins is installed and running.")

        logger.warning("Jenkins not found or not running. Skipping Jenkins installation.")
        return CheckResult(
            'jenkins',
            'missing',
            "Jenkins not found or not running. Make sure Jenkins is installed and running.",
        )

    def check_all(self) -> List[CheckResult]:
        """Run git, docker and jenkins checks in order."""
        return [self.ensure_git(), self.ensure_docker(), self.check_jenkins()]
