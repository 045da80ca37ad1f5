"""infrakit runtime configuration and settings."""
import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class InfrakitConfig:
    """Runtime configuration for infrakit operations.

    Attributes:
        jenkins_workspace: Directory Jenkins builds out of
        jenkins_user: System user that owns the Jenkins workspace
        jenkins_port: Port the Jenkins web UI listens on (webhook target)
        github_api: Base URL of the GitHub REST API
        http_timeout: Timeout in seconds for GitHub API calls
        command_timeout: Timeout in seconds for apt/git/systemctl calls
    """

    jenkins_workspace: str = "/var/lib/jenkins/workspace"
    jenkins_user: str = "jenkins"
    jenkins_port: int = 8080

    github_api: str = "https://api.github.com"
    http_timeout: int = 10

    command_timeout: int = 600  # apt installs can be slow

    @classmethod
    def from_env(cls) -> "InfrakitConfig":
        """Create config from INFRAKIT_* environment variables."""
        return cls(
            jenkins_workspace=os.getenv("INFRAKIT_JENKINS_WORKSPACE", cls.jenkins_workspace),
            jenkins_user=os.getenv("INFRAKIT_JENKINS_USER", cls.jenkins_user),
            jenkins_port=int(os.getenv("INFRAKIT_JENKINS_PORT", cls.jenkins_port)),
            github_api=os.getenv("INFRAKIT_GITHUB_API", cls.github_api).rstrip("/"),
            http_timeout=int(os.getenv("INFRAKIT_HTTP_TIMEOUT", cls.http_timeout)),
            command_timeout=int(os.getenv("INFRAKIT_COMMAND_TIMEOUT", cls.command_timeout)),
        )


_config: Optional[InfrakitConfig] = None


def get_config() -> InfrakitConfig:
    """Get the global infrakit configuration (built from environment on first use)."""
    global _config
    if _config is None:
        _config = InfrakitConfig.from_env()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() rereads the environment."""
    global _config
    _config = None
