"""CI/CD setup models: user inputs and step results."""
import re
from dataclasses import dataclass, field
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_APP_PORT = 3000


def repo_name_from_url(url: str) -> str:
    """Return the repository name from a git URL (basename without .git)."""
    name = url.rstrip('/').rsplit('/', 1)[-1]
    # SSH URLs without a path separator, e.g. git@host:repo.git
    name = name.rsplit(':', 1)[-1]
    if name.endswith('.git'):
        name = name[:-4]
    return name


class WebhookSettings(BaseModel):
    """Answers the webhook step needs: the repository and a token for it."""

    model_config = ConfigDict(extra='forbid')

    git_repo: str = Field(..., description="GitHub SSH (or HTTPS) repository URL")
    github_token: str = Field("", repr=False, description="GitHub personal access token")

    @field_validator('git_repo')
    @classmethod
    def validate_git_repo(cls, v):
        """Git URL must be SSH or HTTP(S) and name a repository."""
        v = v.strip()
        if not v.startswith(('git@', 'ssh://', 'https://', 'http://')):
            raise ValueError(
                f"Git URL must start with git@, ssh://, https:// or http://. Got: {v}"
            )
        if not repo_name_from_url(v):
            raise ValueError(f"Cannot determine repository name from '{v}'")
        return v

    @property
    def repo_name(self) -> str:
        return repo_name_from_url(self.git_repo)


class CICDSettings(WebhookSettings):
    """Answers collected from the user before running the CI/CD setup."""

    docker_user: str = Field(..., description="Docker Hub username")
    deploy_server: str = Field(..., description="Deployment target as user@host")
    app_port: int = Field(DEFAULT_APP_PORT, ge=1, le=65535, description="Port the app container exposes")

    @field_validator('docker_user')
    @classmethod
    def validate_docker_user(cls, v):
        v = v.strip()
        if not re.match(r'^[a-z0-9]+(?:[._-][a-z0-9]+)*$', v):
            raise ValueError(
                f"Docker Hub username '{v}' must be lowercase letters, digits, '.', '_' or '-'"
            )
        return v

    @field_validator('deploy_server')
    @classmethod
    def validate_deploy_server(cls, v):
        """Deploy server is an ssh destination (user@host)."""
        v = v.strip()
        if v.startswith('ssh '):
            v = v[4:].strip()
        if not re.match(r'^[^@\s]+@[^@\s]+$', v):
            raise ValueError(f"Deploy server must look like user@host. Got: {v}")
        return v


@dataclass
class CheckResult:
    """Outcome of a single prerequisite check."""
    name: str
    status: Literal["present", "installed", "missing", "failed"]
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status in ("present", "installed")


@dataclass
class SyncResult:
    """Outcome of cloning or pulling the application repository."""
    repo_name: str
    path: str
    action: Literal["cloned", "pulled"]
    commit: Optional[str] = None


@dataclass
class WebhookResult:
    """Outcome of the webhook creation call."""
    status: Literal["created", "already_exists", "skipped"]
    hook_url: str = ""
    hook_id: Optional[int] = None


@dataclass
class SetupSummary:
    """Everything the final CI/CD setup report needs."""
    repo_name: str
    deploy_server: str
    app_port: int
    checks: List[CheckResult] = field(default_factory=list)
    sync: Optional[SyncResult] = None
    dockerfile_created: bool = False
    jenkinsfile_created: bool = False
    webhook: Optional[WebhookResult] = None
