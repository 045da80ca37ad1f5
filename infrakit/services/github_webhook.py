"""GitHub webhook registration so pushes trigger Jenkins builds."""
import re
import subprocess
from typing import Any, Dict, Optional

import requests

from infrakit.core.config import get_config
from infrakit.core.errors import WebhookError
from infrakit.core.logger import get_logger
from infrakit.core.retry import retry_request
from infrakit.models.cicd import WebhookResult

logger = get_logger(__name__)

GITHUB_URL_PATTERN = re.compile(
    r'^(?:git@github\.com:|ssh://git@github\.com/|https?://github\.com/)'
    r'(?P<owner>[^/]+)/(?P<repo>[^/]+?)(?:\.git)?/?$'
)


def repo_api_url(git_url: str, api_base: Optional[str] = None) -> str:
    """Map a GitHub clone URL to its REST API repository URL.

    Example:
        git@github.com:acme/shop.git -> https://api.github.com/repos/acme/shop

    Raises:
        WebhookError: URL does not point at a github.com repository
    """
    api_base = (api_base or get_config().github_api).rstrip('/')
    match = GITHUB_URL_PATTERN.match(git_url.strip())
    if not match:
        raise WebhookError(f"Not a GitHub repository URL: {git_url}")
    return f"{api_base}/repos/{match.group('owner')}/{match.group('repo')}"


def detect_host_ip() -> str:
    """Return the first address reported by `hostname -I` (127.0.0.1 if unavailable)."""
    try:
        result = subprocess.run(
            ['hostname', '-I'],
            capture_output=True,
            text=True,
            check=True,
            timeout=5,
        )
    except (subprocess.CalledProcessError, FileNotFoundError, subprocess.TimeoutExpired) as e:
        logger.warning(f"Could not detect host IP, using 127.0.0.1: {e}")
        return "127.0.0.1"

    fields = result.stdout.split()
    return fields[0] if fields else "127.0.0.1"


def jenkins_hook_url(host: str, port: Optional[int] = None) -> str:
    """URL of the Jenkins GitHub plugin endpoint."""
    port = port or get_config().jenkins_port
    return f"http://{host}:{port}/github-webhook/"


def build_payload(hook_url: str) -> Dict[str, Any]:
    """Webhook body: a push-only JSON hook pointing at Jenkins."""
    return {
        "name": "web",
        "active": True,
        "events": ["push"],
        "config": {
            "url": hook_url,
            "content_type": "json",
            "insecure_ssl": "0",
        },
    }


class GitHubClient:
    """Minimal GitHub REST client authenticated with a personal access token."""

    def __init__(self, token: str, timeout: Optional[int] = None, mock: bool = False):
        self.token = token
        self.timeout = timeout or get_config().http_timeout
        self.mock = mock

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"token {self.token}",
            "Accept": "application/vnd.github.v3+json",
        }

    @retry_request(max_attempts=3, delay=1.0)
    def _post(self, url: str, payload: Dict[str, Any]) -> requests.Response:
        return requests.post(url, json=payload, headers=self.headers, timeout=self.timeout)

    def create_webhook(self, repo_api: str, hook_url: str) -> WebhookResult:
        """Create a push webhook on the repository.

        Args:
            repo_api: Repository API URL (see repo_api_url)
            hook_url: Endpoint GitHub should call

        Returns:
            WebhookResult with status 'created' or 'already_exists'

        Raises:
            WebhookError: Request failed or GitHub rejected it
        """
        if self.mock:
            logger.info(f"MOCK: Would create webhook on {repo_api} -> {hook_url}")
            return WebhookResult(status="created", hook_url=hook_url)

        if not self.token:
            raise WebhookError("A GitHub personal access token is required to create the webhook")

        logger.info(f"Creating GitHub webhook on {repo_api}...")

        try:
            response = self._post(f"{repo_api}/hooks", build_payload(hook_url))
        except requests.RequestException as e:
            raise WebhookError(f"Failed to reach GitHub: {e}") from e

        if response.status_code == 201:
            hook_id = response.json().get("id")
            logger.info(f"✓ Webhook created (id {hook_id})")
            return WebhookResult(status="created", hook_url=hook_url, hook_id=hook_id)

        if response.status_code == 422 and "already exists" in response.text.lower():
            logger.info("Webhook already exists, skipping creation.")
            return WebhookResult(status="already_exists", hook_url=hook_url)

        if response.status_code in (401, 403):
            message = "GitHub rejected the token (check it has admin:repo_hook scope)"
        elif response.status_code == 404:
            message = f"Repository not found or not accessible: {repo_api}"
        else:
            message = f"GitHub returned {response.status_code}: {response.text[:200]}"
        raise WebhookError(message, status_code=response.status_code)
