"""Shared test fixtures for infrakit tests."""
import pytest

from infrakit.core import config as config_module
from infrakit.core.config import InfrakitConfig
from infrakit.models.cicd import CICDSettings


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Start every test from default settings and outside mock mode."""
    monkeypatch.delenv("INFRAKIT_MOCK", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    config_module.reset_config()
    yield
    config_module.reset_config()


@pytest.fixture
def settings():
    """Typical answers for the CI/CD setup prompts."""
    return CICDSettings(
        git_repo="git@github.com:acme/shop-api.git",
        docker_user="acme",
        deploy_server="deploy@10.0.0.5",
        app_port=8080,
        github_token="test-token",
    )


@pytest.fixture
def workspace_config(tmp_path):
    """Config whose Jenkins workspace lives under tmp_path."""
    return InfrakitConfig(jenkins_workspace=str(tmp_path / "workspace"), jenkins_user="jenkins")
