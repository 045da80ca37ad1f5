"""Data models for infrakit."""

from .cicd import (
    CICDSettings,
    CheckResult,
    SetupSummary,
    SyncResult,
    WebhookResult,
    WebhookSettings,
    repo_name_from_url,
)
from .terraform import TerraformProject

__all__ = [
    "CICDSettings",
    "CheckResult",
    "SetupSummary",
    "SyncResult",
    "TerraformProject",
    "WebhookResult",
    "WebhookSettings",
    "repo_name_from_url",
]
