"""File scaffolding: Terraform projects and CI/CD pipeline files."""

from .cicd_files import CICDFileGenerator
from .terraform import TerraformScaffolder

__all__ = [
    "CICDFileGenerator",
    "TerraformScaffolder",
]
