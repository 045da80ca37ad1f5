"""Terraform project models."""
import re
from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TerraformProject(BaseModel):
    """Inputs substituted into the generated Terraform project."""

    model_config = ConfigDict(extra='forbid')

    project_dir: str = Field("terraform-ubuntu-project", description="Directory the project is written to")
    region: str = Field("us-east-1", description="AWS region to deploy resources in")
    instance_type: str = Field("t3.micro", description="EC2 instance type")
    key_name: str = Field("terraform-generated-key", description="Name of the generated AWS key pair")

    @field_validator('project_dir')
    @classmethod
    def validate_project_dir(cls, v):
        """Project dir must be a non-empty path."""
        if not v or not v.strip():
            raise ValueError("Project directory must not be empty")
        return v

    @field_validator('region')
    @classmethod
    def validate_region(cls, v):
        """Validate AWS region names like us-east-1 or ap-southeast-2."""
        if not re.match(r'^[a-z]{2}(-[a-z]+)+-\d+$', v):
            raise ValueError(f"'{v}' is not a valid AWS region name (e.g. us-east-1)")
        return v

    @field_validator('instance_type')
    @classmethod
    def validate_instance_type(cls, v):
        """Validate EC2 instance types like t3.micro."""
        if not re.match(r'^[a-z0-9]+\.[a-z0-9]+$', v):
            raise ValueError(f"'{v}' is not a valid EC2 instance type (e.g. t3.micro)")
        return v

    @field_validator('key_name')
    @classmethod
    def validate_key_name(cls, v):
        if not v or re.search(r'\s', v):
            raise ValueError("Key name must be non-empty and contain no whitespace")
        return v

    @property
    def module_dir(self) -> str:
        """Relative path of the EC2 module inside the project."""
        return str(PurePosixPath(self.project_dir) / "modules" / "ec2")
