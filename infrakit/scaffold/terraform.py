"""Terraform project scaffolding (AWS EC2 Ubuntu host)."""
from pathlib import Path
from typing import Dict, List, Optional

from infrakit.core.logger import get_logger
from infrakit.core.template_renderer import TemplateRenderer
from infrakit.models.terraform import TerraformProject

logger = get_logger(__name__)

# Output path (relative to the project dir) -> template name, in write order
TERRAFORM_FILES = [
    ("providers.tf", "terraform/providers.tf.j2"),
    ("variables.tf", "terraform/variables.tf.j2"),
    ("terraform.tfvars", "terraform/terraform.tfvars.j2"),
    ("versions.tf", "terraform/versions.tf.j2"),
    ("main.tf", "terraform/main.tf.j2"),
    ("outputs.tf", "terraform/outputs.tf.j2"),
    ("modules/ec2/main.tf", "terraform/modules/ec2/main.tf.j2"),
    ("modules/ec2/variables.tf", "terraform/modules/ec2/variables.tf.j2"),
    ("modules/ec2/outputs.tf", "terraform/modules/ec2/outputs.tf.j2"),
]


class TerraformScaffolder:
    """Generates a Terraform project with a reusable EC2 module."""

    def __init__(self, renderer: Optional[TemplateRenderer] = None):
        self.renderer = renderer or TemplateRenderer()

    def render_files(self, project: TerraformProject) -> Dict[str, str]:
        """Render every project file.

        Returns:
            Mapping of path relative to the project dir -> file content,
            in the order the files are written.
        """
        context = {
            "region": project.region,
            "instance_type": project.instance_type,
            "key_name": project.key_name,
        }
        return {
            rel_path: self.renderer.render(template, context)
            for rel_path, template in TERRAFORM_FILES
        }

    def scaffold(self, project: TerraformProject, output_dir: Optional[Path] = None) -> Path:
        """Write the Terraform project to disk.

        Existing files are overwritten so the project always matches the
        requested inputs.

        Args:
            project: Terraform inputs
            output_dir: Parent directory (defaults to current dir)

        Returns:
            Path to the project directory
        """
        output_dir = Path(output_dir) if output_dir else Path.cwd()
        project_path = output_dir / project.project_dir

        (output_dir / project.module_dir).mkdir(parents=True, exist_ok=True)
        logger.info("Created project directories.")

        for rel_path, content in self.render_files(project).items():
            target = project_path / rel_path
            target.write_text(content)
            logger.debug(f"Wrote {target}")

        logger.info(f"Terraform project created at {project_path}")
        return project_path

    @staticmethod
    def next_steps(project: TerraformProject) -> List[str]:
        """Commands the user runs after scaffolding."""
        return [
            f"cd {project.project_dir}",
            "terraform init",
            "terraform apply -auto-approve",
            "terraform output ssh_command to get SSH command",
        ]
