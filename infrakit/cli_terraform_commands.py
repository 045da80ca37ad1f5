"""Terraform scaffolding CLI commands."""
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from infrakit.core.errors import InfrakitError
from infrakit.models.terraform import TerraformProject
from infrakit.scaffold.terraform import TerraformScaffolder

# Module-level console instance (will be set by register function)
console: Console = Console()


def _build_project(project_dir: str, region: str, instance_type: str, key_name: str) -> TerraformProject:
    from infrakit.cli_support import handle_cli_error

    try:
        return TerraformProject(
            project_dir=project_dir,
            region=region,
            instance_type=instance_type,
            key_name=key_name,
        )
    except ValidationError as e:
        handle_cli_error(e, console)


def init(
    project_dir: str = typer.Option("terraform-ubuntu-project", "--dir", "-d", help="Project directory name"),
    region: str = typer.Option("us-east-1", "--region", "-r", help="AWS region"),
    instance_type: str = typer.Option("t3.micro", "--instance-type", "-t", help="EC2 instance type"),
    key_name: str = typer.Option("terraform-generated-key", "--key-name", "-k", help="Name of the generated key pair"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Parent directory (default: current directory)"),
):
    """Create a Terraform project for an Ubuntu EC2 host.

    Writes providers, variables, tfvars and an ec2 module that generates an
    SSH key pair, a security group allowing SSH, and the instance itself.

    Examples:
        infrakit terraform init
        infrakit terraform init --region eu-west-1 --instance-type t3.small
    """
    from infrakit.cli_support import handle_cli_error, print_success

    project = _build_project(project_dir, region, instance_type, key_name)

    try:
        project_path = TerraformScaffolder().scaffold(project, output_dir)
    except (InfrakitError, OSError) as e:
        handle_cli_error(e, console)

    print_success(console, f"Terraform project created at {project_path}")
    console.print("\n[cyan]Next steps:[/cyan]")
    for i, step in enumerate(TerraformScaffolder.next_steps(project), start=1):
        console.print(f"  {i}. {step}")


def files(
    project_dir: str = typer.Option("terraform-ubuntu-project", "--dir", "-d", help="Project directory name"),
    region: str = typer.Option("us-east-1", "--region", "-r", help="AWS region"),
    instance_type: str = typer.Option("t3.micro", "--instance-type", "-t", help="EC2 instance type"),
    key_name: str = typer.Option("terraform-generated-key", "--key-name", "-k", help="Name of the generated key pair"),
    show: Optional[str] = typer.Option(None, "--show", "-s", help="Print the content of one file"),
):
    """Preview the files 'terraform init' would write (nothing is written)."""
    from infrakit.cli_support import handle_cli_error

    project = _build_project(project_dir, region, instance_type, key_name)

    try:
        rendered = TerraformScaffolder().render_files(project)
    except InfrakitError as e:
        handle_cli_error(e, console)

    if show:
        if show not in rendered:
            handle_cli_error(ValueError(f"Unknown file '{show}'. Choose from: {', '.join(rendered)}"), console)
        typer.echo(rendered[show], nl=False)
        return

    console.print(f"[bold cyan]{project.project_dir}/[/bold cyan]")
    for rel_path, content in rendered.items():
        console.print(f"  {rel_path} [dim]({len(content.splitlines())} lines)[/dim]")


def register_terraform_commands(app: typer.Typer, shared_console: Console):
    """Register terraform commands with the main Typer app."""
    global console
    console = shared_console

    terraform_app = typer.Typer(help="Terraform project scaffolding")
    terraform_app.command()(init)
    terraform_app.command()(files)

    app.add_typer(terraform_app, name="terraform")
