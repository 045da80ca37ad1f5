#!/usr/bin/env python3
"""infrakit CLI - Terraform scaffolding and CI/CD wiring."""
from typing import Optional

import typer
from rich.console import Console

from infrakit import __version__
from infrakit.cli_cicd_commands import register_cicd_commands
from infrakit.cli_terraform_commands import register_terraform_commands

app = typer.Typer(
    name="infrakit",
    help="""infrakit - Terraform scaffolding and CI/CD wiring

Quick start:
  infrakit terraform init          # Ubuntu EC2 Terraform project
  infrakit cicd check              # git / docker / jenkins on this host
  infrakit cicd setup              # Dockerfile, Jenkinsfile, GitHub webhook

More commands: infrakit --help
""",
    add_completion=False,
)

console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", help="Debug-level file logging"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Write logs to this file"),
):
    if verbose or log_file:
        from infrakit.cli_support import setup_file_logging
        setup_file_logging(log_file=log_file, verbose=verbose)


@app.command()
def version():
    """Show infrakit version."""
    console.print(f"infrakit v{__version__}")


register_terraform_commands(app, console)
register_cicd_commands(app, console)

if __name__ == "__main__":
    app()
