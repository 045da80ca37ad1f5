"""Shared utilities for infrakit CLI modules."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape


def is_mock() -> bool:
    """Return True when the CLI runs in mock mode (no shell-outs, no HTTP)."""
    return os.environ.get("INFRAKIT_MOCK") == "1"


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> None:
    """Set up file logging for CLI commands."""
    from infrakit.core.logger import setup_file_logging as _setup_file_logging
    _setup_file_logging(log_file=log_file, verbose=verbose)


def load_answers(path: Optional[str]) -> Dict[str, Any]:
    """Load pre-filled prompt answers from a YAML file.

    Raises:
        FileNotFoundError: File does not exist
        ValueError: File is not a YAML mapping
    """
    if not path:
        return {}

    answers_path = Path(path)
    if not answers_path.exists():
        raise FileNotFoundError(f"Answers file not found: {answers_path}")

    with open(answers_path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Answers file must contain a mapping, got {type(data).__name__}")
    return data


def handle_cli_error(
    e: Exception,
    console: Console,
    verbose: bool = False,
    exit_code: int = 1
) -> None:
    """Print an error consistently and exit.

    Args:
        e: Exception to report
        console: Rich console for output
        verbose: Show the traceback too
        exit_code: Exit code to use
    """
    # pydantic messages contain [type=...] which Rich would read as markup
    console.print(f"[red]Error:[/red] {escape(str(e))}")
    if verbose:
        console.print_exception()
    raise typer.Exit(exit_code)


def print_success(console: Console, message: str, prefix: str = "✓") -> None:
    console.print(f"[green]{prefix}[/green] {message}")


def print_error(console: Console, message: str, prefix: str = "✗") -> None:
    console.print(f"[red]{prefix}[/red] {message}")


def print_warning(console: Console, message: str, prefix: str = "⚠") -> None:
    console.print(f"[yellow]{prefix}[/yellow] {message}")


def print_info(console: Console, message: str, prefix: str = "ℹ") -> None:
    console.print(f"[cyan]{prefix}[/cyan] {message}")
