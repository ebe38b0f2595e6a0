#!/usr/bin/env python3
"""
Ripple - Output Handling Module
"""
import importlib
import os
from typing import Optional

from .config import console
from .engine.models import PropagationResult

REPORT_FORMATS = ("json", "yaml")


def format_for_path(output_path: str) -> str:
    """Picks the report format from a file extension, defaulting to JSON."""
    ext = os.path.splitext(output_path)[1].lower()
    return "yaml" if ext in (".yaml", ".yml") else "json"


def handle_output(
    result: PropagationResult, output_format: str, output_path: Optional[str] = None
):
    """
    Handles report generation for the console and for files.

    Args:
        result: The summary of a finished run.
        output_format: The report format ('json' or 'yaml').
        output_path: Optional file path to save the output. If None, prints to console.
    """
    if output_format not in REPORT_FORMATS:
        console.print(
            f"[bold red]Error: Output format '{output_format}' is not supported.[/bold red]"
        )
        return

    try:
        # Dynamically load the output module (e.g., ripple.output.json)
        output_module = importlib.import_module(
            f".output.{output_format}", package="ripple"
        )
        output_module.output(result, output_path)
        if output_path:
            console.print(
                f"[green]✓ Report successfully saved to:[/] [bold cyan]{output_path}[/bold cyan]"
            )
    except Exception as e:
        console.print(
            f"[bold red]An error occurred while generating the '{output_format}' report: {e}[/bold red]"
        )
