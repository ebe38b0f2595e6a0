#!/usr/bin/env python3
"""
Ripple - Base Output Module
Contains shared utilities for machine-readable output formats.
"""

import builtins
from typing import Any, Dict, Optional

from ..config import console
from ..engine.models import PropagationResult


def get_export_data(result: PropagationResult) -> Dict[str, Any]:
    """
    Builds the report dictionary for a finished run. Targets that never
    propagated are listed without a record or timing.
    """
    return result.to_dict()


def write_output(content: str, output_path: Optional[str], file_type: str):
    """Writes the provided content to a file or prints it to the console."""
    if output_path:
        try:
            with open(output_path, "w", encoding="utf-8") as f:
                f.write(content)
        except IOError as e:
            console.print(f"[bold red]Error writing {file_type.upper()} file to {output_path}: {e}[/bold red]")
    else:
        builtins.print(content)
