#!/usr/bin/env python3
"""
Ripple - JSON Output Module
"""

import json
from typing import Optional

from ..engine.models import PropagationResult
from ._base import get_export_data, write_output


def output(result: PropagationResult, output_path: Optional[str] = None):
    """
    Prints the JSON report of a finished run to standard output or a file.
    """
    export_data = get_export_data(result)

    json_string = json.dumps(export_data, indent=2, default=str)

    write_output(json_string, output_path, "JSON")
