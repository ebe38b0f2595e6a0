#!/usr/bin/env python3
"""
Ripple - YAML Output Module
"""

from typing import Optional

import yaml

from ..engine.models import PropagationResult
from ._base import get_export_data, write_output


class NoTupleDumper(yaml.SafeDumper):
    """A YAML dumper that represents tuples as standard lists."""

    def represent_tuple(self, data):
        return self.represent_sequence("tag:yaml.org,2002:seq", data)


NoTupleDumper.add_representer(tuple, NoTupleDumper.represent_tuple)


def output(result: PropagationResult, output_path: Optional[str] = None):
    """
    Prints the YAML report of a finished run to standard output or a file.
    """
    export_data = get_export_data(result)

    yaml_string = yaml.dump(export_data, Dumper=NoTupleDumper, default_flow_style=False, sort_keys=False)

    write_output(yaml_string, output_path, "YAML")
