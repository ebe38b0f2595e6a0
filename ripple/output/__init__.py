#!/usr/bin/env python3
"""
Ripple - Output Modules Package
"""

from . import json, sse, yaml

__all__ = [
    "json",
    "sse",
    "yaml",
]
