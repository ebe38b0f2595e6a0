#!/usr/bin/env python3
"""
Ripple - Configuration Manager Module
Handles loading and merging of settings from command-line arguments and config
files, and turns the merged settings into the RunConfig handed to the engine.
"""
import argparse
import copy
import json
import logging
import os
from typing import Any, Dict, Optional, Tuple

import yaml

from .config import DEFAULT_SETTINGS, QUERY_TIMEOUT, RECORD_TYPES, console
from .engine.models import MatchCriteria, RunConfig
from .utils import is_valid_domain, parse_duration, parse_server_address

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when the settings cannot produce a valid check."""


def deep_merge_dicts(base: Dict[str, Any], new: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merges two dictionaries. 'new' values overwrite 'base' values.
    If both values for a key are dictionaries, it merges them recursively.
    Empty values in 'new' leave the 'base' value in place.
    """
    merged = base.copy()
    for key, value in new.items():
        if value in (None, "", [], {}):
            continue
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = deep_merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config_file(file_path: str) -> dict:
    """Loads a configuration file, supporting JSON and YAML."""
    _, ext = os.path.splitext(file_path)
    ext = ext.lower()

    with open(file_path, "r") as f:
        if ext == ".json":
            data = json.load(f)
        elif ext in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            raise ValueError(
                f"Unsupported config file extension: {ext}. Please use .json, .yaml, or .yml."
            )
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("The config file must contain a mapping of settings.")
    return data


def save_config(settings: Dict[str, Any], file_path: str):
    """Writes the effective settings to a YAML file."""
    with open(file_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(settings, f, default_flow_style=False, sort_keys=False)


def _cli_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Maps explicitly given command-line flags onto the settings layout."""
    defaults: Dict[str, Any] = {}
    if getattr(args, "wait", None):
        defaults["timeout"] = args.wait
    if getattr(args, "retry", None):
        defaults["retry"] = args.retry
    if getattr(args, "type", None):
        defaults["record_type"] = args.type

    overrides: Dict[str, Any] = {"defaults": defaults}
    if getattr(args, "resolvers", None):
        overrides["public_resolvers"] = [r.strip() for r in args.resolvers.split(",") if r.strip()]
    if getattr(args, "root_servers", None):
        overrides["root_servers"] = [r.strip() for r in args.root_servers.split(",") if r.strip()]
    return overrides


def setup_configuration(
    parser: argparse.ArgumentParser, argv: Optional[list] = None
) -> Tuple[Optional[argparse.Namespace], Dict[str, Any]]:
    """
    Parses CLI args, loads the config file and merges the settings.

    The priority is:
    1. Built-in defaults
    2. Values from the JSON/YAML config file (if provided, overrides defaults)
    3. Values explicitly set via command-line arguments (highest priority, overrides all)

    Returns:
        A tuple containing the parsed arguments (or None on error) and the
        merged settings dictionary.
    """
    args = parser.parse_args(argv)

    settings = copy.deepcopy(DEFAULT_SETTINGS)

    config_file_path = args.config
    if config_file_path:
        try:
            config_data = load_config_file(config_file_path)
        except FileNotFoundError:
            console.print(
                f"[bold red]Error: Config file '{config_file_path}' not found.[/bold red]"
            )
            return None, {}
        except (json.JSONDecodeError, yaml.YAMLError, ValueError) as e:
            console.print(
                f"[bold red]Error: Could not decode config file '{config_file_path}'. {e}[/bold red]"
            )
            return None, {}
        settings = deep_merge_dicts(settings, config_data)

    settings = deep_merge_dicts(settings, _cli_overrides(args))
    return args, settings


def _validate_servers(servers: Any, key: str) -> Tuple[str, ...]:
    if not isinstance(servers, list) or not servers:
        raise ConfigError(f"'{key}' must be a non-empty list of addresses")
    for server in servers:
        try:
            parse_server_address(str(server))
        except ValueError:
            raise ConfigError(f"Invalid address '{server}' in '{key}'")
    return tuple(str(s) for s in servers)


def _duration(value: Any, label: str) -> float:
    try:
        seconds = parse_duration(value)
    except ValueError:
        raise ConfigError(f"Invalid {label} format: {value!r}")
    if seconds <= 0:
        raise ConfigError(f"The {label} must be greater than zero")
    return seconds


def build_run_config(args: argparse.Namespace, settings: Dict[str, Any]) -> RunConfig:
    """
    Validates the merged settings and builds the RunConfig for one check.

    Raises:
        ConfigError: If anything required is missing or malformed.
    """
    domain = getattr(args, "domain", None)
    if not domain:
        raise ConfigError("No target domain specified.")
    if not is_valid_domain(domain.strip()):
        raise ConfigError(f"Invalid domain format '{domain}'.")

    match = getattr(args, "match", None)
    if not match:
        raise ConfigError("A match value (-m/--match) is required.")

    defaults = settings.get("defaults", {})
    record_type = str(defaults.get("record_type", "a")).upper()
    if record_type not in RECORD_TYPES:
        raise ConfigError(
            f"Unsupported record type: {record_type}. Choose from {', '.join(RECORD_TYPES)}."
        )

    query_timeout = getattr(args, "query_timeout", None) or QUERY_TIMEOUT
    if query_timeout <= 0:
        raise ConfigError("The query timeout must be greater than zero")

    return RunConfig(
        domain=domain,
        criteria=MatchCriteria(record_type=record_type, value=match),
        poll_interval=_duration(defaults.get("retry"), "retry interval"),
        deadline=_duration(defaults.get("timeout"), "timeout"),
        root_servers=_validate_servers(settings.get("root_servers"), "root_servers"),
        public_resolvers=_validate_servers(settings.get("public_resolvers"), "public_resolvers"),
        query_timeout=float(query_timeout),
    )
