#!/usr/bin/env python3
"""
Ripple - Display Module
Handles all console output formatting using the 'rich' library.
"""
from typing import Any, Dict, List, Optional

from rich.console import Group
from rich.panel import Panel
from rich.table import Table

from .engine.events import (
    Cancelled,
    Complete,
    Discovered,
    Error,
    ProgressEvent,
    ResolversInitialized,
    TargetPropagated,
    Timeout,
)
from .engine.models import AUTHORITATIVE, PropagationResult, RunConfig, TargetStatus
from .utils import format_duration

# --- Generic Table Helper ---


def _create_generic_table(
    data_list: List[Dict[str, Any]],
    title: str,
    columns: Dict[str, Dict[str, Any]],
    caption: str = "",
    empty_message: str = "No data to display.",
) -> Table:
    """
    Creates a rich Table from a list of dictionaries in a data-driven way.

    Args:
        data_list: The list of data dictionaries to display.
        title: The title of the table.
        columns: A dictionary defining the columns. Keys are the keys in the data dict,
                 and values are dicts for Rich table.add_column arguments.
        caption: The table caption.
        empty_message: The message to display if data_list is empty.
    """
    table = Table(title=title, show_header=True, header_style="bold magenta")
    for col_config in columns.values():
        table.add_column(**col_config)

    if not data_list:
        table.add_row(empty_message)
    for item in data_list:
        row = [str(item.get(key, "")) for key in columns.keys()]
        table.add_row(*row)

    table.caption = caption
    return table


# --- Progress Lines ---


def display_header(config: RunConfig, quiet: bool) -> Optional[str]:
    if quiet:
        return None
    criteria = config.criteria
    return (
        f"Testing DNS propagation for [bold]{config.domain.rstrip('.')}[/bold] "
        f"({criteria.record_type}={criteria.value})\n"
        f"Retry interval: {format_duration(config.poll_interval)}, "
        f"Max duration: {format_duration(config.deadline)}\n"
    )


def format_event(event: ProgressEvent, record_type: str) -> str:
    """Formats one progress event as a console line."""
    if isinstance(event, Discovered):
        lines = [f"Found {len(event.endpoints)} authoritative nameservers:"]
        lines += [f"  - {ep.name} ({ep.display_address})" for ep in event.endpoints]
        return "\n".join(lines) + "\n"
    if isinstance(event, ResolversInitialized):
        names = ", ".join(ep.name for ep in event.endpoints)
        return f"Checking {len(event.endpoints)} resolvers: {names}\n"
    if isinstance(event, TargetPropagated):
        found = format_duration(event.found_after)
        if event.role == AUTHORITATIVE:
            return (
                f" - {found} authoritative [cyan]{event.endpoint.name}[/cyan] "
                f"has record {record_type} ({event.matched_record})"
            )
        return (
            f" - {found} resolver [cyan]{event.endpoint.name}[/cyan] "
            f"propagated record {record_type} ({event.matched_record})"
        )
    if isinstance(event, Complete):
        return f"\n[bold green]✓ All servers propagated after {format_duration(event.elapsed)}[/bold green]"
    if isinstance(event, Timeout):
        return f"\n[bold yellow]Timeout reached after {format_duration(event.elapsed)}[/bold yellow]"
    if isinstance(event, Cancelled):
        return f"\n[bold yellow]Check cancelled after {format_duration(event.elapsed)}[/bold yellow]"
    if isinstance(event, Error):
        return f"[bold red]Error: {event.message}[/bold red]"
    return str(event)


# --- Summary ---


def _status_rows(targets: List[TargetStatus]) -> List[Dict[str, Any]]:
    rows = []
    for target in targets:
        if target.propagated:
            rows.append({
                "status": "[green]✓[/green]",
                "name": target.endpoint.name,
                "address": target.endpoint.display_address,
                "found_after": format_duration(target.found_after or 0.0),
                "record": target.matched_record,
            })
        else:
            rows.append({
                "status": "[yellow]○[/yellow]",
                "name": target.endpoint.name,
                "address": target.endpoint.display_address,
                "found_after": "-",
                "record": "[dim]NOT propagated[/dim]",
            })
    return rows


def _caption(targets: List[TargetStatus]) -> str:
    done = sum(1 for t in targets if t.propagated)
    color = "green" if done == len(targets) else "yellow"
    return f"[{color}]{done}/{len(targets)} propagated[/{color}]"


def display_summary(result: PropagationResult, quiet: bool, **kwargs) -> Optional[Any]:
    """Displays the per-server status of a finished run."""
    if quiet:
        return None

    if result.outcome == "error":
        return Panel(
            f"[red]{result.error}[/red]",
            title="[bold]Propagation Check Failed[/bold]",
            border_style="red",
        )

    columns = {
        "status": {"header": "", "no_wrap": True},
        "name": {"header": "Server", "style": "cyan"},
        "address": {"header": "Address", "style": "magenta"},
        "found_after": {"header": "Found After", "style": "green"},
        "record": {"header": "Record"},
    }
    auth_table = _create_generic_table(
        _status_rows(result.authoritative),
        "Summary (authoritative)",
        columns,
        caption=_caption(result.authoritative),
        empty_message="No authoritative nameservers.",
    )
    resolver_table = _create_generic_table(
        _status_rows(result.resolvers),
        "Summary (resolvers)",
        columns,
        caption=_caption(result.resolvers),
        empty_message="No resolvers.",
    )
    return Group(auth_table, resolver_table)
