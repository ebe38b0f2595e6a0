#!/usr/bin/env python3
"""
Ripple - Orchestrator Module
Runs one propagation check, feeds its events to the selected console output,
and writes the final report.
"""
import asyncio
import builtins
import logging
import signal
from typing import Any, Optional

from .config import console
from .display import display_header, display_summary, format_event
from .engine.events import EventQueue, ProgressEvent
from .engine.models import PropagationResult, RunConfig
from .engine.poller import PropagationPoller
from .export import format_for_path, handle_output
from .output.sse import format_sse

logger = logging.getLogger(__name__)


def install_interrupt_handler(cancel: asyncio.Event):
    """Makes Ctrl-C request a cooperative cancellation of the running check."""
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, cancel.set)
    except NotImplementedError:
        # Windows event loops do not support signal handlers; Ctrl-C then
        # surfaces as KeyboardInterrupt in the entry point.
        logger.debug("Signal handlers are not supported on this platform")


def _render_event(event: ProgressEvent, run_config: RunConfig, args: Any):
    if args.output == "sse":
        builtins.print(format_sse(event), end="", flush=True)
    elif args.output == "table" and not args.quiet:
        console.print(format_event(event, run_config.criteria.record_type))


async def run_check(
    run_config: RunConfig, args: Any, cancel: Optional[asyncio.Event] = None
) -> PropagationResult:
    """
    Runs the check and renders its progress according to args.output.

    'table' prints a line per event and summary tables, 'sse' prints each
    event as server-sent-event frames, 'json'/'yaml' print only the final report.
    """
    if args.output == "table":
        header = display_header(run_config, quiet=args.quiet)
        if header:
            console.print(header)

    events = EventQueue()
    poller = PropagationPoller(run_config)
    task = asyncio.create_task(poller.run(events, cancel))
    try:
        async for event in events:
            _render_event(event, run_config, args)
    finally:
        if not task.done():
            task.cancel()
    result = await task

    if events.dropped:
        logger.debug(f"{events.dropped} progress events were dropped")

    if args.output == "table":
        summary = display_summary(result, quiet=args.quiet)
        if summary:
            console.print()
            console.print(summary)
    elif args.output in ("json", "yaml"):
        handle_output(result, args.output)

    output_file = getattr(args, "output_file", None)
    if output_file:
        handle_output(result, format_for_path(output_file), output_file)

    return result
