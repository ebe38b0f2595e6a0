#!/usr/bin/env python3
"""
Ripple - Logger Configuration
Sets up the application-wide logger.
"""
import argparse
import logging

from rich.console import Console
from rich.logging import RichHandler

from .config import console

# Third-party loggers that are too chatty at DEBUG level
_NOISY_LOGGERS = ("asyncio", "filelock", "tldextract", "urllib3")


def setup_logging(args: argparse.Namespace):
    """
    Configures the root logger from the final, merged configuration.

    - Console logging level follows --verbose / --quiet. Failed individual
      queries are logged at DEBUG, so they only show up with --verbose.
    - File logging at DEBUG level is enabled if a log_file path is provided.
    - In machine-readable output modes the console handler writes to stderr
      so stdout stays parseable.
    """
    verbose = getattr(args, "verbose", False)
    quiet = getattr(args, "quiet", False)
    log_file = getattr(args, "log_file", None)
    output = getattr(args, "output", "table")

    if quiet:
        console_level = logging.WARNING
    elif verbose:
        console_level = logging.DEBUG
    else:
        console_level = logging.INFO

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    if logger.hasHandlers():
        logger.handlers.clear()

    log_console = console
    if output != "table":
        log_console = Console(stderr=True)

    console_handler = RichHandler(
        console=log_console,
        level=console_level,
        show_time=verbose,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        show_level=verbose,  # Only show [INFO], [DEBUG] etc. when verbose
    )
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w")
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
