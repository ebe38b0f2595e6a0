#!/usr/bin/env python3
"""
Ripple
Watches a DNS record propagate from the authoritative nameservers out to public resolvers
"""

import asyncio
import logging
import sys

from ripple.config import console
from ripple.config_manager import ConfigError, build_run_config, save_config, setup_configuration
from ripple.logger_config import setup_logging
from ripple.orchestrator import install_interrupt_handler, run_check
from ripple.parser_setup import setup_parser

logger = logging.getLogger(__name__)


async def main(argv=None) -> int:
    parser = setup_parser()

    # Get the final configuration: defaults, config file, then CLI flags.
    args, settings = setup_configuration(parser, argv)

    if args is None:  # An error occurred during config loading
        return 1

    # Initialize logging using the final, merged configuration
    setup_logging(args)

    if args.save_config:
        save_config(settings, args.save_config)
        console.print(f"[green]✓ Configuration saved to:[/] [bold cyan]{args.save_config}[/bold cyan]")
        if not args.domain:
            return 0

    try:
        run_config = build_run_config(args, settings)
    except ConfigError as e:
        logger.debug(f"Invalid configuration: {e}")
        console.print(f"[bold red]Error: {e}[/bold red]")
        if not args.domain:
            parser.print_help()
        return 1

    cancel = asyncio.Event()
    install_interrupt_handler(cancel)

    result = await run_check(run_config, args, cancel)
    if result.outcome == "cancelled":
        return 130
    return 0 if result.all_propagated else 1


def main_wrapper():
    """Synchronous wrapper to run the async main function."""
    try:
        exit_code = asyncio.run(main())
    except KeyboardInterrupt:
        console.print("\n[bold yellow]Check aborted by user.[/bold yellow]")
        exit_code = 130
    sys.exit(exit_code)


if __name__ == "__main__":
    main_wrapper()
