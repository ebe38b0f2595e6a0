import argparse

from ripple import __version__


def setup_parser() -> argparse.ArgumentParser:
    """Creates and configures the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ripple",
        description=(
            "Ripple - Watch a DNS record propagate from the authoritative "
            "nameservers out to public resolvers."
        ),
        epilog="""
Examples:
  ripple -t txt -m _cdn-verify lab.example.com
  ripple -t a -m 127.0.0.1 lab.example.com
  ripple -t txt -m v=spf1 -w 30s -r 3s example.com
  ripple -c config.yaml -t mx -m mail.example.com example.com --output json
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    # --- Input Configuration ---
    input_group = parser.add_argument_group('Input Configuration')
    input_group.add_argument(
        "domain", nargs='?', default=None,
        help="Domain whose record should propagate (e.g., example.com)"
    )
    input_group.add_argument(
        "-c", "--config",
        help="Path to a YAML or JSON config file (resolvers, root servers, defaults).")
    input_group.add_argument(
        "--save-config", metavar="PATH",
        help="Write the effective configuration to a YAML file.")

    # --- Check Control ---
    check_group = parser.add_argument_group('Check Control')
    check_group.add_argument(
        "-t", "--type", help="Record type: a, aaaa, txt, cname or mx (default from config or 'a').")
    check_group.add_argument(
        "-m", "--match", help="Value the record must contain (exact address for A/AAAA).")
    check_group.add_argument(
        "-w", "--wait", help="How long to keep checking, e.g. 30s or 2m (default from config or 1m).")
    check_group.add_argument(
        "-r", "--retry", help="Interval between checks, e.g. 5s (default from config or 5s).")
    check_group.add_argument(
        "--query-timeout", type=float,
        help="Timeout in seconds for a single DNS query (default: 5).")
    check_group.add_argument(
        "--resolvers",
        help="Comma-separated list of public resolvers to check (e.g., '8.8.8.8,1.1.1.1:53').")
    check_group.add_argument(
        "--root-servers",
        help="Comma-separated list of root server addresses to start discovery from.")

    # --- Output Control ---
    output_group = parser.add_argument_group('Output Control')
    output_group.add_argument(
        "--output",
        choices=['table', 'json', 'yaml', 'sse'],
        default='table',
        help=("Console output format. 'table' for human-readable progress, 'json'/'yaml' "
              "for a final report, 'sse' for a server-sent-event stream.")
    )
    output_group.add_argument(
        "--output-file",
        help="Also save the final report (JSON or YAML by extension) to this path.")
    output_group.add_argument(
        "--log-file", help="Path to a file to save detailed, verbose logs.")
    output_group.add_argument(
        "-v", "--verbose", action="store_true",
        help="Show detailed logs, including failed individual queries."
    )
    output_group.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Show minimal console output (suppresses progress lines and tables)."
    )

    return parser
