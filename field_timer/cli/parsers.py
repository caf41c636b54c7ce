"""
Argument parsing for the field timer CLI.

This module contains the argparse configuration, split into argument groups
the same way the options are documented.
"""

import argparse
from pathlib import Path

from ..config.models import LogLevel, OutputFormat


def add_input_arguments(parser: argparse.ArgumentParser) -> None:
    """Add document input arguments."""
    parser.add_argument(
        "-f",
        "--file",
        type=Path,
        help="File containing the GraphQL document (default: read stdin)",
    )


def add_request_arguments(parser: argparse.ArgumentParser) -> None:
    """Add endpoint and request configuration arguments."""
    parser.add_argument("-u", "--url", required=True, help="GraphQL endpoint URL")

    parser.add_argument(
        "--header",
        action="append",
        default=[],
        help="Extra request header as 'Name: Value' (repeatable)",
    )

    parser.add_argument(
        "-v",
        "--variables",
        help="JSON object of variables sent with every query (default: {})",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        help="Per-request timeout in seconds (default: none)",
    )

    parser.add_argument(
        "--prune-variables",
        action="store_true",
        default=None,
        help="Only declare the variables each leaf query uses",
    )


def add_security_arguments(parser: argparse.ArgumentParser) -> None:
    """Add TLS arguments."""
    parser.add_argument(
        "--insecure",
        action="store_true",
        help="Disable TLS certificate verification",
    )
    parser.add_argument(
        "--ca-bundle", type=Path, help="CA bundle used to verify the endpoint"
    )


def add_output_arguments(parser: argparse.ArgumentParser) -> None:
    """Add output related arguments."""
    parser.add_argument(
        "--format",
        choices=[fmt.value for fmt in OutputFormat],
        default=None,
        help="Report format (default: text)",
    )
    parser.add_argument(
        "-o", "--output", type=Path, help="Write the report to a file instead of stdout"
    )


def add_logging_arguments(parser: argparse.ArgumentParser) -> None:
    """Add logging and configuration arguments."""
    parser.add_argument("--config", type=Path, help="Configuration file (YAML or JSON)")
    parser.add_argument(
        "--log-level",
        choices=[level.value for level in LogLevel],
        default=None,
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file")
    parser.add_argument(
        "--debug", action="store_true", help="Shortcut for --log-level DEBUG"
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="graphql-field-timer",
        description=(
            "Split a GraphQL query into one query per leaf field, time each "
            "against an endpoint and report the slowest and failing fields."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  graphql-field-timer -u https://api.example.com/graphql -f query.graphql
  cat query.graphql | graphql-field-timer -u http://localhost:4000/graphql \\
      --header "Authorization: Bearer TOKEN" -v '{"id": "42"}'
""",
    )

    add_input_arguments(parser)
    add_request_arguments(parser)
    add_security_arguments(parser)
    add_output_arguments(parser)
    add_logging_arguments(parser)

    return parser
