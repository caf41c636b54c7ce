#!/usr/bin/env python3
"""
Command-line interface for field_timer.

Reads a GraphQL document from a file or standard input, splits it into one
query per leaf field, times each query against the endpoint one at a time
and prints the ranked report.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from ..config.loader import ConfigLoader
from ..config.models import (
    EndpointConfig,
    GlobalConfig,
    LogLevel,
    OutputFormat,
)
from ..exceptions import FieldTimerError, ResponseDecodeError, TransportError
from ..graphql.flattener import flatten_source
from ..graphql.timer import FieldTimer
from ..logging import setup_logging
from .formatting import Formatter
from .output import write_report
from .parsers import create_parser
from .utils import load_document

logger = logging.getLogger(__name__)


def apply_arguments(config: GlobalConfig, args: argparse.Namespace) -> GlobalConfig:
    """Overlay command-line arguments on the loaded configuration."""
    logging_updates = {}
    if args.debug:
        logging_updates["level"] = LogLevel.DEBUG
    elif args.log_level:
        logging_updates["level"] = LogLevel(args.log_level)
    if args.log_file:
        logging_updates["file_path"] = args.log_file

    security_updates = {}
    if args.insecure:
        security_updates["verify_ssl"] = False
    if args.ca_bundle:
        security_updates["ca_bundle_path"] = args.ca_bundle

    updates = {
        "logging": config.logging.model_copy(update=logging_updates),
        "security": config.security.model_copy(update=security_updates),
    }
    if args.timeout is not None:
        updates["timeout"] = args.timeout
    if args.prune_variables is not None:
        updates["prune_variables"] = args.prune_variables
    if args.format:
        updates["output_format"] = OutputFormat(args.format)
    return config.model_copy(update=updates)


def build_endpoint(config: GlobalConfig, args: argparse.Namespace) -> EndpointConfig:
    return EndpointConfig.from_url(
        args.url,
        headers=list(config.headers) + list(args.header),
        variables=args.variables,
        timeout=config.timeout,
        security=config.security,
    )


async def time_fields(timer: FieldTimer, queries: List[str], formatter: Formatter) -> None:
    """Run every query in order while drawing a progress bar."""
    async with timer:
        with formatter.create_progress() as progress:
            task = progress.add_task("Timing fields", total=len(queries))
            await timer.run(queries, on_progress=lambda _result: progress.advance(task))


async def main(argv: Optional[List[str]] = None, formatter: Optional[Formatter] = None) -> int:
    """
    Main CLI function.

    Returns:
        Process exit status
    """
    parser = create_parser()
    args = parser.parse_args(argv)
    formatter = formatter or Formatter()

    timer: Optional[FieldTimer] = None
    try:
        config = apply_arguments(ConfigLoader().load_config(args.config), args)
        setup_logging(config.logging)

        queries = flatten_source(
            load_document(args.file), prune_variables=config.prune_variables
        )
        if not queries:
            formatter.print_warning("The document contains no query fields to time")
            return 0

        endpoint = build_endpoint(config, args)
        logger.info("Timing %d queries against %s", len(queries), endpoint.url)

        timer = FieldTimer(endpoint)
        await time_fields(timer, queries, formatter)
    except (TransportError, ResponseDecodeError) as e:
        formatter.print_error(str(e))
        if timer is not None and timer.completed:
            formatter.print_warning(
                f"Run aborted; partial report of {len(timer.completed)} completed queries"
            )
            formatter.print_results(timer.results())
        return 1
    except FieldTimerError as e:
        formatter.print_error(str(e))
        return 1

    results = timer.results()
    try:
        write_report(results, config.output_format, formatter, args.output)
    except FieldTimerError as e:
        formatter.print_error(str(e))
        return 1
    formatter.print_summary(results)
    if args.output:
        formatter.print_info(f"Report written to {args.output}")
    return 0


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    run()
