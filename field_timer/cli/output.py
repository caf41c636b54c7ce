"""
Report output for the field timer CLI.

This module builds the JSON report and writes text or JSON reports to a file.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console

from ..config.models import OutputFormat
from ..exceptions import ConfigurationError
from ..graphql.models import Status, TimingResult
from .formatting import Formatter


def build_report(results: List[TimingResult]) -> Dict[str, Any]:
    """Summary counts plus the ranked entries."""
    failed = [result for result in results if result.status is Status.FAILURE]
    return {
        "total_queries": len(results),
        "successful_queries": len(results) - len(failed),
        "failed_queries": len(failed),
        "total_duration": sum(result.duration for result in results),
        "results": [result.to_dict() for result in results],
    }


def format_report(results: List[TimingResult]) -> str:
    return json.dumps(build_report(results), indent=2, default=str)


def write_report(
    results: List[TimingResult],
    format_type: OutputFormat,
    formatter: Formatter,
    output_path: Optional[Path] = None,
) -> None:
    """
    Write the ranked report to stdout or a file.

    Args:
        results: Ranked results
        format_type: Text lines or a JSON document
        formatter: Formatter used for stdout text output
        output_path: Optional file to write instead of stdout

    Raises:
        ConfigurationError: If the output file cannot be written
    """
    if format_type == OutputFormat.JSON:
        report = format_report(results)
        if output_path is None:
            formatter.console.print(report, markup=False, highlight=False, soft_wrap=True)
        else:
            try:
                output_path.write_text(report + "\n", encoding="utf-8")
            except OSError as e:
                raise ConfigurationError(
                    f"Error writing report {output_path}: {e}", path=str(output_path)
                )
        return

    if output_path is None:
        formatter.print_results(results)
        return

    try:
        with open(output_path, "w", encoding="utf-8") as f:
            file_formatter = Formatter(
                console=Console(file=f, no_color=True, width=200),
                err_console=formatter.err_console,
            )
            file_formatter.print_results(results)
    except OSError as e:
        raise ConfigurationError(
            f"Error writing report {output_path}: {e}", path=str(output_path)
        )
