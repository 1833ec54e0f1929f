# src/lfscheck/reporting.py
"""Reporters for check progress and results.

ConsoleReporter prints one fixed-width line per check:

    Test download: all present                                             ...\r
    Test download: all present                                             OK

The "..." marker is written first and overwritten in place with OK or
FAILED when the check returns. A failure message follows on its own line.

JsonReporter emits one JSON object per line for machine consumption.
"""

from __future__ import annotations

import json
from typing import Protocol

import typer

from lfscheck.contracts.events import CheckOutcome, RunSummary
from lfscheck.core.config import DEFAULT_LINE_WIDTH


class Reporter(Protocol):
    def mode_selected(self, synthesized: bool) -> None: ...

    def run_started(self, total: int) -> None: ...

    def check_started(self, name: str) -> None: ...

    def check_finished(self, outcome: CheckOutcome) -> None: ...

    def run_finished(self, summary: RunSummary) -> None: ...


def format_name(name: str, width: int = DEFAULT_LINE_WIDTH) -> str:
    """Left-justify a check name, truncating or padding to exactly `width`."""
    return name[:width].ljust(width)


class ConsoleReporter:
    """Human-readable report on stdout."""

    def __init__(self, line_width: int = DEFAULT_LINE_WIDTH) -> None:
        self._line_width = line_width

    def mode_selected(self, synthesized: bool) -> None:
        if synthesized:
            typer.echo("Creating test data (will modify server contents)")
        else:
            typer.echo("Reading test data from files (no server content changes)")

    def run_started(self, total: int) -> None:
        typer.echo(f"Running {total} checks...")

    def check_started(self, name: str) -> None:
        typer.echo(f"{format_name(name, self._line_width)}...\r", nl=False)

    def check_finished(self, outcome: CheckOutcome) -> None:
        line = format_name(outcome.name, self._line_width)
        if outcome.passed:
            typer.echo(f"{line} OK")
        else:
            typer.echo(f"{line} FAILED")
            typer.echo(outcome.message)

    def run_finished(self, summary: RunSummary) -> None:
        typer.echo(f"{summary.total} checks: {summary.passed} OK, {summary.failed} FAILED ({summary.duration_seconds:.2f}s)")


class JsonReporter:
    """One JSON object per line; no in-place progress markers."""

    def mode_selected(self, synthesized: bool) -> None:
        typer.echo(json.dumps({"event": "mode_selected", "mode": "synthetic" if synthesized else "files"}))

    def run_started(self, total: int) -> None:
        typer.echo(json.dumps({"event": "run_started", "total": total}))

    def check_started(self, name: str) -> None:
        pass

    def check_finished(self, outcome: CheckOutcome) -> None:
        typer.echo(
            json.dumps(
                {
                    "event": "check_completed",
                    "name": outcome.name,
                    "status": outcome.status.value,
                    "message": outcome.message,
                    "duration_seconds": outcome.duration_seconds,
                }
            )
        )

    def run_finished(self, summary: RunSummary) -> None:
        typer.echo(
            json.dumps(
                {
                    "event": "run_summary",
                    "total": summary.total,
                    "passed": summary.passed,
                    "failed": summary.failed,
                    "duration_seconds": summary.duration_seconds,
                    "exit_code": summary.exit_code,
                }
            )
        )


def create_reporter(output_format: str, line_width: int = DEFAULT_LINE_WIDTH) -> Reporter:
    if output_format == "json":
        return JsonReporter()
    return ConsoleReporter(line_width=line_width)
