"""Console rendering of run results."""

from __future__ import annotations

import json
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..models import RunResult, RunStatus


class ConsoleReporter:
    """Print a result log as a Rich table followed by a summary."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console()

    def report(self, result: RunResult) -> None:
        table = Table(title="Browser session")
        table.add_column("#", justify="right")
        table.add_column("Command")
        table.add_column("Status")
        table.add_column("Details", overflow="fold")
        for outcome in result.results:
            if outcome.success:
                status = Text("ok", style="green")
                details = json.dumps(outcome.payload or {}, default=str)
            else:
                status = Text("failed", style="red")
                details = outcome.error or ""
            table.add_row(
                str(outcome.step_index + 1),
                Text(outcome.command_type),
                status,
                Text(details),
            )
        self._console.print(table)

        style = "green" if result.ok else "red"
        summary = f"{result.succeeded}/{len(result.results)} commands succeeded"
        if result.status == RunStatus.ABORTED and result.aborted_at is not None:
            summary += f" (aborted at step {result.aborted_at + 1})"
        self._console.print(summary, style=style, markup=False)
        if result.final_url:
            self._console.print(f"Final URL: {result.final_url}", style="dim", markup=False)
        if result.final_title:
            self._console.print(f"Page title: {result.final_title}", style="dim", markup=False)

    def error(self, message: str) -> None:
        self._console.print(f"[ERROR] {message}", style="red", markup=False)
