"""Result rendering for terminals and monitoring systems."""

from __future__ import annotations

import json

from rich.console import Console
from rich.table import Table
from rich.text import Text

from nodewatch.checks.models import CheckResult, Status, worst_status

STATUS_STYLES = {
    Status.OK: "bold green",
    Status.WARNING: "bold yellow",
    Status.CRITICAL: "bold red",
    Status.UNKNOWN: "bold magenta",
}


def format_status_line(result: CheckResult) -> str:
    """``<status>: <check> - <message>[ | perfdata]``"""
    line = f"{result.status.value}: {result.name} - {result.message}"
    if result.perfdata:
        line += " | " + " ".join(str(p) for p in result.perfdata)
    return line


def format_result(result: CheckResult) -> str:
    lines = [format_status_line(result)]
    lines.extend(f"  {d}" for d in result.details)
    return "\n".join(lines)


def render_result(console: Console, result: CheckResult) -> None:
    """Print one result; the status word is styled on terminals only."""
    text = Text()
    text.append(result.status.value, style=STATUS_STYLES.get(result.status, ""))
    text.append(format_status_line(result)[len(result.status.value):])
    for detail in result.details:
        text.append(f"\n  {detail}", style="dim")
    console.print(text, soft_wrap=True)


def render_results(console: Console, results: list[CheckResult]) -> None:
    for result in results:
        render_result(console, result)


def render_json(console: Console, results: list[CheckResult]) -> None:
    overall = worst_status(r.status for r in results)
    doc = {
        "status": overall.value,
        "exit_code": overall.exit_code,
        "checks": [r.to_dict() for r in results],
    }
    console.print_json(json.dumps(doc))


def render_check_list(console: Console, checks: list[tuple[str, str]]) -> None:
    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("Check")
    table.add_column("Description")
    for name, description in checks:
        table.add_row(name, description)
    console.print(table)
