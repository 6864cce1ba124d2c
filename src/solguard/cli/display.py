"""Rich rendering shared by the CLI commands."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from solguard.scanner.models import ScanResult, Severity

SEVERITY_COLORS = {
    Severity.INFO: "blue",
    Severity.WARNING: "yellow",
    Severity.CRITICAL: "red",
}


def score_color(score: int) -> str:
    if score >= 80:
        return "green"
    if score >= 50:
        return "yellow"
    return "red"


def findings_table(result: ScanResult, title: str = "Findings") -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column("Severity", style="bold", width=10)
    table.add_column("ID", style="cyan")
    table.add_column("Message")

    for finding in result.findings:
        color = SEVERITY_COLORS.get(finding.severity, "white")
        table.add_row(
            f"[{color}]{finding.severity.value}[/{color}]",
            finding.id,
            finding.message,
        )
    return table


def print_result(console: Console, result: ScanResult, title: str) -> None:
    """Print a findings table followed by the verdict line."""
    console.print(findings_table(result, title=title))
    color = score_color(result.score)
    verdict = "[green]PASSED[/green]" if result.passed else "[red]FAILED[/red]"
    console.print(
        f"{verdict}  score [{color}]{result.score}[/{color}]/100  "
        f"({len(result.critical)} critical, {len(result.warnings)} warnings, "
        f"{len(result.info)} info)\n"
    )
