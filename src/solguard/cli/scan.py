"""CLI command: solguard scan <path> - scan contract sources and artifacts."""

from __future__ import annotations

import json
import sys

import click
from rich.console import Console

from solguard.cli.display import print_result
from solguard.config import SolGuardConfig
from solguard.scanner.engine import ScanEngine

console = Console(stderr=True)


@click.command()
@click.argument("path", type=click.Path(exists=True))
@click.option(
    "--exclude",
    "-e",
    multiple=True,
    help="File or directory names to exclude from scan.",
)
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON.")
def scan(path: str, exclude: tuple[str, ...], as_json: bool) -> None:
    """Scan .sol sources, .bin/.hex bytecode and JSON build artifacts."""
    config = SolGuardConfig.load()
    engine = ScanEngine(
        max_file_size=config.max_input_bytes,
        exclude_patterns=list(exclude),
    )

    if not as_json:
        console.print(f"[bold]SolGuard[/bold] scanning [cyan]{path}[/cyan]\n")

    result = engine.scan(path)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        if not result.reports:
            console.print("[yellow]No contract artifacts found.[/yellow]")
        for report in result.reports:
            print_result(
                console,
                report.result,
                title=f"{_shorten_path(report.path, result.target)} ({report.kind})",
            )
        _print_summary(result)

    failed = sum(1 for r in result.reports if not r.passed)
    if failed > 0:
        if not as_json:
            console.print(f"[red]{failed} artifact(s) failed[/red]")
        sys.exit(1)


def _print_summary(result) -> None:
    console.print(
        f"Scanned {result.files_scanned} files "
        f"({result.files_skipped} skipped) "
        f"in {result.duration:.2f}s"
    )


def _shorten_path(file_path: str, base: str) -> str:
    """Shorten file path relative to the scan target."""
    if file_path != base and file_path.startswith(base):
        return file_path[len(base) :].lstrip("/")
    return file_path
