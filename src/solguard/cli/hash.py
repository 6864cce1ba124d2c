"""CLI command: solguard hash - integrity hashes for a provenance record."""

from __future__ import annotations

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from solguard.config import SolGuardConfig
from solguard.scanner.integrity import hash_integrity

console = Console(stderr=True)


@click.command("hash")
@click.option(
    "--source",
    "source_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Solidity source file.",
)
@click.option(
    "--bytecode",
    "bytecode_path",
    type=click.Path(exists=True, dir_okay=False),
    help="File holding the compiled bytecode as hex.",
)
@click.option("--json", "as_json", is_flag=True, help="Print hashes as JSON.")
def hash_cmd(
    source_path: str | None,
    bytecode_path: str | None,
    as_json: bool,
) -> None:
    """Compute source, bytecode and combined SHA-256 hashes."""
    config = SolGuardConfig.load()
    source = (
        _read_capped(source_path, config.max_input_bytes, "--source")
        if source_path
        else None
    )
    bytecode = (
        _read_capped(bytecode_path, config.max_input_bytes, "--bytecode").strip()
        if bytecode_path
        else None
    )
    hashes = hash_integrity(source, bytecode)

    if as_json:
        click.echo(json.dumps(hashes.to_dict(), indent=2))
        return

    table = Table(title="Integrity hashes")
    table.add_column("Artifact", style="bold")
    table.add_column("SHA-256", style="cyan")
    table.add_row("source", hashes.source_hash)
    table.add_row("bytecode", hashes.bytecode_hash)
    table.add_row("combined", hashes.combined_hash)
    console.print(table)


def _read_capped(file_path: str, max_bytes: int, param_hint: str) -> str:
    path = Path(file_path)
    if path.stat().st_size > max_bytes:
        raise click.BadParameter(
            f"{path} is larger than {max_bytes} bytes", param_hint=param_hint
        )
    return path.read_text(encoding="utf-8")
