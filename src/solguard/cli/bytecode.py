"""CLI command: solguard bytecode <hex-or-file> - scan compiled bytecode."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click
from rich.console import Console

from solguard.cli.display import print_result
from solguard.config import SolGuardConfig
from solguard.scanner.bytecode import estimate_deploy_gas, scan_bytecode
from solguard.scanner.engine import extract_artifact_bytecode

console = Console(stderr=True)


@click.command()
@click.argument("target")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
def bytecode(target: str, as_json: bool) -> None:
    """Scan TARGET, a hex string or a file holding hex or a JSON artifact."""
    config = SolGuardConfig.load()
    hex_text = read_bytecode(target, config.max_input_bytes)
    result = scan_bytecode(hex_text)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        print_result(console, result, title="Bytecode findings")
        if result.passed:
            gas = estimate_deploy_gas(hex_text)
            console.print(f"Estimated deployment gas: [cyan]{gas:,}[/cyan]")

    if not result.passed:
        sys.exit(1)


def read_bytecode(target: str, max_bytes: int) -> str:
    """Resolve a CLI argument to hex text, reading it from disk when it names a file."""
    # os.path.isfile tolerates hex strings too long to be a file name
    if not os.path.isfile(target):
        if len(target) > max_bytes:
            raise click.BadParameter(
                f"input is larger than {max_bytes} bytes", param_hint="TARGET"
            )
        return target

    path = Path(target)
    if path.stat().st_size > max_bytes:
        raise click.BadParameter(
            f"{path} is larger than {max_bytes} bytes", param_hint="TARGET"
        )
    content = path.read_text(encoding="utf-8", errors="ignore")
    if path.suffix.lower() == ".json":
        extracted = extract_artifact_bytecode(content)
        return extracted if extracted is not None else ""
    return content.strip()
