"""CLI command: solguard check <source> [bytecode] - full deployment gate."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
from rich.console import Console

from solguard.cli.bytecode import read_bytecode
from solguard.cli.display import print_result
from solguard.config import SolGuardConfig
from solguard.gate.evaluator import GateEvaluator
from solguard.gate.loader import load_gate_policy, load_preset
from solguard.gate.models import GatePolicy
from solguard.scanner.bytecode import scan_bytecode
from solguard.scanner.integrity import hash_integrity
from solguard.scanner.source import scan_source, validate_contract

console = Console(stderr=True)

_DEFAULT_POLICY = "preset:default"


@click.command()
@click.argument("source_path", type=click.Path(exists=True, dir_okay=False))
@click.argument(
    "bytecode_path",
    type=click.Path(exists=True, dir_okay=False),
    required=False,
)
@click.option("--json", "as_json", is_flag=True, help="Print the verdict as JSON.")
@click.pass_context
def check(
    ctx: click.Context,
    source_path: str,
    bytecode_path: str | None,
    as_json: bool,
) -> None:
    """Scan a contract's source and bytecode and apply the gate policy."""
    config = SolGuardConfig.load()
    policy = resolve_policy(ctx.obj.get("policy_ref"), config)

    source_file = Path(source_path)
    if source_file.stat().st_size > config.max_input_bytes:
        raise click.BadParameter(
            f"{source_path} is larger than {config.max_input_bytes} bytes",
            param_hint="SOURCE_PATH",
        )
    source = source_file.read_text(encoding="utf-8", errors="ignore")
    source_result = scan_source(source)

    bytecode = None
    bytecode_result = None
    if bytecode_path:
        bytecode = read_bytecode(bytecode_path, config.max_input_bytes)
        bytecode_result = scan_bytecode(bytecode)

    verdict = GateEvaluator(policy).evaluate(source_result, bytecode_result)
    hashes = hash_integrity(source, bytecode)

    if as_json:
        payload = {
            "verdict": verdict.to_dict(),
            "source": source_result.to_dict(),
            "bytecode": bytecode_result.to_dict() if bytecode_result else None,
            "integrity": hashes.to_dict(),
            "structure": validate_contract(source),
        }
        click.echo(json.dumps(payload, indent=2))
    else:
        console.print(
            f"[bold]SolGuard[/bold] gate [cyan]{policy.name}[/cyan]\n"
        )
        for error in validate_contract(source):
            console.print(f"[yellow]structure:[/yellow] {error}")
        print_result(console, source_result, title="Source findings")
        if bytecode_result is not None:
            print_result(console, bytecode_result, title="Bytecode findings")
        console.print(f"sourceHash   {hashes.source_hash}")
        console.print(f"bytecodeHash {hashes.bytecode_hash}")
        console.print(f"combinedHash {hashes.combined_hash}\n")
        if verdict.allowed:
            console.print("[green]Deployment allowed[/green]")
        else:
            console.print("[red]Deployment blocked[/red]")
            for reason in verdict.reasons:
                console.print(f"  - {reason}")

    if not verdict.allowed:
        sys.exit(1)


def resolve_policy(ref: str | None, config: SolGuardConfig) -> GatePolicy:
    """Turn a --policy value into a GatePolicy.

    Falls back to SOLGUARD_POLICY, then the bundled default preset.
    """
    try:
        if ref is None:
            if config.policy_path is not None:
                return load_gate_policy(config.policy_path)
            ref = _DEFAULT_POLICY
        if ref.startswith("preset:"):
            return load_preset(ref[len("preset:") :])
        if Path(ref).is_file():
            return load_gate_policy(ref)
        found = config.find_policy(ref)
        if found is not None:
            return load_gate_policy(found)
    except (OSError, ValueError) as e:
        raise click.BadParameter(str(e), param_hint="--policy") from e

    raise click.BadParameter(f"policy not found: {ref}", param_hint="--policy")
