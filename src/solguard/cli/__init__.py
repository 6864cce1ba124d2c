"""CLI entry point: Click group with global options."""

from __future__ import annotations

import logging

import click

from solguard import __version__


@click.group()
@click.version_option(version=__version__, prog_name="solguard")
@click.option(
    "--policy",
    "-p",
    help="Gate policy: a YAML file, 'preset:<name>', or a name in the policy dirs.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.pass_context
def main(ctx: click.Context, policy: str | None, verbose: bool) -> None:
    """SolGuard: security gate for smart-contract source and bytecode."""
    ctx.ensure_object(dict)
    ctx.obj["policy_ref"] = policy
    ctx.obj["verbose"] = verbose

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _register_commands() -> None:
    from solguard.cli.bytecode import bytecode  # noqa: F811
    from solguard.cli.check import check  # noqa: F811
    from solguard.cli.hash import hash_cmd  # noqa: F811
    from solguard.cli.scan import scan  # noqa: F811

    main.add_command(scan)
    main.add_command(bytecode)
    main.add_command(hash_cmd)
    main.add_command(check)


_register_commands()
