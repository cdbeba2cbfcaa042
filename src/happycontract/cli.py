"""
happycontract CLI

Command-line access to a contract described by a schema file
(``{contractName, abi, contractAddress}``).

Commands:
  call    - Read-only call, prints the decoded result
  post    - Submit a transaction
  events  - Look up events emitted by a transaction
  info    - Show version and effective settings
"""

from __future__ import annotations

import logging
import sys

import click

from . import __version__
from .config import HAPPY_ENV, load_settings


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="happycontract")
@click.option("--verbose", "-v", is_flag=True, help="Log RPC traffic and dispatch decisions")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """happycontract - ABI-driven contract calls."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ============ Commands ============

from .commands.call import call
from .commands.events import events
from .commands.post import post

cli.add_command(call)
cli.add_command(post)
cli.add_command(events)


# ============ Info ============


@cli.command()
def info() -> None:
    """Show version and effective settings."""
    try:
        settings = load_settings()
    except ValueError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(1)

    click.echo(f"happycontract v{__version__}")
    click.echo(click.style("  Env file:    ", dim=True) + str(HAPPY_ENV))
    click.echo(click.style("  RPC URL:     ", dim=True) + settings.rpc_url)
    click.echo(click.style("  RPC timeout: ", dim=True) + f"{settings.rpc_timeout:g}s")
    sender = settings.default_from or "node default (eth_accounts)"
    click.echo(click.style("  Sender:      ", dim=True) + sender)
    click.echo(click.style("  Queue:       ", dim=True) + ("on" if settings.use_queue else "off"))


def main() -> None:
    """happycontract CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
