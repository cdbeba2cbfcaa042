"""
Call - Read-only contract call.

Prints the decoded result as JSON; integers too large for a double are
printed as decimal strings.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import click
import httpx

from ..errors import ContractError
from ..utils import dump_json
from .common import open_contract, parse_args, read_schema, report_error, resolve_settings


@click.command()
@click.argument("schema_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("method")
@click.option("--args", "args_json", default="[]", help="Function args as JSON array")
@click.option("--from", "sender", default=None, help="Caller address (default: node account)")
@click.option("--rpc-url", envvar="HAPPY_RPC_URL", default=None, help="JSON-RPC endpoint")
def call(schema_path: str, method: str, args_json: str, sender: Optional[str], rpc_url: Optional[str]) -> None:
    """Call METHOD of the contract in SCHEMA_PATH without a transaction."""
    args = parse_args(args_json)
    settings = resolve_settings(rpc_url)
    schema = read_schema(schema_path)

    async def run() -> Any:
        async with open_contract(schema, settings) as contract:
            if method not in contract.api:
                raise ContractError(f"{contract.schema.contract_name} has no method {method}")
            return await contract.api[method](*args).call({"from": sender})

    try:
        result = asyncio.run(run())
    except (ContractError, ValueError, httpx.HTTPError) as exc:
        report_error(exc)
        return

    click.echo(dump_json(result))
