from __future__ import annotations

import asyncio
from typing import Any, Optional

import click
import httpx

from ..errors import ContractError, EventNotFoundError
from ..utils import dump_json
from .common import open_contract, read_schema, report_error, resolve_settings


@click.command()
@click.argument("schema_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("event")
@click.argument("tx_hash")
@click.option("--block", "block_number", default=None, type=int, help="Block of the transaction")
@click.option("--rpc-url", envvar="HAPPY_RPC_URL", default=None, help="JSON-RPC endpoint")
def events(
    schema_path: str,
    event: str,
    tx_hash: str,
    block_number: Optional[int],
    rpc_url: Optional[str],
) -> None:
    """Show EVENT records emitted by transaction TX_HASH."""
    settings = resolve_settings(rpc_url)
    schema = read_schema(schema_path)

    async def run() -> list[dict[str, Any]]:
        async with open_contract(schema, settings) as contract:
            found = await contract.find_event(event, tx_hash, block_number)
            if not found:
                raise EventNotFoundError(event, tx_hash)
            return found

    try:
        found = asyncio.run(run())
    except (ContractError, ValueError, httpx.HTTPError) as exc:
        report_error(exc)
        return

    click.echo(dump_json(found))
