"""
Post - Submit a contract transaction.

The sender defaults to the node's first account. ``--try-call`` dry-runs
the call first and aborts without submitting if it fails; ``--queue``
routes the submission through the in-memory queue, which assigns the
nonce.
"""

from __future__ import annotations

import asyncio
import sys
from typing import Any, Optional

import click
import httpx

from ..errors import ContractError
from .common import open_contract, parse_args, read_schema, report_error, resolve_settings


@click.command()
@click.argument("schema_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("method")
@click.option("--args", "args_json", default="[]", help="Function args as JSON array")
@click.option("--from", "sender", default=None, help="Sender address (default: node account)")
@click.option("--value", default=None, type=int, help="ETH value in wei")
@click.option("--gas-limit", default=None, type=int, help="Gas limit")
@click.option("--gas-price", default=None, type=int, help="Gas price in wei")
@click.option("--try-call", is_flag=True, help="Dry-run the call before submitting")
@click.option("--queue", "use_queue", is_flag=True, default=None, help="Submit through the in-memory queue")
@click.option("--wait/--no-wait", default=True, help="Wait for the receipt")
@click.option("--timeout", default=120, type=int, help="Receipt wait timeout in seconds")
@click.option("--rpc-url", envvar="HAPPY_RPC_URL", default=None, help="JSON-RPC endpoint")
def post(
    schema_path: str,
    method: str,
    args_json: str,
    sender: Optional[str],
    value: Optional[int],
    gas_limit: Optional[int],
    gas_price: Optional[int],
    try_call: bool,
    use_queue: Optional[bool],
    wait: bool,
    timeout: int,
    rpc_url: Optional[str],
) -> None:
    """Submit METHOD of the contract in SCHEMA_PATH as a transaction."""
    args = parse_args(args_json)
    settings = resolve_settings(rpc_url, use_queue)
    schema = read_schema(schema_path)
    opts = {
        "from": sender,
        "value": value,
        "gasLimit": gas_limit,
        "gasPrice": gas_price,
        "tryCall": try_call,
    }

    async def run() -> tuple[str, Optional[dict[str, Any]]]:
        async with open_contract(schema, settings) as contract:
            if method not in contract.api:
                raise ContractError(f"{contract.schema.contract_name} has no method {method}")
            handle = await contract.api[method](*args).post(opts)
            receipt = await handle.wait(timeout=timeout) if wait else None
            return handle.tx_hash, receipt

    try:
        tx_hash, receipt = asyncio.run(run())
    except (ContractError, ValueError, TimeoutError, httpx.HTTPError) as exc:
        report_error(exc)
        return

    click.echo(f"  TX: {tx_hash}")
    if receipt is None:
        return

    if receipt.get("status") == 1:
        click.secho("SUCCESS: Transaction confirmed!", fg="green")
        click.echo(f"  Block: {receipt.get('blockNumber')}")
        for name in receipt.get("events") or {}:
            click.echo(f"  Event: {name}")
    else:
        click.secho("FAILED: Transaction reverted", fg="red")
        sys.exit(1)
