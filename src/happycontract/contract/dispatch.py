"""
Dispatch policy for state-mutating invocations.

Decides whether a submission is dry-run first, fills in the default
sender and routes the submission through the wrapper's queue when one
is configured.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from ..rpc.client import RpcClient
from ..rpc.contract import BoundMethod, SendCallback, TransactionHandle
from ..rpc.queue import MemoryTransactionQueue

logger = logging.getLogger(__name__)

# Accepted spellings of each option, mapped to the dataclass field.
_OPTION_KEYS = {
    "from": "from_",
    "from_": "from_",
    "value": "value",
    "gasPrice": "gas_price",
    "gas_price": "gas_price",
    "gasLimit": "gas_limit",
    "gas_limit": "gas_limit",
    "gas": "gas_limit",
    "tryCall": "try_call",
    "try_call": "try_call",
}


# Amounts may be ints or decimal/0x-hex strings; they are hex-encoded on the wire.
Quantity = Union[int, str]


@dataclass(frozen=True)
class Options:
    """Per-invocation options. ``try_call`` is never sent to the node."""
    from_: Optional[str] = None
    value: Optional[Quantity] = None
    gas_price: Optional[Quantity] = None
    gas_limit: Optional[Quantity] = None
    try_call: bool = False

    @classmethod
    def coerce(cls, opts: Union["Options", Mapping[str, Any], None]) -> "Options":
        if opts is None:
            return cls()
        if isinstance(opts, Options):
            return opts
        kwargs: dict[str, Any] = {}
        for key, value in opts.items():
            if key not in _OPTION_KEYS:
                raise ValueError(f"Unknown option: {key}")
            kwargs[_OPTION_KEYS[key]] = value
        return cls(**kwargs)

    def fields(self) -> dict[str, Any]:
        """RPC transaction fields, without unset values."""
        fields = {
            "from": self.from_,
            "value": self.value,
            "gasPrice": self.gas_price,
            "gas": self.gas_limit,
        }
        return {k: v for k, v in fields.items() if v is not None}


OptionsLike = Union[Options, Mapping[str, Any], None]


async def resolve_sender(client: RpcClient, fields: dict[str, Any]) -> dict[str, Any]:
    if not fields.get("from"):
        fields = {**fields, "from": await client.default_account()}
    return fields


async def post(
    method: BoundMethod,
    client: RpcClient,
    queue: Optional[MemoryTransactionQueue],
    opts: OptionsLike = None,
    callback: Optional[SendCallback] = None,
) -> TransactionHandle:
    """
    Submit a bound method as a transaction.

    Args:
        method: Bound method handle to submit
        client: Client used to resolve the default sender
        queue: Submission queue, or None to submit immediately
        opts: Invocation options; ``try_call`` runs a dry-run first
        callback: Called with the transaction hash once broadcast

    Returns:
        TransactionHandle for the submitted transaction

    Raises:
        Whatever the dry-run raises; nothing is submitted in that case.
    """
    options = Options.coerce(opts)
    fields = options.fields()

    if options.try_call:
        logger.debug("dry-run %s", method.descriptor.name)
        await method.call(fields)

    fields = await resolve_sender(client, fields)

    # client.sign does not change routing; signed or not, the same path applies.
    if queue is not None:
        logger.debug("queueing %s from %s", method.descriptor.name, fields["from"])

        async def submit(assigned: dict[str, Any]) -> TransactionHandle:
            return await method.post({**fields, **assigned}, callback)

        return await queue.push(submit, fields)

    logger.debug("submitting %s from %s", method.descriptor.name, fields["from"])
    return await method.post(fields, callback)
