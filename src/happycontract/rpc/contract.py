"""
Contract Handle - Bound methods, submissions and event lookup for one
deployed contract.

Calldata is encoded with eth-abi, read calls go through ``eth_call`` and
submissions through ``eth_sendTransaction``. Return data comes back as
loose positional values; shaping them is the output decoder's job.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional, Sequence

from ..abi.codec import decode_log, decode_return, encode_call, event_topic
from ..abi.models import MethodDescriptor
from ..utils import hex_to_int, to_checksum_address, to_quantity

if TYPE_CHECKING:
    from .client import RpcClient

logger = logging.getLogger(__name__)

SendCallback = Callable[[str], Any]

# RPC transaction fields that carry hex quantities.
QUANTITY_FIELDS = ("value", "gas", "gasPrice", "nonce")


@dataclass(frozen=True)
class ContractOptions:
    address: str


class TransactionHandle:
    """A broadcast transaction; ``wait()`` resolves its receipt."""

    def __init__(self, client: "RpcClient", tx_hash: str, contract: Optional["ContractHandle"] = None) -> None:
        self.client = client
        self.tx_hash = tx_hash
        self.contract = contract

    def __repr__(self) -> str:
        return f"TransactionHandle({self.tx_hash})"

    async def wait(self, timeout: float = 120, poll_interval: float = 2.0) -> dict[str, Any]:
        """
        Wait for the transaction receipt.

        Args:
            timeout: Maximum wait time in seconds
            poll_interval: Polling interval in seconds

        Returns:
            Receipt dict with ``blockNumber``/``status`` as ints and the
            decoded ``events`` mapping

        Raises:
            TimeoutError: If receipt not found within timeout
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while True:
            receipt = await self.client.get_transaction_receipt(self.tx_hash)
            if receipt is not None:
                return self._normalize(receipt)
            if loop.time() >= deadline:
                break
            await asyncio.sleep(poll_interval)

        raise TimeoutError(f"Transaction {self.tx_hash} not confirmed within {timeout}s")

    def _normalize(self, receipt: dict[str, Any]) -> dict[str, Any]:
        receipt = dict(receipt)
        for key in ("blockNumber", "status", "gasUsed"):
            if isinstance(receipt.get(key), str):
                receipt[key] = hex_to_int(receipt[key])
        if self.contract is not None:
            receipt["events"] = self.contract.decode_receipt_events(receipt)
        return receipt


class BoundMethod:
    """One contract function bound to concrete arguments."""

    def __init__(self, contract: "ContractHandle", descriptor: MethodDescriptor, args: Sequence[Any]) -> None:
        self.contract = contract
        self.descriptor = descriptor
        self.args = tuple(args)
        self._calldata = encode_call(descriptor, self.args)

    def encode_abi(self) -> str:
        return self._calldata

    def _tx(self, options: Optional[Mapping[str, Any]]) -> dict[str, Any]:
        tx: dict[str, Any] = {"to": self.contract.options.address, "data": self._calldata}
        for key, value in (options or {}).items():
            if value is None:
                continue
            tx[key] = to_quantity(value) if key in QUANTITY_FIELDS else value
        return tx

    async def call(self, options: Optional[Mapping[str, Any]] = None) -> Any:
        result = await self.contract.client.request("eth_call", [self._tx(options), "latest"])
        if result is None or result == "0x":
            return None
        return decode_return(self.descriptor, result)

    async def estimate_gas(self, options: Optional[Mapping[str, Any]] = None) -> int:
        return hex_to_int(await self.contract.client.request("eth_estimateGas", [self._tx(options)]))

    async def post(
        self,
        options: Optional[Mapping[str, Any]] = None,
        callback: Optional[SendCallback] = None,
    ) -> TransactionHandle:
        tx_hash = await self.contract.client.request("eth_sendTransaction", [self._tx(options)])
        logger.debug("sent %s -> %s", self.descriptor.name, tx_hash)
        if callback is not None:
            callback(tx_hash)
        return TransactionHandle(self.contract.client, tx_hash, self.contract)


class ContractHandle:
    """
    Remote handle for a deployed contract.

    ``methods`` maps each function name to a factory that binds
    positional arguments; the last definition wins for overloaded names.
    """

    def __init__(self, client: "RpcClient", address: str, abi: Sequence[Any]) -> None:
        self.client = client
        self.options = ContractOptions(address=to_checksum_address(address))
        self.abi = tuple(
            item if isinstance(item, MethodDescriptor) else MethodDescriptor.from_dict(item)
            for item in abi
        )
        self._functions = {item.name: item for item in self.abi if item.is_function}
        self._events = {item.name: item for item in self.abi if item.is_event}
        self._events_by_topic = {event_topic(e): e for e in self._events.values() if not e.anonymous}
        self.methods: dict[str, Callable[..., BoundMethod]] = {
            name: self._factory(descriptor) for name, descriptor in self._functions.items()
        }

    def _factory(self, descriptor: MethodDescriptor) -> Callable[..., BoundMethod]:
        def bind(*args: Any) -> BoundMethod:
            return BoundMethod(self, descriptor, args)

        bind.__name__ = descriptor.name
        return bind

    def event(self, name: str) -> MethodDescriptor:
        try:
            return self._events[name]
        except KeyError:
            raise ValueError(f"Event {name} not found in ABI") from None

    def decode_receipt_events(self, receipt: Mapping[str, Any]) -> dict[str, Any]:
        """
        Decode this contract's logs in a receipt.

        Returns:
            Event name -> event record, or list of records when the
            event was emitted more than once
        """
        events: dict[str, Any] = {}
        address = self.options.address.lower()
        for log in receipt.get("logs") or []:
            if str(log.get("address", "")).lower() != address:
                continue
            topics = log.get("topics") or []
            descriptor = self._events_by_topic.get(topics[0]) if topics else None
            if descriptor is None:
                continue
            record = decode_log(descriptor, log)
            existing = events.get(descriptor.name)
            if existing is None:
                events[descriptor.name] = record
            elif isinstance(existing, list):
                existing.append(record)
            else:
                events[descriptor.name] = [existing, record]
        return events

    async def find_event(
        self,
        event: str,
        transaction_hash: str,
        block_number: Optional[int] = None,
    ) -> Optional[dict[str, Any]]:
        """
        Look up the logs of ``event`` emitted by one transaction.

        Returns:
            ``{"events": [...]}`` or None when nothing matches
        """
        descriptor = self.event(event)

        if block_number is None:
            receipt = await self.client.get_transaction_receipt(transaction_hash)
            if receipt is None:
                return None
            raw_block = receipt["blockNumber"]
            block_number = hex_to_int(raw_block) if isinstance(raw_block, str) else raw_block

        logs = await self.client.get_logs(
            {
                "address": self.options.address,
                "fromBlock": to_quantity(block_number),
                "toBlock": to_quantity(block_number),
                "topics": [event_topic(descriptor)],
            }
        )
        wanted = transaction_hash.lower()
        events = [
            decode_log(descriptor, log)
            for log in logs
            if str(log.get("transactionHash", "")).lower() == wanted
        ]
        if not events:
            return None
        return {"events": events}
