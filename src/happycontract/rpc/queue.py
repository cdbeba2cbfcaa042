"""
In-memory submission queue.

Serializes transaction submissions: one submission in flight at a time,
executed in the order they were pushed. Each unit of work receives the
fields the queue assigns (currently the sender nonce).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Mapping

from .client import RpcClient
from .contract import TransactionHandle

logger = logging.getLogger(__name__)

UnitOfWork = Callable[[dict[str, Any]], Awaitable[TransactionHandle]]


class MemoryTransactionQueue:
    def __init__(self, host: RpcClient) -> None:
        self.host = host
        self._lock = asyncio.Lock()
        self._nonces: dict[str, int] = {}

    async def _next_nonce(self, sender: str) -> int:
        pending = await self.host.get_transaction_count(sender, "pending")
        return max(pending, self._nonces.get(sender.lower(), 0))

    async def push(self, work: UnitOfWork, options: Mapping[str, Any]) -> TransactionHandle:
        """
        Run ``work`` once every earlier submission has been broadcast.

        Args:
            work: Submits the transaction, given the queue-assigned fields
            options: Resolved transaction options (``from`` is used for nonces)

        Returns:
            Whatever handle ``work`` returns
        """
        async with self._lock:
            sender = options.get("from")
            assigned: dict[str, Any] = {}
            if sender:
                assigned["nonce"] = await self._next_nonce(sender)
                logger.debug("queue: nonce %s for %s", assigned["nonce"], sender)

            handle = await work(assigned)

            if sender:
                self._nonces[sender.lower()] = assigned["nonce"] + 1
            return handle

    def forget(self, sender: str) -> None:
        """Drop the locally tracked nonce for ``sender`` (e.g. after a replaced tx)."""
        self._nonces.pop(sender.lower(), None)
