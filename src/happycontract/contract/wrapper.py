"""
Contract Wrapper - One schema, one remote contract handle.

Builds the method table on first access and looks up events emitted by
submitted transactions.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from ..abi.models import ContractSchema, MethodDescriptor
from ..errors import EventNotFoundError, SchemaError
from ..rpc.client import RpcClient
from ..rpc.contract import ContractHandle
from ..rpc.queue import MemoryTransactionQueue
from .method import MethodTable

logger = logging.getLogger(__name__)


class ContractWrapper:
    """
    Typed access to one deployed contract.

    Args:
        schema: Contract name, address and ABI
        client: RPC client, or a submission queue whose host is used as
            the client and through which every ``post`` is routed

    Raises:
        SchemaError: If ``schema`` is missing or not a ContractSchema
    """

    def __init__(self, schema: ContractSchema, client: Union[RpcClient, MemoryTransactionQueue]) -> None:
        if schema is None:
            raise SchemaError("Contract schema is missing.")
        if not isinstance(schema, ContractSchema):
            raise SchemaError(
                f"Expected ContractSchema, got {type(schema).__name__}; use ContractSchema.from_dict()."
            )
        self._schema = schema

        if isinstance(client, MemoryTransactionQueue):
            self._client = client.host
            self._queue: Optional[MemoryTransactionQueue] = client
        else:
            self._client = client
            self._queue = None

        self._abis: dict[str, MethodDescriptor] = {}
        for item in schema.abi:
            self._abis[item.name] = item

        self._contract: ContractHandle = self._client.create_contract(schema.contract_address, schema.abi)
        self._api: Optional[MethodTable] = None

    @property
    def schema(self) -> ContractSchema:
        return self._schema

    @property
    def client(self) -> RpcClient:
        return self._client

    @property
    def queue(self) -> Optional[MemoryTransactionQueue]:
        return self._queue

    @property
    def contract(self) -> ContractHandle:
        return self._contract

    @property
    def address(self) -> str:
        return self._contract.options.address

    @property
    def api(self) -> MethodTable:
        if self._api is None:
            self._api = MethodTable(self)
        return self._api

    def descriptor(self, name: str) -> MethodDescriptor:
        return self._abis[name]

    async def find_event(
        self,
        event: str,
        transaction_hash: str,
        block_number: Optional[int] = None,
    ) -> Optional[list[dict[str, Any]]]:
        found = await self._contract.find_event(event, transaction_hash, block_number)
        if not found:
            return None
        return found.get("events") or None

    async def find_event_from_receipt(self, event: str, receipt: Mapping[str, Any]) -> list[dict[str, Any]]:
        """
        Return the ``event`` records of a transaction.

        Events already decoded into the receipt are used as is; otherwise
        the logs are looked up from the node.

        Raises:
            EventNotFoundError: If neither the receipt nor the node has the event
        """
        embedded = (receipt.get("events") or {}).get(event)
        if embedded:
            return list(embedded) if isinstance(embedded, list) else [embedded]

        tx_hash = receipt["transactionHash"]
        logger.debug("%s not in receipt of %s, querying logs", event, tx_hash)
        found = await self.find_event(event, tx_hash, receipt.get("blockNumber"))
        if not found:
            raise EventNotFoundError(event, tx_hash)
        return found
