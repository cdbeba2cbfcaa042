"""
JSON-RPC Client for EVM nodes.

Async client on httpx. Node-managed accounts submit transactions
(``eth_sendTransaction``); no local signing happens here.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Optional, Sequence

import httpx

from ..errors import ContractError, RpcError
from ..utils import hex_to_int, to_checksum_address
from .contract import ContractHandle

logger = logging.getLogger(__name__)

DEFAULT_RPC_URL = "http://127.0.0.1:8545"
DEFAULT_TIMEOUT = 30.0


class RpcClient:
    """
    Async JSON-RPC 2.0 client.

    Args:
        rpc_url: Node endpoint
        timeout: Request timeout in seconds
        default_from: Sender used when an invocation does not name one
        transport: Optional httpx transport (tests use ``httpx.MockTransport``)
    """

    # Local signer; always None since transactions are signed by the node.
    sign = None

    def __init__(
        self,
        rpc_url: str = DEFAULT_RPC_URL,
        timeout: float = DEFAULT_TIMEOUT,
        default_from: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        url = (rpc_url or "").strip()
        if not url:
            raise ValueError("rpc_url must be a non-empty string.")
        self.rpc_url = url
        self.default_from = default_from
        self._ids = itertools.count(1)
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def __aenter__(self) -> "RpcClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def request(self, method: str, params: Optional[Sequence[Any]] = None) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: If the node answers with an error object
            httpx.HTTPStatusError: If the HTTP request fails
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": list(params or []),
        }
        logger.debug("rpc %s %s", method, payload["params"])

        response = await self._http.post(self.rpc_url, json=payload)
        response.raise_for_status()
        data = response.json()

        error = data.get("error")
        if error is not None:
            if isinstance(error, dict):
                raise RpcError(error.get("code"), str(error.get("message", "")), error.get("data"))
            raise RpcError(None, str(error))

        return data.get("result")

    async def default_account(self) -> str:
        """
        Resolve the default sender.

        Returns:
            ``default_from`` if configured, else the node's first account

        Raises:
            ContractError: If the node manages no accounts
        """
        if self.default_from:
            return to_checksum_address(self.default_from)
        accounts = await self.request("eth_accounts")
        if not accounts:
            raise ContractError("No default account: node returned no accounts and none is configured.")
        return to_checksum_address(accounts[0])

    def create_contract(self, address: str, abi: Sequence[Any]) -> ContractHandle:
        return ContractHandle(self, address, abi)

    async def chain_id(self) -> int:
        return hex_to_int(await self.request("eth_chainId"))

    async def block_number(self) -> int:
        return hex_to_int(await self.request("eth_blockNumber"))

    async def gas_price(self) -> int:
        return hex_to_int(await self.request("eth_gasPrice"))

    async def get_transaction_count(self, address: str, block: str = "pending") -> int:
        return hex_to_int(await self.request("eth_getTransactionCount", [address, block]))

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[dict[str, Any]]:
        return await self.request("eth_getTransactionReceipt", [tx_hash])

    async def get_logs(self, log_filter: dict[str, Any]) -> list[dict[str, Any]]:
        return await self.request("eth_getLogs", [log_filter]) or []

