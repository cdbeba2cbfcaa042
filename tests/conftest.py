"""
Shared fixtures: a sample contract schema, in-process fakes for the
client/contract collaborators, and a fake JSON-RPC node served through
``httpx.MockTransport``.
"""

from __future__ import annotations

import copy
import json
from typing import Any, Callable, Optional

import httpx
import pytest

from happycontract.abi.models import ContractSchema, MethodDescriptor
from happycontract.rpc.client import RpcClient
from happycontract.rpc.contract import TransactionHandle

CONTRACT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
DEFAULT_ACCOUNT = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
OTHER_ACCOUNT = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
TX_HASH = "0x" + "ab" * 32
TRANSFER_TOPIC = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"

SCHEMA_PAYLOAD: dict[str, Any] = {
    "contractName": "Vault",
    "contractAddress": CONTRACT_ADDRESS,
    "abi": [
        {
            "type": "function",
            "name": "balanceOf",
            "stateMutability": "view",
            "inputs": [{"name": "owner", "type": "address"}],
            "outputs": [{"name": "", "type": "uint256"}],
        },
        {
            "type": "function",
            "name": "transfer",
            "stateMutability": "nonpayable",
            "inputs": [
                {"name": "to", "type": "address"},
                {"name": "amount", "type": "uint256"},
            ],
            "outputs": [{"name": "", "type": "bool"}],
        },
        {
            "type": "function",
            "name": "getPosition",
            "stateMutability": "view",
            "inputs": [{"name": "id", "type": "uint256"}],
            "outputs": [
                {
                    "name": "position",
                    "type": "tuple",
                    "components": [
                        {"name": "owner", "type": "address"},
                        {"name": "size", "type": "uint256"},
                        {"name": "leverage", "type": "uint8"},
                    ],
                }
            ],
        },
        {
            "type": "function",
            "name": "getReserves",
            "stateMutability": "view",
            "inputs": [],
            "outputs": [
                {"name": "reserve0", "type": "uint256"},
                {"name": "reserve1", "type": "uint256"},
                {"name": "blockTimestampLast", "type": "uint32"},
            ],
        },
        {
            "type": "function",
            "name": "ping",
            "stateMutability": "nonpayable",
            "inputs": [],
            "outputs": [],
        },
        {
            "type": "event",
            "name": "Transfer",
            "anonymous": False,
            "inputs": [
                {"indexed": True, "name": "from", "type": "address"},
                {"indexed": True, "name": "to", "type": "address"},
                {"indexed": False, "name": "value", "type": "uint256"},
            ],
        },
    ],
}


@pytest.fixture()
def schema_payload() -> dict[str, Any]:
    return copy.deepcopy(SCHEMA_PAYLOAD)


@pytest.fixture()
def schema(schema_payload: dict[str, Any]) -> ContractSchema:
    return ContractSchema.from_dict(schema_payload)


# ============ In-process fakes ============


class FakeBoundMethod:
    def __init__(self, contract: "FakeContract", descriptor: MethodDescriptor, args: tuple[Any, ...]) -> None:
        self.contract = contract
        self.descriptor = descriptor
        self.args = args

    async def call(self, options: Optional[dict[str, Any]] = None) -> Any:
        self.contract.calls.append(("call", self.descriptor.name, self.args, dict(options or {})))
        result = self.contract.call_results.get(self.descriptor.name)
        if isinstance(result, Exception):
            raise result
        return result

    async def post(self, options: Optional[dict[str, Any]] = None, callback: Optional[Callable[[str], Any]] = None) -> TransactionHandle:
        self.contract.calls.append(("post", self.descriptor.name, self.args, dict(options or {})))
        tx_hash = "0x%064x" % len(self.contract.calls)
        if callback is not None:
            callback(tx_hash)
        return TransactionHandle(self.contract.client, tx_hash)

    async def estimate_gas(self, options: Optional[dict[str, Any]] = None) -> int:
        self.contract.calls.append(("estimate_gas", self.descriptor.name, self.args, dict(options or {})))
        return 21000

    def encode_abi(self) -> str:
        return "0xfeed" + "".join(str(a) for a in self.args)


class _Options:
    def __init__(self, address: str) -> None:
        self.address = address


class FakeContract:
    def __init__(self, client: "FakeClient", address: str, abi: Any) -> None:
        self.client = client
        self.options = _Options(address)
        self.abi = abi
        self.calls: list[tuple[str, str, tuple[Any, ...], dict[str, Any]]] = []
        self.call_results: dict[str, Any] = {}
        self.found_event: Optional[dict[str, Any]] = None
        self.find_event_calls: list[tuple[str, str, Optional[int]]] = []
        self.methods = {
            item.name: self._factory(item) for item in abi if item.is_function
        }

    def _factory(self, descriptor: MethodDescriptor) -> Callable[..., FakeBoundMethod]:
        def bind(*args: Any) -> FakeBoundMethod:
            return FakeBoundMethod(self, descriptor, args)

        return bind

    async def find_event(self, event: str, transaction_hash: str, block_number: Optional[int] = None) -> Optional[dict[str, Any]]:
        self.find_event_calls.append((event, transaction_hash, block_number))
        return self.found_event


class FakeClient:
    sign = None

    def __init__(self, account: str = DEFAULT_ACCOUNT, pending_nonce: int = 0) -> None:
        self.account = account
        self.pending_nonce = pending_nonce
        self.default_account_calls = 0
        self.contracts: list[FakeContract] = []

    async def default_account(self) -> str:
        self.default_account_calls += 1
        return self.account

    async def get_transaction_count(self, address: str, block: str = "pending") -> int:
        return self.pending_nonce

    def create_contract(self, address: str, abi: Any) -> FakeContract:
        contract = FakeContract(self, address, abi)
        self.contracts.append(contract)
        return contract


@pytest.fixture()
def fake_client() -> FakeClient:
    return FakeClient()


# ============ Fake JSON-RPC node ============


class FakeNode:
    """Answers JSON-RPC requests from a method -> result table."""

    def __init__(self) -> None:
        self.handlers: dict[str, Any] = {}
        self.requests: list[dict[str, Any]] = []
        self.status_code = 200

    def on(self, method: str, result: Any) -> None:
        """Register a result, or a callable taking the params list."""
        self.handlers[method] = result

    def fail(self, method: str, code: int, message: str, data: Any = None) -> None:
        """Answer ``method`` with a JSON-RPC error object."""
        self.handlers[method] = _RpcFailure(code, message, data)

    def handle(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append(payload)
        if self.status_code != 200:
            return httpx.Response(self.status_code, text="upstream failure")

        envelope: dict[str, Any] = {"jsonrpc": "2.0", "id": payload["id"]}
        if payload["method"] not in self.handlers:
            envelope["error"] = {"code": -32601, "message": f"method {payload['method']} not found"}
            return httpx.Response(200, json=envelope)

        handler = self.handlers[payload["method"]]
        if isinstance(handler, _RpcFailure):
            envelope["error"] = {"code": handler.code, "message": handler.message, "data": handler.data}
        else:
            envelope["result"] = handler(payload["params"]) if callable(handler) else handler
        return httpx.Response(200, json=envelope)

    def client(self, **kwargs: Any) -> RpcClient:
        return RpcClient("http://node.test", transport=httpx.MockTransport(self.handle), **kwargs)

    def methods(self) -> list[str]:
        return [r["method"] for r in self.requests]

    def params_for(self, method: str) -> list[list[Any]]:
        return [r["params"] for r in self.requests if r["method"] == method]


class _RpcFailure:
    def __init__(self, code: int, message: str, data: Any = None) -> None:
        self.code = code
        self.message = message
        self.data = data


@pytest.fixture()
def node() -> FakeNode:
    return FakeNode()
