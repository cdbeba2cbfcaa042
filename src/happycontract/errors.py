from __future__ import annotations

from typing import Any, Optional


class ContractError(RuntimeError):
    exit_code: int = 1


class SchemaError(ContractError):
    exit_code = 2

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class DecodeMismatchError(ContractError):
    exit_code = 3


class EventNotFoundError(ContractError):
    exit_code = 4

    def __init__(self, event_name: str, tx_hash: Optional[str] = None) -> None:
        message = f"Event {event_name} not found"
        if tx_hash:
            message += f" in transaction {tx_hash}"
        super().__init__(message)
        self.event_name = event_name
        self.tx_hash = tx_hash


class RpcError(ContractError):
    exit_code = 5

    def __init__(self, code: Optional[int], message: str, data: Any = None) -> None:
        detail = f"RPC error {code}: {message}" if code is not None else f"RPC error: {message}"
        super().__init__(detail)
        self.code = code
        self.rpc_message = message
        self.data = data


__all__ = [
    "ContractError",
    "DecodeMismatchError",
    "EventNotFoundError",
    "RpcError",
    "SchemaError",
]
