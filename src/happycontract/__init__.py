__version__ = "1.0.0"

__all__ = [
    # Schema
    "ContractSchema",
    "MethodDescriptor",
    "TypedParam",
    "load_schema",
    "load_artifact",
    # Decoding
    "decode_outputs",
    "decode_result",
    # Contract access
    "ContractRegistry",
    "ContractWrapper",
    "MethodFacade",
    "Options",
    # RPC
    "MemoryTransactionQueue",
    "RpcClient",
    "TransactionHandle",
    # Config
    "Settings",
    "load_settings",
    # Errors
    "ContractError",
    "DecodeMismatchError",
    "EventNotFoundError",
    "RpcError",
    "SchemaError",
]

from .abi.decode import decode_outputs, decode_result
from .abi.loader import load_artifact, load_schema
from .abi.models import ContractSchema, MethodDescriptor, TypedParam
from .config import Settings, load_settings
from .contract.dispatch import Options
from .contract.method import MethodFacade
from .contract.registry import ContractRegistry
from .contract.wrapper import ContractWrapper
from .errors import ContractError, DecodeMismatchError, EventNotFoundError, RpcError, SchemaError
from .rpc.client import RpcClient
from .rpc.contract import TransactionHandle
from .rpc.queue import MemoryTransactionQueue
