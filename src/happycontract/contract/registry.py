from __future__ import annotations

import logging
from typing import Optional, Union

from ..abi.models import ContractSchema
from ..rpc.client import RpcClient
from ..rpc.queue import MemoryTransactionQueue
from .wrapper import ContractWrapper

logger = logging.getLogger(__name__)


class ContractRegistry:
    """
    Named ContractWrapper instances, one per name.

    Owned by whatever builds contract access (the CLI, an application
    container, a test fixture). Entries live until ``clear()``.
    """

    def __init__(self) -> None:
        self._contracts: dict[str, ContractWrapper] = {}

    def instance_for(
        self,
        schema: ContractSchema,
        client: Union[RpcClient, MemoryTransactionQueue],
        name: Optional[str] = None,
    ) -> ContractWrapper:
        contract_name = name or schema.contract_name
        if contract_name not in self._contracts:
            logger.debug("registry: creating wrapper %s", contract_name)
            self._contracts[contract_name] = ContractWrapper(schema, client)
        return self._contracts[contract_name]

    def get(self, name: str) -> Optional[ContractWrapper]:
        return self._contracts.get(name)

    def clear(self) -> None:
        self._contracts.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._contracts

    def __len__(self) -> int:
        return len(self._contracts)
