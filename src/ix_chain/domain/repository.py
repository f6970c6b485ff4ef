# src/ix_chain/domain/repository.py
"""Chain collaborator Protocols.

Unit tests inject fakes that conform to these Protocols.
Infrastructure layer provides the web3 / entity-store backed implementations.
"""
from typing import Protocol


class ContractMetadataReaderProtocol(Protocol):
    """Synchronous-per-event reads against an ERC20 token contract."""

    async def name(self, token_address: str) -> str: ...

    async def symbol(self, token_address: str) -> str: ...

    async def decimals(self, token_address: str) -> int: ...


class ContractWatcherProtocol(Protocol):
    """One-way "start watching" channel towards the event source."""

    async def watch(
        self, address: str, template: str, block_number: int | None = None
    ) -> None: ...
