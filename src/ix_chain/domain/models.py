"""Chain collaborator models."""

from dataclasses import dataclass


@dataclass
class WatchedContract:
    """A contract address registered for event delivery after creation."""

    id: str                 # contract address
    template: str           # ContractTemplate value
    created_at_block: int | None = None


@dataclass(frozen=True)
class TokenMetadata:
    name: str
    symbol: str
    decimals: int
