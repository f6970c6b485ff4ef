"""Collaborators shared by every handler of one processing run."""

from dataclasses import dataclass, field

from src.ix_chain.domain.repository import (
    ContractMetadataReaderProtocol,
    ContractWatcherProtocol,
)
from src.ix_order.application.intents import IntentFilter
from src.ix_store.domain.repository import EntityStoreProtocol


@dataclass
class IndexerContext:
    store: EntityStoreProtocol
    metadata_reader: ContractMetadataReaderProtocol
    watcher: ContractWatcherProtocol
    intent_filter: IntentFilter = field(default_factory=IntentFilter)
