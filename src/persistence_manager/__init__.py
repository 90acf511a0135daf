"""persistence_manager — debounced, load-safe autosave for document editors.

The editor reports changes, the manager coalesces them into infrequent
writes, and any :class:`DocumentStore` backend keeps the records.
"""

from persistence_manager.config import PersistenceSettings, StoreConfig, create_store
from persistence_manager.exceptions import (
    PersistenceConfigError,
    PersistenceError,
    StoreConnectionError,
    StoreError,
    StoreWriteError,
)
from persistence_manager.manager import PersistenceManager
from persistence_manager.models import DocumentMetadata, DocumentRecord, SessionState, Snapshot
from persistence_manager.stores import DocumentStore, InMemoryDocumentStore, SQLiteDocumentStore

__all__ = [
    "DocumentMetadata",
    "DocumentRecord",
    "DocumentStore",
    "InMemoryDocumentStore",
    "PersistenceConfigError",
    "PersistenceError",
    "PersistenceManager",
    "PersistenceSettings",
    "SQLiteDocumentStore",
    "SessionState",
    "Snapshot",
    "StoreConfig",
    "StoreConnectionError",
    "StoreError",
    "StoreWriteError",
    "create_store",
]
