"""Storage backends for document persistence."""

from persistence_manager.stores.base import DocumentStore
from persistence_manager.stores.memory import InMemoryDocumentStore
from persistence_manager.stores.sqlite import SQLiteDocumentStore

__all__ = ["DocumentStore", "InMemoryDocumentStore", "SQLiteDocumentStore"]
