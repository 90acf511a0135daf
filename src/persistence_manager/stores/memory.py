"""InMemoryDocumentStore — zero-config, dict-backed storage for development and testing."""

from __future__ import annotations

from persistence_manager.models import DocumentMetadata, DocumentRecord
from persistence_manager.stores.base import DocumentStore


class InMemoryDocumentStore(DocumentStore):
    """In-memory store keyed by document id.  Data is lost on process exit.

    Records are deep-copied on the way in and out, so mutating a returned
    ``content`` never changes what is stored.
    """

    def __init__(self) -> None:
        self._records: dict[str, DocumentRecord] = {}

    async def save(self, record: DocumentRecord) -> None:
        self._records[record.id] = record.model_copy(deep=True)

    async def load(self, document_id: str) -> DocumentRecord | None:
        record = self._records.get(document_id)
        if record is None:
            return None
        return record.model_copy(deep=True)

    async def delete(self, document_id: str) -> None:
        self._records.pop(document_id, None)

    async def list_documents(self) -> list[DocumentMetadata]:
        metadata = [record.metadata() for record in self._records.values()]
        return sorted(metadata, key=lambda m: m.updated_at, reverse=True)
