"""DocumentStore protocol — async CRUD and listing for document records."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from persistence_manager.models import DocumentMetadata, DocumentRecord


class DocumentStore(ABC):
    """Abstract base for all storage backends.

    Records are keyed by ``record.id`` and written as full overwrites, so the
    last write to commit wins.  The store never looks inside
    ``record.content``.
    """

    @abstractmethod
    async def save(self, record: DocumentRecord) -> None:
        """Create or overwrite the record with ``record.id``.

        Must be committed before returning.
        """
        ...

    @abstractmethod
    async def load(self, document_id: str) -> DocumentRecord | None:
        """Return the stored record, or ``None`` if not found."""
        ...

    @abstractmethod
    async def delete(self, document_id: str) -> None:
        """Delete a record.  No-op if the id does not exist."""
        ...

    @abstractmethod
    async def list_documents(self) -> list[DocumentMetadata]:
        """Return metadata for every record, most recently updated first."""
        ...

    def generate_id(self) -> str:
        """Return a new document id, unique with overwhelming probability."""
        return uuid.uuid4().hex

    async def close(self) -> None:
        """Release backend resources.  Default is a no-op."""
