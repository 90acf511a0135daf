"""Document records, listing metadata and the in-memory session state."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

DEFAULT_DOCUMENT_NAME = "Untitled Document"


class DocumentMetadata(BaseModel):
    """Listing projection of a :class:`DocumentRecord` (no ``content``).

    Attributes:
        id: Opaque document identifier
        name: Display name
        created_at: When the document was first created
        updated_at: When the document was last written
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    created_at: datetime
    updated_at: datetime


class DocumentRecord(DocumentMetadata):
    """A full persisted document.

    Writes are full overwrites keyed by ``id``.  ``content`` is whatever the
    editor produced; the manager never inspects it, the store only has to be
    able to serialize it.
    """

    content: Any = None

    def metadata(self) -> DocumentMetadata:
        return DocumentMetadata(
            id=self.id,
            name=self.name,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


@dataclass(frozen=True)
class Snapshot:
    """Editor state captured on a change notification, staged for the next write."""

    content: Any


@dataclass
class SessionState:
    """The single active document owned by one :class:`PersistenceManager`.

    Attributes:
        document_id: Id of the active document, ``None`` while idle.
        name:        Display name written with every save.
        created_at:  Creation time carried into every save.  ``None`` only
                     before the first session starts.
        pending:     Last recorded snapshot; every save writes it.
        loading:     ``True`` while a load (plus its settle delay) is running.
    """

    document_id: str | None = None
    name: str = DEFAULT_DOCUMENT_NAME
    created_at: datetime | None = None
    pending: Snapshot | None = None
    loading: bool = False
