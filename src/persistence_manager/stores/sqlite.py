"""SQLiteDocumentStore — durable, single-file storage backend using aiosqlite."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import aiosqlite

from persistence_manager._internal.clock import from_epoch, to_epoch
from persistence_manager.exceptions import StoreConnectionError, StoreError, StoreWriteError
from persistence_manager.models import DocumentMetadata, DocumentRecord
from persistence_manager.stores.base import DocumentStore

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS documents (
    id         TEXT PRIMARY KEY NOT NULL,
    name       TEXT NOT NULL,
    content    TEXT NOT NULL,
    created_at REAL NOT NULL,
    updated_at REAL NOT NULL
)
"""

_CREATE_INDEX = "CREATE INDEX IF NOT EXISTS documents_updated_at ON documents (updated_at)"


class SQLiteDocumentStore(DocumentStore):
    """Persistent store backed by a single SQLite file.

    The connection is opened lazily on first use and shared by every later
    call; concurrent first calls wait on the same open.  ``content`` is
    stored as JSON text and timestamps as POSIX seconds, so the
    ``updated_at`` index serves the sorted listing directly.

    Parameters:
        db_path: Path to the SQLite database file.  Use ``":memory:"``
                 for an in-memory database (useful for testing).
    """

    def __init__(self, db_path: str = "documents.db") -> None:
        self._db_path = db_path
        self._opening: asyncio.Future[aiosqlite.Connection] | None = None

    async def _connect(self) -> aiosqlite.Connection:
        if self._opening is None:
            self._opening = asyncio.ensure_future(self._open())
        opening = self._opening
        try:
            return await asyncio.shield(opening)
        except StoreConnectionError:
            # Let the next call retry the open.
            if self._opening is opening:
                self._opening = None
            raise

    async def _open(self) -> aiosqlite.Connection:
        try:
            db = await aiosqlite.connect(self._db_path)
        except (aiosqlite.Error, OSError) as exc:
            raise StoreConnectionError("open", str(exc)) from exc
        try:
            await self._upgrade(db)
        except aiosqlite.Error as exc:
            await db.close()
            raise StoreConnectionError("upgrade", str(exc)) from exc
        logger.debug("Opened document store at %s", self._db_path)
        return db

    async def _upgrade(self, db: aiosqlite.Connection) -> None:
        async with db.execute("PRAGMA user_version") as cursor:
            row = await cursor.fetchone()
        version = row[0] if row else 0
        if version >= SCHEMA_VERSION:
            return
        try:
            await db.execute(_CREATE_TABLE)
            await db.execute(_CREATE_INDEX)
            await db.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
            await db.commit()
        except aiosqlite.Error:
            await db.rollback()
            raise
        logger.info("Upgraded document store schema from v%d to v%d", version, SCHEMA_VERSION)

    async def close(self) -> None:
        if self._opening is None:
            return
        opening, self._opening = self._opening, None
        try:
            db = await opening
        except StoreConnectionError:
            return
        await db.close()

    # ── DocumentStore protocol ───────────────────────────────

    async def save(self, record: DocumentRecord) -> None:
        try:
            content = json.dumps(record.content)
        except (TypeError, ValueError) as exc:
            raise StoreWriteError("save", f"content is not JSON-serializable: {exc}") from exc
        await self._write(
            "save",
            "INSERT OR REPLACE INTO documents (id, name, content, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?)",
            (
                record.id,
                record.name,
                content,
                to_epoch(record.created_at),
                to_epoch(record.updated_at),
            ),
        )

    async def load(self, document_id: str) -> DocumentRecord | None:
        db = await self._connect()
        try:
            async with db.execute(
                "SELECT id, name, content, created_at, updated_at FROM documents WHERE id = ?",
                (document_id,),
            ) as cursor:
                row = await cursor.fetchone()
        except aiosqlite.Error as exc:
            raise StoreError("load", str(exc)) from exc
        if row is None:
            return None
        return DocumentRecord(
            id=row[0],
            name=row[1],
            content=json.loads(row[2]),
            created_at=from_epoch(row[3]),
            updated_at=from_epoch(row[4]),
        )

    async def delete(self, document_id: str) -> None:
        await self._write("delete", "DELETE FROM documents WHERE id = ?", (document_id,))

    async def list_documents(self) -> list[DocumentMetadata]:
        db = await self._connect()
        try:
            async with db.execute(
                "SELECT id, name, created_at, updated_at FROM documents "
                "ORDER BY updated_at DESC"
            ) as cursor:
                rows = await cursor.fetchall()
        except aiosqlite.Error as exc:
            raise StoreError("list_documents", str(exc)) from exc
        return [
            DocumentMetadata(
                id=row[0],
                name=row[1],
                created_at=from_epoch(row[2]),
                updated_at=from_epoch(row[3]),
            )
            for row in rows
        ]

    async def _write(self, operation: str, sql: str, params: tuple[Any, ...]) -> None:
        db = await self._connect()
        try:
            await db.execute(sql, params)
            await db.commit()
        except aiosqlite.Error as exc:
            await self._rollback(db)
            raise StoreWriteError(operation, str(exc)) from exc
        except BaseException:
            # Cancelled mid-write.  The statement may still be queued on the
            # connection thread; the rollback queues behind it and undoes it
            # either way.
            await self._rollback(db)
            raise

    async def _rollback(self, db: aiosqlite.Connection) -> None:
        await asyncio.shield(db.rollback())
