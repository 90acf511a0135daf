"""PersistenceManager — debounced autosave for the single active document."""

from __future__ import annotations

import asyncio
import dataclasses
import inspect
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from persistence_manager._internal.clock import Clock, SystemClock
from persistence_manager._internal.debounce import Debouncer
from persistence_manager.config import PersistenceSettings
from persistence_manager.models import (
    DEFAULT_DOCUMENT_NAME,
    DocumentRecord,
    SessionState,
    Snapshot,
)
from persistence_manager.stores.memory import InMemoryDocumentStore

if TYPE_CHECKING:
    from persistence_manager.stores.base import DocumentStore

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[Exception], Any]


class PersistenceManager:
    """Sits between an editor and a :class:`DocumentStore`.

    The editor reports every change through :meth:`on_state_change`; the
    manager keeps the latest snapshot and writes it once the editor has been
    quiet for ``settings.debounce_seconds``.

    Loading is the delicate part.  Restoring a loaded document makes the
    editor emit the same change notifications as a user edit, so while a
    load is running, and for ``settings.settle_seconds`` after it resolves,
    notifications are dropped and no write may start.  Otherwise a freshly
    loaded document would overwrite itself with a half-restored state.

    Save failures never reach the editor: they are logged and passed to the
    handler registered with :meth:`set_error_handler`.  Load failures
    propagate to the caller of :meth:`load_session`.

    There is no lock around the write itself.  A :meth:`force_save` racing a
    debounce timer can issue two writes for the same id; both are full
    overwrites, so the last one to commit wins.

    Parameters:
        store:    Storage backend.  Defaults to :class:`InMemoryDocumentStore`
                  when omitted.
        settings: Timing constants.  Defaults to :class:`PersistenceSettings`.
        clock:    Injectable clock for record timestamps.
    """

    def __init__(
        self,
        store: DocumentStore | None = None,
        *,
        settings: PersistenceSettings | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._store: DocumentStore = store or InMemoryDocumentStore()
        self._settings = settings or PersistenceSettings()
        self._clock = clock or SystemClock()
        self._session = SessionState()
        self._error_handler: ErrorHandler | None = None
        self._load_generation = 0
        self._session_generation = 0
        self._armed_generation = 0
        self._debouncer = Debouncer(self._save, self._settings.debounce_seconds)

    # ── session lifecycle ────────────────────────────────────

    def create_new_session(self, name: str | None = None) -> str:
        """Start a fresh, unsaved document and return its new id."""
        document_id = self._store.generate_id()
        self._replace_session(
            SessionState(
                document_id=document_id,
                name=name or DEFAULT_DOCUMENT_NAME,
                created_at=self._clock.now(),
                loading=self._session.loading,
            )
        )
        logger.info("Created document %s", document_id)
        return document_id

    async def load_session(self, document_id: str) -> DocumentRecord | None:
        """Load *document_id* and make it the active session.

        Returns the record, or ``None`` if the store has no such id (the
        session is then left as it was).  Store errors propagate and also
        leave the session untouched.

        Autosave is suspended from the moment this is called until
        ``settle_seconds`` after the load resolves, whatever the outcome.
        An autosave timer armed before a successful load never writes.
        """
        self._session.loading = True
        self._load_generation += 1
        generation = self._load_generation
        try:
            record = await self._store.load(document_id)
            if record is not None:
                self._replace_session(
                    SessionState(
                        document_id=record.id,
                        name=record.name,
                        created_at=record.created_at,
                        pending=Snapshot(record.content),
                        loading=True,
                    )
                )
                logger.info("Loaded document %s", record.id)
            else:
                logger.info("Document %s not found", document_id)
            return record
        finally:
            asyncio.get_running_loop().call_later(
                self._settings.settle_seconds, self._release_loading, generation
            )

    def set_document(self, document_id: str, name: str | None = None) -> None:
        """Point the session at an existing id without loading it."""
        self._session.document_id = document_id
        if name:
            self._session.name = name
        if self._session.created_at is None:
            self._session.created_at = self._clock.now()

    def reset_session(self) -> None:
        """Abandon the active session.  Any unsaved snapshot is dropped."""
        self._replace_session(SessionState(loading=self._session.loading))

    def _replace_session(self, session: SessionState) -> None:
        # Autosave timers armed for the previous session become no-ops.
        self._session = session
        self._session_generation += 1

    def _release_loading(self, generation: int) -> None:
        # A newer load owns the flag now.
        if generation != self._load_generation:
            return
        self._session.loading = False
        logger.debug("Autosave re-armed after load settle delay")

    # ── change notifications ─────────────────────────────────

    def on_state_change(self, snapshot: Snapshot) -> None:
        """Record *snapshot* and (re)start the autosave timer.

        Ignored while loading, and when no session is active.
        """
        if self._session.loading:
            logger.debug("Dropped state change during load")
            return
        if self._session.document_id is None:
            return
        self._session.pending = snapshot
        self._armed_generation = self._session_generation
        self._debouncer.schedule()

    # ── saving ───────────────────────────────────────────────

    def set_error_handler(self, handler: ErrorHandler | None) -> None:
        """Register a callback for save failures.  May be sync or async."""
        self._error_handler = handler

    async def force_save(self, *, await_completion: bool = True) -> None:
        """Write the pending snapshot now instead of waiting for the timer.

        By default waits for the write to finish.  With
        ``await_completion=False`` it only waits ``grace_seconds`` after
        starting it, so a slow backend may still be writing on return.
        """
        self._armed_generation = self._session_generation
        task = self._debouncer.flush()
        if await_completion and task is not None:
            # Cancelling the wait must not abort the write.
            await asyncio.shield(task)
            return
        await asyncio.sleep(self._settings.grace_seconds)

    async def _save(self) -> None:
        session = self._session
        if session.document_id is None or session.pending is None or session.loading:
            return
        if self._armed_generation != self._session_generation:
            logger.debug("Skipped autosave armed for a replaced session")
            return

        now = self._clock.now()
        record = DocumentRecord(
            id=session.document_id,
            name=session.name,
            content=session.pending.content,
            created_at=session.created_at or now,
            updated_at=now,
        )
        try:
            await self._store.save(record)
        except Exception as exc:
            logger.exception("Save failed for document %s", record.id)
            await self._report(exc)
            return
        logger.info("Saved document %s", record.id)

    async def _report(self, exc: Exception) -> None:
        if self._error_handler is None:
            return
        result = self._error_handler(exc)
        if inspect.isawaitable(result):
            await result

    # ── introspection ────────────────────────────────────────

    @property
    def document_id(self) -> str | None:
        return self._session.document_id

    @property
    def name(self) -> str:
        return self._session.name

    @property
    def is_loading(self) -> bool:
        return self._session.loading

    @property
    def session(self) -> SessionState:
        """A copy of the current session state."""
        return dataclasses.replace(self._session)

    @property
    def save_pending(self) -> bool:
        """``True`` while an autosave timer is armed."""
        return self._debouncer.pending

    @property
    def settings(self) -> PersistenceSettings:
        return self._settings

    @property
    def store(self) -> DocumentStore:
        return self._store
