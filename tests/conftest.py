"""Shared test fixtures."""

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from persistence_manager import InMemoryDocumentStore, PersistenceManager, PersistenceSettings

FAST = PersistenceSettings(debounce_seconds=0.1, settle_seconds=0.05, grace_seconds=0.02)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start=datetime(2024, 1, 1, tzinfo=UTC)):
        self.current = start

    def now(self):
        return self.current

    def advance(self, seconds=1.0):
        self.current += timedelta(seconds=seconds)


class RecordingStore(InMemoryDocumentStore):
    """In-memory store that records every save and can be slowed or broken."""

    def __init__(self):
        super().__init__()
        self.saved = []
        self.save_delay = 0.0
        self.save_error = None
        self.load_delay = 0.0
        self.load_error = None

    async def seed(self, record):
        """Store *record* without counting it as a save."""
        await super().save(record)

    async def save(self, record):
        self.saved.append(record)
        if self.save_delay:
            await asyncio.sleep(self.save_delay)
        if self.save_error is not None:
            raise self.save_error
        await super().save(record)

    async def load(self, document_id):
        if self.load_delay:
            await asyncio.sleep(self.load_delay)
        if self.load_error is not None:
            raise self.load_error
        return await super().load(document_id)


@pytest.fixture
def settings():
    return FAST


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def pm(store, settings, clock):
    return PersistenceManager(store, settings=settings, clock=clock)
