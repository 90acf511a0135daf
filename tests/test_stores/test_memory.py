"""Tests for InMemoryDocumentStore."""

from datetime import UTC, datetime, timedelta

import pytest

from persistence_manager import DocumentMetadata, DocumentRecord
from persistence_manager.stores import InMemoryDocumentStore

EPOCH = datetime(2024, 1, 1, tzinfo=UTC)


def record(doc_id, content=None, *, updated=0):
    return DocumentRecord(
        id=doc_id,
        name=f"doc {doc_id}",
        content=content,
        created_at=EPOCH,
        updated_at=EPOCH + timedelta(seconds=updated),
    )


@pytest.fixture
def store():
    return InMemoryDocumentStore()


async def test_load_nonexistent(store):
    assert await store.load("nope") is None


async def test_save_and_load(store):
    await store.save(record("a", {"val": 1}))
    loaded = await store.load("a")
    assert loaded.content == {"val": 1}
    assert loaded.name == "doc a"


async def test_overwrite(store):
    await store.save(record("a", "first", updated=1))
    await store.save(record("a", "second", updated=2))
    loaded = await store.load("a")
    assert loaded.content == "second"
    assert loaded.updated_at == EPOCH + timedelta(seconds=2)


async def test_delete(store):
    await store.save(record("a"))
    await store.delete("a")
    assert await store.load("a") is None


async def test_delete_nonexistent(store):
    await store.delete("nope")  # should not raise


async def test_list_sorted_by_updated_at_desc(store):
    await store.save(record("old", updated=100))
    await store.save(record("new", updated=300))
    await store.save(record("mid", updated=200))

    listing = await store.list_documents()
    assert [m.id for m in listing] == ["new", "mid", "old"]
    assert all(type(m) is DocumentMetadata for m in listing)


async def test_list_empty(store):
    assert await store.list_documents() == []


async def test_stored_content_is_isolated(store):
    content = {"nodes": [1]}
    await store.save(record("a", content))
    content["nodes"].append(2)

    loaded = await store.load("a")
    assert loaded.content == {"nodes": [1]}

    loaded.content["nodes"].append(3)
    assert (await store.load("a")).content == {"nodes": [1]}


def test_generate_id_unique(store):
    ids = {store.generate_id() for _ in range(10_000)}
    assert len(ids) == 10_000
