"""
persistence_manager — Autosave demo

A fake editor fires change notifications; the manager coalesces them
into a single write, ignores the echoes of a load, and force-saves on exit.
"""

import asyncio
import logging
import tempfile
from pathlib import Path

from persistence_manager import (
    PersistenceManager,
    PersistenceSettings,
    Snapshot,
    StoreConfig,
    create_store,
)

# ─── A stand-in editor (anything that produces snapshots) ───


class FakeEditor:
    def __init__(self, pm: PersistenceManager) -> None:
        self.pm = pm
        self.nodes: list[str] = []

    def add_node(self, node: str) -> None:
        self.nodes.append(node)
        self.pm.on_state_change(Snapshot({"nodes": list(self.nodes)}))

    def restore(self, content: dict) -> None:
        # Restoring re-emits change notifications, one per node.
        self.nodes = []
        for node in content["nodes"]:
            self.add_node(node)


def report(error: Exception) -> None:
    print(f"  [SAVE FAILED] {error}")


async def main():
    logging.basicConfig(level=logging.INFO, format="  %(name)s: %(message)s")
    db_path = Path(tempfile.mkdtemp()) / "documents.db"

    # ──────────────────────────────────────
    #  1. Create the manager
    # ──────────────────────────────────────
    store = create_store(StoreConfig(type="sqlite", path=str(db_path)))
    pm = PersistenceManager(store, settings=PersistenceSettings(debounce_seconds=0.5))
    pm.set_error_handler(report)
    editor = FakeEditor(pm)

    # ──────────────────────────────────────
    #  2. A burst of edits -> one write
    # ──────────────────────────────────────
    print("=== Burst of edits ===\n")

    doc_id = pm.create_new_session("Whiteboard")
    for node in ("rect", "circle", "arrow", "text"):
        editor.add_node(node)
        await asyncio.sleep(0.1)
    await asyncio.sleep(1.0)

    # ──────────────────────────────────────
    #  3. Reload — restoration echoes are ignored
    # ──────────────────────────────────────
    print("\n=== Reload ===\n")

    pm.reset_session()
    record = await pm.load_session(doc_id)
    editor.restore(record.content)
    print(f"  Pending autosave after restore: {pm.save_pending}")
    await asyncio.sleep(pm.settings.settle_seconds * 2)

    # ──────────────────────────────────────
    #  4. Leave the editor — force the last edit out
    # ──────────────────────────────────────
    print("\n=== Force save ===\n")

    editor.add_node("sticky")
    await pm.force_save()

    for meta in await store.list_documents():
        print(f"  {meta.id}  {meta.name}  updated {meta.updated_at:%H:%M:%S}")

    await store.close()


if __name__ == "__main__":
    asyncio.run(main())
