# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Command-line inspector for a SQLite document store.

Usage:
    python -m persistence_manager.cli --db documents.db list
    python -m persistence_manager.cli --db documents.db show <id>
    python -m persistence_manager.cli --db documents.db delete <id>

Every command writes one JSON document to stdout.

Exit codes:
    0: Success
    1: Failure or document not found (error details in JSON output)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from typing import Any

from persistence_manager.stores import DocumentStore, SQLiteDocumentStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m persistence_manager.cli",
        description="Inspect documents persisted by persistence_manager.",
    )
    parser.add_argument("--db", default="documents.db", help="SQLite database file")
    parser.add_argument("-v", "--verbose", action="store_true", help="log store activity")
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("list", help="list documents, most recently updated first")
    show = commands.add_parser("show", help="print one document with its content")
    show.add_argument("document_id")
    delete = commands.add_parser("delete", help="delete one document")
    delete.add_argument("document_id")
    return parser


async def run(store: DocumentStore, args: argparse.Namespace) -> dict[str, Any]:
    """Execute one command against *store* and return the JSON payload."""
    if args.command == "list":
        documents = await store.list_documents()
        return {"success": True, "documents": [m.model_dump(mode="json") for m in documents]}

    if args.command == "show":
        record = await store.load(args.document_id)
        if record is None:
            return {"success": False, "error": f"Document not found: {args.document_id}"}
        return {"success": True, "document": record.model_dump(mode="json")}

    await store.delete(args.document_id)
    return {"success": True, "deleted": args.document_id}


async def _run_and_close(store: DocumentStore, args: argparse.Namespace) -> dict[str, Any]:
    try:
        return await run(store, args)
    finally:
        await store.close()


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        stream=sys.stderr,
    )

    try:
        output = asyncio.run(_run_and_close(SQLiteDocumentStore(args.db), args))
    except Exception as e:
        # Ensure we always output valid JSON, even on unexpected errors
        output = {"success": False, "error": str(e), "error_type": type(e).__name__}

    print(json.dumps(output))
    return 0 if output["success"] else 1


if __name__ == "__main__":
    sys.exit(main())
