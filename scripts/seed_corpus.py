#!/usr/bin/env python3
"""
Corpus seeding utility.
Embeds a JSON corpus ({id, text, category} records) with the configured
embedding provider and stores it in the SQLite knowledge table.
"""

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from navi.core import config
from navi.vector.corpus import read_corpus_file, embed_records
from navi.vector.sqlite_store import SqliteVectorStore


async def seed(corpus_path: str, db_path: str, replace: bool) -> int:
    records = read_corpus_file(corpus_path)
    print(f"Found {len(records)} records in {corpus_path}")

    store = SqliteVectorStore(db_path)
    if replace:
        store.clear()
        print("✓ Cleared existing knowledge entries")

    embedder = config.get_embedding_provider()
    report = await embed_records(records, embedder)

    for record_id, error in report.failures:
        print(f"ERROR: Failed to embed record {record_id}: {error}")

    store.batch_add(report.entries)
    for entry in report.entries:
        print(f"✓ Added: {entry.entry_id} [{entry.category}]")

    print(f"✓ Seeded {len(report.entries)} entries ({len(report.failures)} failed); store now holds {store.count()}")
    return 1 if report.failures else 0


def main():
    parser = argparse.ArgumentParser(description="Seed the knowledge store from a JSON corpus")
    parser.add_argument("corpus", help="Path to the JSON corpus file")
    parser.add_argument("--db", default=config.DB_PATH, help="SQLite database path (default: DB_PATH)")
    parser.add_argument("--replace", action="store_true", help="Delete existing entries before seeding")
    args = parser.parse_args()

    sys.exit(asyncio.run(seed(args.corpus, args.db, args.replace)))


if __name__ == "__main__":
    main()
