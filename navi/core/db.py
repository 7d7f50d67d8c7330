"""
SQLite storage for the FAQ moderation queue and the persisted knowledge corpus.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from . import config

REQUIRED_TABLES = ['faqs', 'knowledge_entries']


@contextmanager
def get_db(db_path: Optional[str] = None) -> Generator[sqlite3.Connection, None, None]:
    """Get a SQLite database connection."""
    conn = sqlite3.connect(db_path or config.DB_PATH)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def init_db(db_path: Optional[str] = None):
    """Initialize the database with required tables."""
    path = db_path or config.DB_PATH
    Path(path).parent.mkdir(parents=True, exist_ok=True)

    with get_db(path) as conn:
        cursor = conn.cursor()

        # Community-submitted FAQs awaiting moderation
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS faqs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                category TEXT NOT NULL,
                question TEXT NOT NULL,
                answer TEXT NOT NULL,
                submitted_by TEXT NOT NULL DEFAULT 'Student',
                status TEXT NOT NULL DEFAULT 'pending',
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')

        # Embedded corpus; id order is insertion order
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS knowledge_entries (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                entry_id TEXT,
                content TEXT NOT NULL,
                category TEXT NOT NULL DEFAULT 'General',
                embedding_json TEXT NOT NULL
            )
        ''')

        cursor.execute('CREATE INDEX IF NOT EXISTS idx_faqs_status_created ON faqs(status, created_at DESC)')
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_knowledge_category ON knowledge_entries(category, id)')

        conn.commit()


def health_check(db_path: Optional[str] = None) -> bool:
    """Check database health."""
    try:
        with get_db(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM sqlite_master WHERE type='table';")
            table_names = [row[0] for row in cursor.fetchall()]
            return all(table in table_names for table in REQUIRED_TABLES)
    except sqlite3.Error:
        return False
