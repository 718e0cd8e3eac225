"""Database connection, DDL, and index management for wiktapi."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from wiktapi.exceptions import DatabaseError
from wiktapi.models import Category

SCHEMA_VERSION = "1.0"

_CATEGORY_VALUES = ", ".join(f"'{c.value}'" for c in Category)

# ---------------------------------------------------------------------------
# DDL statements
# ---------------------------------------------------------------------------

_TABLE_DDL = f"""
CREATE TABLE IF NOT EXISTS meta (
    key TEXT NOT NULL,
    value TEXT,
    UNIQUE (key)
);

-- One row per (edition, word, part of speech). JSON columns hold the
-- wire shape of the corresponding model.
CREATE TABLE IF NOT EXISTS words (
    id TEXT PRIMARY KEY,
    word TEXT NOT NULL,
    edition TEXT NOT NULL,
    phonetic TEXT,
    phonetics TEXT NOT NULL DEFAULT '[]',
    meaning TEXT NOT NULL,
    category TEXT NOT NULL DEFAULT 'general'
        CHECK( category IN ({_CATEGORY_VALUES}) ),
    translations TEXT NOT NULL DEFAULT '[]',
    tenses TEXT,
    created_at TEXT NOT NULL
);
"""

_INDEX_DDL = """
CREATE INDEX IF NOT EXISTS idx_words_word ON words (word);
CREATE INDEX IF NOT EXISTS idx_words_category ON words (category);
CREATE INDEX IF NOT EXISTS idx_words_word_category ON words (word, category);
CREATE INDEX IF NOT EXISTS idx_words_edition_word ON words (edition, word);
CREATE INDEX IF NOT EXISTS idx_words_word_lower ON words (unicode_lower(word));
"""

INSERT_SQL = (
    "INSERT INTO words "
    "(id, word, edition, phonetic, phonetics, meaning, category, "
    "translations, tenses, created_at) "
    "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)"
)

# Import-time settings: WAL, no fsync, 64 MB cache, 256 MB mmap.
_BULK_PRAGMAS = (
    "PRAGMA journal_mode = WAL",
    "PRAGMA synchronous = OFF",
    "PRAGMA cache_size = -65536",
    "PRAGMA temp_store = MEMORY",
    "PRAGMA mmap_size = 268435456",
)


def _unicode_lower(value: str | None) -> str | None:
    return value.lower() if value is not None else None


def connect(
    db_path: str | Path = ":memory:",
    *,
    bulk: bool = False,
    readonly: bool = False,
) -> sqlite3.Connection:
    """Open a database connection.

    ``bulk`` applies the import PRAGMAs. ``readonly`` opens an existing
    file without write access and fails if the file is missing.
    """
    db_path_str = str(db_path)
    try:
        if readonly and db_path_str != ":memory:":
            uri = Path(db_path_str).resolve().as_uri() + "?mode=ro"
            conn = sqlite3.connect(uri, uri=True)
        else:
            conn = sqlite3.connect(db_path_str)
    except sqlite3.Error as e:
        raise DatabaseError(f"Failed to open database {db_path_str}: {e}") from e

    conn.row_factory = sqlite3.Row
    conn.create_function("unicode_lower", 1, _unicode_lower, deterministic=True)
    if bulk:
        try:
            for pragma in _BULK_PRAGMAS:
                conn.execute(pragma)
        except sqlite3.Error as e:
            conn.close()
            raise DatabaseError(f"Failed to configure database {db_path_str}: {e}") from e
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    """Create tables if they don't exist. Set schema version."""
    try:
        conn.executescript(_TABLE_DDL)
        conn.execute(
            "INSERT OR IGNORE INTO meta (key, value) VALUES ('schema_version', ?)",
            (SCHEMA_VERSION,),
        )
        conn.execute(
            "INSERT OR IGNORE INTO meta (key, value) "
            "VALUES ('created_at', strftime('%Y-%m-%dT%H:%M:%f', 'now'))",
        )
        conn.commit()
    except sqlite3.Error as e:
        raise DatabaseError(f"Failed to initialize database: {e}") from e


def drop_tables(conn: sqlite3.Connection) -> None:
    """Drop the words table and its indexes (fresh reload)."""
    conn.execute("DROP TABLE IF EXISTS words")
    conn.commit()


def build_indexes(conn: sqlite3.Connection) -> None:
    """Create all lookup indexes. Safe to call repeatedly."""
    conn.executescript(_INDEX_DDL)
    conn.commit()


def check_schema_version(conn: sqlite3.Connection) -> None:
    """Verify the database schema version is compatible."""
    try:
        row = conn.execute(
            "SELECT value FROM meta WHERE key = 'schema_version'"
        ).fetchone()
    except sqlite3.OperationalError:
        # meta table doesn't exist - uninitialized DB
        return
    if row is None:
        return
    version = row[0]
    if version != SCHEMA_VERSION:
        raise DatabaseError(
            f"Incompatible schema version: {version} "
            f"(expected {SCHEMA_VERSION})"
        )


def has_words_table(conn: sqlite3.Connection) -> bool:
    row = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'words'"
    ).fetchone()
    return row is not None


def count_rows(conn: sqlite3.Connection) -> int:
    """Number of stored rows."""
    return conn.execute("SELECT COUNT(*) FROM words").fetchone()[0]


def index_names(conn: sqlite3.Connection) -> list[str]:
    """Names of the explicit indexes on the words table."""
    rows = conn.execute(
        "SELECT name FROM sqlite_master "
        "WHERE type = 'index' AND tbl_name = 'words' AND sql IS NOT NULL "
        "ORDER BY name"
    ).fetchall()
    return [r[0] for r in rows]
