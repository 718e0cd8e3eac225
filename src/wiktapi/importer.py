"""Import pipeline for wiktapi.

Streams wiktextract JSONL files into the ``words`` table in transactional
batches, then consolidates rows so that every word satisfies the merge
invariant (identical shared fields, one row per part of speech), and
finally builds the lookup indexes.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Iterable
from itertools import groupby
from pathlib import Path
from typing import TYPE_CHECKING, Any

from wiktapi import db as _db
from wiktapi.exceptions import DatabaseError, DataImportError, MalformedDataError
from wiktapi.models import ImportStats, StorageRow
from wiktapi.normalizer import Classifier, normalize

if TYPE_CHECKING:
    from wiktapi.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50_000
DEFAULT_GROUP_BATCH_SIZE = 5_000


def encode_row(row: StorageRow) -> tuple[Any, ...]:
    """SQL parameters for :data:`wiktapi.db.INSERT_SQL`."""
    return (
        row.id,
        row.word,
        row.edition,
        row.phonetic,
        _dumps([p.to_dict() for p in row.phonetics]),
        _dumps(row.meaning.to_dict()),
        row.category.value,
        _dumps([t.to_dict() for t in row.translations]),
        _dumps(row.tenses.to_dict()) if row.tenses else None,
        row.created_at,
    )


def _dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Streaming import
# ---------------------------------------------------------------------------

def import_lines(
    conn: sqlite3.Connection,
    lines: Iterable[str | bytes],
    edition: str,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    classifier: Classifier | None = None,
) -> ImportStats:
    """Normalize and insert ``lines``; each batch commits atomically."""
    inserted = 0
    skipped = 0
    batch: list[tuple[Any, ...]] = []

    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        row = normalize(line, edition, classifier=classifier)
        if row is None:
            skipped += 1
            logger.debug(f"[{edition}] Skipped line {lineno}")
            continue
        batch.append(encode_row(row))
        if len(batch) >= batch_size:
            _write_batch(conn, batch)
            inserted += len(batch)
            batch.clear()
            logger.debug(f"[{edition}] {inserted:,} rows inserted")

    if batch:
        _write_batch(conn, batch)
        inserted += len(batch)

    return ImportStats(inserted=inserted, skipped=skipped)


def _write_batch(conn: sqlite3.Connection, batch: list[tuple[Any, ...]]) -> None:
    with conn:
        conn.executemany(_db.INSERT_SQL, batch)


def import_file(
    conn: sqlite3.Connection,
    path: str | Path,
    edition: str,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    classifier: Classifier | None = None,
) -> ImportStats:
    """Import one JSONL file. Batches committed before a failure are kept.

    Lines are read as bytes so an undecodable line is skipped like any
    other bad record.
    """
    path = Path(path)
    logger.info(f"[{edition}] Importing {path}")
    try:
        with open(path, "rb") as f:
            stats = import_lines(
                conn, f, edition, batch_size=batch_size, classifier=classifier,
            )
    except OSError as e:
        raise DataImportError(f"Failed to import {path}: {e}") from e
    except sqlite3.Error as e:
        raise DatabaseError(f"Failed to write rows from {path}: {e}") from e

    logger.info(
        f"[{edition}] Done: {stats.inserted:,} rows inserted, "
        f"{stats.skipped:,} skipped"
    )
    return stats


def discover_sources(
    data_dir: str | Path, edition: str | None = None
) -> list[tuple[Path, str]]:
    """``(path, edition)`` pairs for the JSONL files to import."""
    data_dir = Path(data_dir)
    if edition:
        return [(data_dir / f"{edition}.jsonl", edition)]
    try:
        paths = sorted(p for p in data_dir.iterdir() if p.suffix == ".jsonl")
    except OSError as e:
        raise DataImportError(f"Failed to read JSONL directory {data_dir}: {e}") from e
    return [(p, p.stem) for p in paths if p.is_file()]


# ---------------------------------------------------------------------------
# Consolidation
# ---------------------------------------------------------------------------

_GROUP_SQL = (
    "SELECT w.rowid AS rowid, w.word, w.edition, w.phonetic, w.phonetics, "
    "w.meaning, w.category, w.translations, w.tenses, w.created_at "
    "FROM temp.shared_groups g "
    "JOIN words w ON w.edition = g.edition AND w.word = g.word "
    "WHERE g.rowid > ? AND g.rowid <= ? "
    "ORDER BY g.rowid, w.rowid"
)

_UPDATE_SQL = (
    "UPDATE words SET phonetic = ?, phonetics = ?, meaning = ?, category = ?, "
    "translations = ?, tenses = ?, created_at = ? WHERE rowid = ?"
)


def consolidate(
    conn: sqlite3.Connection,
    *,
    group_batch_size: int = DEFAULT_GROUP_BATCH_SIZE,
) -> tuple[int, int]:
    """Enforce the merge invariant on every word stored in several rows.

    For each (edition, word), the shared fields are made identical: the
    first row's category, the earliest ``created_at``, the first non-null
    ``tenses``, and the phonetics of the first row that has a phonetic.
    Rows repeating a part of speech are folded into the earliest one.

    Returns ``(updated, deleted)`` row counts.
    """
    with conn:
        conn.execute("DROP TABLE IF EXISTS temp.shared_groups")
        conn.execute(
            "CREATE TEMP TABLE shared_groups AS "
            "SELECT edition, word FROM words "
            "GROUP BY edition, word HAVING COUNT(*) > 1"
        )
    total_groups = conn.execute("SELECT COUNT(*) FROM temp.shared_groups").fetchone()[0]

    updated = 0
    deleted = 0
    for low in range(0, total_groups, group_batch_size):
        rows = conn.execute(_GROUP_SQL, (low, low + group_batch_size)).fetchall()
        updates: list[tuple[Any, ...]] = []
        deletions: list[tuple[int]] = []
        for _, group in groupby(rows, key=lambda r: (r["edition"], r["word"])):
            group_updates, group_deletions = _consolidate_group(list(group))
            updates.extend(group_updates)
            deletions.extend((rowid,) for rowid in group_deletions)
        with conn:
            conn.executemany(_UPDATE_SQL, updates)
            conn.executemany("DELETE FROM words WHERE rowid = ?", deletions)
        updated += len(updates)
        deleted += len(deletions)

    with conn:
        conn.execute("DROP TABLE temp.shared_groups")
    logger.info(
        f"Consolidated {total_groups:,} multi-row words: "
        f"{updated:,} rows updated, {deleted:,} duplicate rows removed"
    )
    return updated, deleted


def _consolidate_group(
    rows: list[sqlite3.Row],
) -> tuple[list[tuple[Any, ...]], list[int]]:
    first = rows[0]
    category = first["category"]
    created_at = min(r["created_at"] for r in rows)
    tenses = next((r["tenses"] for r in rows if r["tenses"] is not None), None)
    phonetic_row = next((r for r in rows if r["phonetic"] is not None), first)

    by_pos: dict[str, list[sqlite3.Row]] = {}
    for r in rows:
        pos = _load(r, "meaning")["partOfSpeech"]
        by_pos.setdefault(pos, []).append(r)

    updates = []
    deletions = []
    for same_pos in by_pos.values():
        keeper = same_pos[0]
        meaning = keeper["meaning"]
        translations = keeper["translations"]
        if len(same_pos) > 1:
            meaning = _dumps(_fold_meanings([_load(r, "meaning") for r in same_pos]))
            translations = _dumps(
                _unique_items(t for r in same_pos for t in _load(r, "translations"))
            )
            deletions.extend(r["rowid"] for r in same_pos[1:])

        new = (
            phonetic_row["phonetic"],
            phonetic_row["phonetics"],
            meaning,
            category,
            translations,
            tenses,
            created_at,
        )
        old = tuple(
            keeper[c] for c in (
                "phonetic", "phonetics", "meaning", "category",
                "translations", "tenses", "created_at",
            )
        )
        if new != old:
            updates.append((*new, keeper["rowid"]))
    return updates, deletions


def _fold_meanings(meanings: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "partOfSpeech": meanings[0]["partOfSpeech"],
        "definitions": _unique_items(d for m in meanings for d in m["definitions"]),
        "synonyms": list(dict.fromkeys(s for m in meanings for s in m.get("synonyms", []))),
        "antonyms": list(dict.fromkeys(a for m in meanings for a in m.get("antonyms", []))),
    }


def _unique_items(items: Iterable[Any]) -> list[Any]:
    seen: dict[str, Any] = {}
    for item in items:
        seen.setdefault(json.dumps(item, sort_keys=True), item)
    return list(seen.values())


def _load(row: sqlite3.Row, column: str) -> Any:
    try:
        return json.loads(row[column])
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedDataError(
            f"Malformed JSON in column {column!r} of row {row['rowid']}"
        ) from e


# ---------------------------------------------------------------------------
# Whole-run orchestration
# ---------------------------------------------------------------------------

def finalize(conn: sqlite3.Connection) -> None:
    """Build indexes, then consolidate multi-row words."""
    logger.info("Building indexes")
    _db.build_indexes(conn)
    consolidate(conn)


def run_import(
    settings: Settings,
    *,
    edition: str | None = None,
    fresh: bool = False,
    skip_indexes: bool = False,
    db_path: str | Path | None = None,
    data_dir: str | Path | None = None,
    classifier: Classifier | None = None,
) -> ImportStats:
    """Import every JSONL source (or only ``edition``) into the database.

    With ``fresh`` the table is dropped and recreated first. With
    ``skip_indexes`` both index build and consolidation are deferred to
    :func:`index_database`, so several passes can share one final step.
    """
    db_path = Path(db_path or settings.db_path)
    sources = discover_sources(data_dir or settings.data_dir, edition)
    if not sources:
        raise DataImportError(
            f"No JSONL files found in {data_dir or settings.data_dir}"
        )

    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DatabaseError(f"Cannot create database directory {db_path.parent}: {e}") from e

    conn = _db.connect(db_path, bulk=True)
    try:
        _db.check_schema_version(conn)
        if fresh:
            logger.info("Dropping existing words table")
            _db.drop_tables(conn)
        _db.init_db(conn)

        total = ImportStats()
        for path, source_edition in sources:
            total += import_file(
                conn, path, source_edition,
                batch_size=settings.batch_size, classifier=classifier,
            )
            if settings.remove_sources:
                try:
                    path.unlink()
                except OSError as e:
                    raise DataImportError(f"Failed to delete {path}: {e}") from e
                logger.info(f"[{source_edition}] Deleted {path}")

        if skip_indexes:
            logger.info("Skipping indexes; run the index step separately")
        else:
            finalize(conn)

        logger.info(
            f"Database ready at {db_path}: {_db.count_rows(conn):,} total rows"
        )
        return total
    finally:
        conn.close()


def index_database(db_path: str | Path) -> int:
    """Finalize a database imported with ``skip_indexes``; returns row count."""
    if not Path(db_path).exists():
        raise DatabaseError(f"Database not found: {db_path}")
    conn = _db.connect(db_path, bulk=True)
    try:
        _db.check_schema_version(conn)
        if not _db.has_words_table(conn):
            raise DatabaseError(f"No words table in {db_path}; import data first")
        finalize(conn)
        return _db.count_rows(conn)
    finally:
        conn.close()
