"""Read operations over the ``words`` table."""

from __future__ import annotations

import sqlite3
from typing import Any

from wiktapi.exceptions import WordNotFoundError
from wiktapi.merge import merge_rows
from wiktapi.models import SearchResult, WordPage, WordRecord, WordSummary

SEARCH_LIMIT = 50
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 50
MAX_LIMIT = 200

_ROW_COLUMNS = (
    "id, word, edition, phonetic, phonetics, meaning, category, "
    "translations, tenses, created_at"
)


# ---------------------------------------------------------------------------
# Exact lookup
# ---------------------------------------------------------------------------

def _select_rows(
    conn: sqlite3.Connection,
    match: str,
    word: str,
    category: str | None,
    edition: str | None,
) -> list[sqlite3.Row]:
    clauses = [match]
    params: list[Any] = [word]
    if category:
        clauses.append("category = ?")
        params.append(category)
    if edition:
        clauses.append("edition = ?")
        params.append(edition)
    sql = (
        f"SELECT {_ROW_COLUMNS} FROM words WHERE {' AND '.join(clauses)} "
        "ORDER BY edition, word, rowid"
    )
    return conn.execute(sql, params).fetchall()


def fetch_rows(
    conn: sqlite3.Connection,
    word: str,
    *,
    category: str | None = None,
    edition: str | None = None,
) -> list[sqlite3.Row]:
    """All rows of one word in one edition.

    An exact match wins; otherwise the word is matched case-insensitively,
    lowering both sides with the Unicode-aware ``unicode_lower``.
    Without an ``edition`` the first edition holding the word is used, so
    rows from different datasets are never merged together.
    """
    rows = _select_rows(conn, "word = ?", word, category, edition)
    if not rows:
        rows = _select_rows(
            conn, "unicode_lower(word) = ?", word.lower(), category, edition,
        )
    if not rows:
        return []
    first = rows[0]
    return [
        r for r in rows
        if r["edition"] == first["edition"] and r["word"] == first["word"]
    ]


def fetch_word(
    conn: sqlite3.Connection,
    word: str,
    *,
    category: str | None = None,
    edition: str | None = None,
) -> WordRecord:
    """Look up and merge a word; raises :class:`WordNotFoundError`."""
    rows = fetch_rows(conn, word, category=category, edition=edition)
    if not rows:
        raise WordNotFoundError(f'No entry found for "{word}"')
    return merge_rows(rows)


# ---------------------------------------------------------------------------
# Prefix search
# ---------------------------------------------------------------------------

def escape_like(text: str) -> str:
    """Escape LIKE wildcards so they match literally (escape char ``\\``)."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def search_words(
    conn: sqlite3.Connection,
    prefix: str,
    *,
    category: str | None = None,
) -> list[SearchResult]:
    """Case-insensitive prefix search, one hit per (word, category).

    ``MAX(phonetic)`` picks a non-null phonetic when part-of-speech rows
    differ, since MAX ignores NULLs.
    """
    params: list[Any] = [escape_like(prefix.lower()) + "%"]
    category_clause = ""
    if category:
        category_clause = "AND category = ? "
        params.append(category)
    params.append(SEARCH_LIMIT)

    rows = conn.execute(
        "SELECT word, category, MAX(phonetic) AS phonetic FROM words "
        "WHERE unicode_lower(word) LIKE ? ESCAPE '\\' "
        f"{category_clause}"
        "GROUP BY word, category "
        "ORDER BY word, category "
        "LIMIT ?",
        params,
    ).fetchall()
    return [
        SearchResult(word=r["word"], category=r["category"], phonetic=r["phonetic"])
        for r in rows
    ]


# ---------------------------------------------------------------------------
# Paginated listing
# ---------------------------------------------------------------------------

def _to_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def clamp_page(value: Any) -> int:
    """Page number >= 1; unparseable values mean the first page."""
    return max(1, _to_int(value, DEFAULT_PAGE))


def clamp_limit(value: Any) -> int:
    """Page size within ``1..MAX_LIMIT``; unparseable values mean the default."""
    return min(MAX_LIMIT, max(1, _to_int(value, DEFAULT_LIMIT)))


def list_words(
    conn: sqlite3.Connection,
    *,
    page: Any = DEFAULT_PAGE,
    limit: Any = DEFAULT_LIMIT,
    category: str | None = None,
    edition: str | None = None,
) -> WordPage:
    """One summary per (word, edition, category), ordered by word."""
    page = clamp_page(page)
    limit = clamp_limit(limit)

    clauses: list[str] = []
    params: list[Any] = []
    if category:
        clauses.append("category = ?")
        params.append(category)
    if edition:
        clauses.append("edition = ?")
        params.append(edition)
    where = f"WHERE {' AND '.join(clauses)} " if clauses else ""

    rows = conn.execute(
        "SELECT word, edition, category, MAX(phonetic) AS phonetic FROM words "
        f"{where}"
        "GROUP BY word, edition, category "
        "ORDER BY word, edition, category "
        "LIMIT ? OFFSET ?",
        [*params, limit, (page - 1) * limit],
    ).fetchall()

    total = conn.execute(
        "SELECT COUNT(*) FROM ("
        f"SELECT 1 FROM words {where}GROUP BY word, edition, category"
        ")",
        params,
    ).fetchone()[0]

    items = tuple(
        WordSummary(
            word=r["word"], edition=r["edition"],
            category=r["category"], phonetic=r["phonetic"],
        )
        for r in rows
    )
    return WordPage(page=page, limit=limit, total=total, items=items)


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------

def list_categories(conn: sqlite3.Connection) -> list[str]:
    rows = conn.execute("SELECT DISTINCT category FROM words ORDER BY category").fetchall()
    return [r[0] for r in rows]


def list_editions(conn: sqlite3.Connection) -> list[str]:
    rows = conn.execute("SELECT DISTINCT edition FROM words ORDER BY edition").fetchall()
    return [r[0] for r in rows]
