"""Reassemble the stored rows of one word into a :class:`WordRecord`."""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from wiktapi.exceptions import MalformedDataError
from wiktapi.models import (
    Category,
    Meaning,
    PhoneticItem,
    StorageRow,
    Tenses,
    TranslationItem,
    WordRecord,
)

_T = TypeVar("_T")


def _decode(row: sqlite3.Row, column: str, build: Callable[[Any], _T]) -> _T:
    try:
        return build(json.loads(row[column]))
    except (json.JSONDecodeError, TypeError, KeyError, ValueError) as e:
        raise MalformedDataError(f"Malformed JSON in column {column!r}") from e


def row_to_storage_row(row: sqlite3.Row) -> StorageRow:
    """Decode a ``words`` row; corrupt JSON raises :class:`MalformedDataError`."""
    try:
        category = Category(row["category"])
    except ValueError as e:
        raise MalformedDataError(f"Unknown category {row['category']!r}") from e

    tenses = None
    if row["tenses"] is not None:
        tenses = _decode(row, "tenses", Tenses.from_dict)

    return StorageRow(
        id=row["id"],
        word=row["word"],
        edition=row["edition"],
        phonetic=row["phonetic"],
        phonetics=_decode(
            row, "phonetics", lambda v: tuple(PhoneticItem.from_dict(p) for p in v)
        ),
        meaning=_decode(row, "meaning", Meaning.from_dict),
        category=category,
        translations=_decode(
            row, "translations", lambda v: tuple(TranslationItem.from_dict(t) for t in v)
        ),
        tenses=tenses,
        created_at=row["created_at"],
    )


def merge_rows(rows: Sequence[sqlite3.Row | StorageRow]) -> WordRecord:
    """Merge all rows of one word, in the given order.

    Shared fields (category, tenses, timestamps, edition) are identical
    across rows, so the first row supplies them. Phonetics come from the
    first row that has any. Meanings and translations are concatenated.
    """
    if not rows:
        raise ValueError("merge_rows() requires at least one row")

    decoded = [r if isinstance(r, StorageRow) else row_to_storage_row(r) for r in rows]
    first = decoded[0]
    phonetic_row = next((r for r in decoded if r.phonetic is not None), first)

    return WordRecord(
        id=first.id,
        word=first.word,
        edition=first.edition,
        phonetic=phonetic_row.phonetic,
        phonetics=phonetic_row.phonetics,
        meanings=tuple(r.meaning for r in decoded),
        category=first.category,
        translations=tuple(t for r in decoded for t in r.translations),
        tenses=first.tenses,
        created_at=first.created_at,
    )
