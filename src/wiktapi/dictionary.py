"""Dictionary: read-only entry point for serving lookups."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from wiktapi import db as _db
from wiktapi import queries as _q
from wiktapi.exceptions import DatabaseError, ValidationError
from wiktapi.models import WordRecord


def _require(value: str | None, name: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"Missing required query param: {name}")
    return value


class Dictionary:
    """Query API over an imported database.

    Every method returns a JSON-ready ``dict``. Errors are
    :class:`~wiktapi.exceptions.DictionaryError` subclasses carrying the
    HTTP ``status_code`` a web layer should answer with.

    A ``Dictionary`` owns one SQLite connection and must not be shared
    between threads; open one per thread instead.
    """

    def __init__(self, db_path: str | Path, *, readonly: bool = True) -> None:
        self._db_path = str(db_path)
        if self._db_path != ":memory:" and not Path(self._db_path).exists():
            raise DatabaseError(f"Database not found: {self._db_path}")
        self._conn = _db.connect(db_path, readonly=readonly)
        try:
            _db.check_schema_version(self._conn)
            if not _db.has_words_table(self._conn):
                raise DatabaseError(
                    f"No words table in {self._db_path}; import data first"
                )
        except BaseException:
            self._conn.close()
            raise

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def __enter__(self) -> Dictionary:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Word lookups
    # ------------------------------------------------------------------

    def lookup(
        self,
        word: str,
        *,
        category: str | None = None,
        edition: str | None = None,
    ) -> WordRecord:
        """Merged :class:`WordRecord` for ``word``."""
        return _q.fetch_word(
            self._conn, _require(word, "word"), category=category, edition=edition,
        )

    def word(
        self,
        word: str,
        category: str | None = None,
        edition: str | None = None,
    ) -> dict[str, Any]:
        record = self.lookup(word, category=category, edition=edition)
        data = record.to_dict()
        del data["id"], data["createdAt"]
        return data

    def definitions(self, word: str) -> dict[str, Any]:
        record = self.lookup(word)
        return {
            "word": record.word,
            "edition": record.edition,
            "meanings": [m.to_dict() for m in record.meanings],
        }

    def pronunciations(self, word: str) -> dict[str, Any]:
        record = self.lookup(word)
        return {
            "word": record.word,
            "phonetic": record.phonetic,
            "phonetics": [p.to_dict() for p in record.phonetics],
        }

    def synonyms_antonyms(self, word: str) -> dict[str, Any]:
        record = self.lookup(word)
        return {
            "word": record.word,
            "edition": record.edition,
            "synonyms": record.synonyms,
            "antonyms": record.antonyms,
        }

    def tenses(self, word: str) -> dict[str, Any]:
        record = self.lookup(word)
        return {
            "word": record.word,
            "tenses": record.tenses.to_dict() if record.tenses else None,
        }

    def translations(self, word: str) -> dict[str, Any]:
        record = self.lookup(word)
        return {
            "word": record.word,
            "edition": record.edition,
            "translations": [t.to_dict() for t in record.translations],
        }

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    def search(self, q: str | None, category: str | None = None) -> dict[str, Any]:
        """Prefix search; blank ``q`` is a :class:`ValidationError`."""
        results = _q.search_words(
            self._conn, _require(q, "q").strip(), category=category,
        )
        return {"results": [r.to_dict() for r in results]}

    def words(
        self,
        page: Any = None,
        limit: Any = None,
        category: str | None = None,
        edition: str | None = None,
    ) -> dict[str, Any]:
        """Paginated listing; ``page`` and ``limit`` are clamped, never rejected."""
        result = _q.list_words(
            self._conn, page=page, limit=limit, category=category, edition=edition,
        )
        return result.to_dict()

    def categories(self) -> dict[str, Any]:
        return {"categories": _q.list_categories(self._conn)}

    def languages(self) -> dict[str, Any]:
        return {"languages": _q.list_editions(self._conn)}
