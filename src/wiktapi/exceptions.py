"""Custom exception hierarchy for wiktapi.

Every exception carries a ``status_code`` so an HTTP layer can map it to
a response without inspecting the message.
"""


class DictionaryError(Exception):
    """Base exception for all wiktapi errors."""

    status_code = 500


class ValidationError(DictionaryError):
    """Missing or invalid request parameter (e.g. blank search text)."""

    status_code = 400


class WordNotFoundError(DictionaryError):
    """No stored rows for the requested word."""

    status_code = 404


class MalformedDataError(DictionaryError):
    """Stored JSON failed to decode; the database is corrupt."""


class DataImportError(DictionaryError):
    """Source data could not be read during an import run."""


class DatabaseError(DictionaryError):
    """Schema version mismatch, unopenable or unwritable database."""


class ConfigError(DictionaryError):
    """Invalid configuration file."""

    def __init__(self, message: str, line: int | None = None) -> None:
        self.line = line
        super().__init__(message)
