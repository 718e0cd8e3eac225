"""Domain model dataclasses and enums for wiktapi."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Category(str, Enum):
    """Closed set of topical categories, orthogonal to part of speech."""

    TECHNOLOGY = "technology"
    BUSINESS = "business"
    TRAVEL = "travel"
    MUSIC = "music"
    MOVIES = "movies"
    SPORTS = "sports"
    FOOD = "food"
    ART = "art"
    SCIENCE = "science"
    HEALTH = "health"
    FASHION = "fashion"
    GAMING = "gaming"
    BOOKS = "books"
    NATURE = "nature"
    PHOTOGRAPHY = "photography"
    EDUCATION = "education"
    HISTORY = "history"
    POLITICS = "politics"
    AUTOMOTIVE = "automotive"
    PETS = "pets"
    GENERAL = "general"


class PhoneticType(str, Enum):
    """Regional flavour of a pronunciation."""

    UK = "uk"
    US = "us"


# ---------------------------------------------------------------------------
# Word data
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class PhoneticItem:
    """One IPA transcription with its region and optional audio file."""

    text: str
    type: PhoneticType
    audio_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "type": self.type.value, "audioUrl": self.audio_url}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PhoneticItem:
        return cls(
            text=data["text"],
            type=PhoneticType(data["type"]),
            audio_url=data.get("audioUrl"),
        )


@dataclass(frozen=True, slots=True)
class Definition:
    """A gloss with an optional usage example."""

    definition: str
    example: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"definition": self.definition}
        if self.example is not None:
            data["example"] = self.example
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Definition:
        return cls(definition=data["definition"], example=data.get("example"))


@dataclass(frozen=True, slots=True)
class Meaning:
    """All definitions of a word for one part of speech."""

    part_of_speech: str
    definitions: tuple[Definition, ...]
    synonyms: tuple[str, ...] = ()
    antonyms: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "partOfSpeech": self.part_of_speech,
            "definitions": [d.to_dict() for d in self.definitions],
            "synonyms": list(self.synonyms),
            "antonyms": list(self.antonyms),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Meaning:
        return cls(
            part_of_speech=data["partOfSpeech"],
            definitions=tuple(Definition.from_dict(d) for d in data["definitions"]),
            synonyms=tuple(data.get("synonyms", ())),
            antonyms=tuple(data.get("antonyms", ())),
        )


@dataclass(frozen=True, slots=True)
class TranslationItem:
    """A translation of the word into another language."""

    part_of_speech: str
    lang_code: str | None
    lang: str | None
    word: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "partOfSpeech": self.part_of_speech,
            "lang_code": self.lang_code,
            "lang": self.lang,
            "word": self.word,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TranslationItem:
        return cls(
            part_of_speech=data["partOfSpeech"],
            lang_code=data.get("lang_code"),
            lang=data.get("lang"),
            word=data["word"],
        )


@dataclass(frozen=True, slots=True)
class Tenses:
    """Inflection summary of a word. ``future`` is always empty."""

    base: str
    past: str = ""
    present: str = ""
    future: str = ""
    singular: str = ""
    plural: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "base": self.base,
            "past": self.past,
            "present": self.present,
            "future": self.future,
            "singular": self.singular,
            "plural": self.plural,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Tenses:
        return cls(
            base=data["base"],
            past=data.get("past", ""),
            present=data.get("present", ""),
            future=data.get("future", ""),
            singular=data.get("singular", ""),
            plural=data.get("plural", ""),
        )


# ---------------------------------------------------------------------------
# Stored and derived records
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class StorageRow:
    """One persisted row: a single (edition, word, part of speech)."""

    id: str
    word: str
    edition: str
    phonetic: str | None
    phonetics: tuple[PhoneticItem, ...]
    meaning: Meaning
    category: Category
    translations: tuple[TranslationItem, ...]
    tenses: Tenses | None
    created_at: str


@dataclass(frozen=True, slots=True)
class WordRecord:
    """All stored rows of one word merged into a single entry."""

    id: str
    word: str
    edition: str
    phonetic: str | None
    phonetics: tuple[PhoneticItem, ...]
    meanings: tuple[Meaning, ...]
    category: Category
    translations: tuple[TranslationItem, ...]
    tenses: Tenses | None
    created_at: str

    @property
    def synonyms(self) -> list[str]:
        return _unique(s for m in self.meanings for s in m.synonyms)

    @property
    def antonyms(self) -> list[str]:
        return _unique(a for m in self.meanings for a in m.antonyms)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "word": self.word,
            "edition": self.edition,
            "phonetic": self.phonetic,
            "phonetics": [p.to_dict() for p in self.phonetics],
            "meanings": [m.to_dict() for m in self.meanings],
            "category": self.category.value,
            "translations": [t.to_dict() for t in self.translations],
            "tenses": self.tenses.to_dict() if self.tenses else None,
            "createdAt": self.created_at,
        }


@dataclass(frozen=True, slots=True)
class SearchResult:
    """A prefix-search hit."""

    word: str
    category: str
    phonetic: str | None

    def to_dict(self) -> dict[str, Any]:
        return {"word": self.word, "category": self.category, "phonetic": self.phonetic}


@dataclass(frozen=True, slots=True)
class WordSummary:
    """One item of the paginated word listing."""

    word: str
    edition: str
    category: str
    phonetic: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "word": self.word,
            "edition": self.edition,
            "category": self.category,
            "phonetic": self.phonetic,
        }


@dataclass(frozen=True, slots=True)
class WordPage:
    """A page of the word listing; ``total`` counts every matching item."""

    page: int
    limit: int
    total: int
    items: tuple[WordSummary, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "words": [w.to_dict() for w in self.items],
        }


@dataclass(frozen=True, slots=True)
class ImportStats:
    """Counters reported by an import run."""

    inserted: int = 0
    skipped: int = 0

    def __add__(self, other: ImportStats) -> ImportStats:
        return ImportStats(
            inserted=self.inserted + other.inserted,
            skipped=self.skipped + other.skipped,
        )


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))
