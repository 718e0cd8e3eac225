"""Convert raw wiktextract JSONL records into storage rows."""

from __future__ import annotations

import json
import uuid
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from wiktapi.models import (
    Category,
    Definition,
    Meaning,
    PhoneticItem,
    PhoneticType,
    StorageRow,
    Tenses,
    TranslationItem,
)

Classifier = Callable[[Mapping[str, Any]], Category | str]

UNKNOWN_POS = "unknown"

# Inflection rules per tenses field, tried in order. A single-tag rule
# matches a form tagged with exactly that tag; a multi-tag rule matches
# any form carrying all of its tags.
_TENSE_RULES: dict[str, tuple[frozenset[str], ...]] = {
    "past": (frozenset({"past"}),),
    "present": (frozenset({"present", "participle"}), frozenset({"present"})),
    "singular": (
        frozenset({"third-person", "singular", "present"}),
        frozenset({"singular"}),
    ),
    "plural": (frozenset({"plural"}),),
}


def default_classifier(entry: Mapping[str, Any]) -> Category:
    """Placeholder until a topical classifier exists: always ``general``."""
    return Category.GENERAL


def normalize(
    line: str | bytes | Mapping[str, Any],
    edition: str,
    *,
    classifier: Classifier | None = None,
    created_at: str | None = None,
    id_factory: Callable[[], str] | None = None,
) -> StorageRow | None:
    """Turn one JSONL record into a :class:`StorageRow`.

    Returns ``None`` when the record must be skipped: undecodable JSON,
    a payload that is not an object, or a missing ``word`` or
    ``lang_code``.
    """
    entry = _decode(line)
    if entry is None:
        return None

    word = entry.get("word")
    lang_code = entry.get("lang_code")
    if not isinstance(word, str) or not word:
        return None
    if not isinstance(lang_code, str) or not lang_code:
        return None

    pos = entry.get("pos")
    if not isinstance(pos, str) or not pos:
        pos = UNKNOWN_POS

    phonetics = extract_phonetics(entry)
    meaning = Meaning(
        part_of_speech=pos,
        definitions=extract_definitions(entry),
        synonyms=extract_related(entry, "synonyms"),
        antonyms=extract_related(entry, "antonyms"),
    )

    return StorageRow(
        id=id_factory() if id_factory else uuid.uuid4().hex,
        word=word,
        edition=edition,
        phonetic=phonetics[0].text if phonetics else None,
        phonetics=phonetics,
        meaning=meaning,
        category=_classify(classifier or default_classifier, entry),
        translations=extract_translations(entry, pos),
        tenses=extract_tenses(word, entry),
        created_at=created_at or utc_timestamp(),
    )


def utc_timestamp() -> str:
    """Current time as an ISO-8601 UTC string with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _decode(line: str | bytes | Mapping[str, Any]) -> Mapping[str, Any] | None:
    if isinstance(line, Mapping):
        return line
    try:
        data = json.loads(line)
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def _classify(classifier: Classifier, entry: Mapping[str, Any]) -> Category:
    try:
        return Category(classifier(entry))
    except ValueError:
        return Category.GENERAL


def _list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _dicts(value: Any) -> Iterable[Mapping[str, Any]]:
    return (item for item in _list(value) if isinstance(item, Mapping))


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


# ---------------------------------------------------------------------------
# Field extraction
# ---------------------------------------------------------------------------

def extract_phonetics(entry: Mapping[str, Any]) -> tuple[PhoneticItem, ...]:
    """IPA transcriptions from ``sounds``, tagged ``us`` or ``uk``."""
    items = []
    for sound in _dicts(entry.get("sounds")):
        ipa = sound.get("ipa")
        if not isinstance(ipa, str) or not ipa:
            continue
        tags = _list(sound.get("tags"))
        is_us = any(isinstance(t, str) and t.lower() == "us" for t in tags)
        items.append(PhoneticItem(
            text=ipa,
            type=PhoneticType.US if is_us else PhoneticType.UK,
            audio_url=_text(sound.get("mp3_url")) or _text(sound.get("ogg_url")),
        ))
    return tuple(items)


def extract_definitions(entry: Mapping[str, Any]) -> tuple[Definition, ...]:
    """First gloss and first example of every sense that has a gloss."""
    definitions = []
    for sense in _dicts(entry.get("senses")):
        glosses = _list(sense.get("glosses"))
        if not glosses or _text(glosses[0]) is None:
            continue
        example = None
        for ex in _dicts(sense.get("examples")):
            text = ex.get("text")
            if isinstance(text, str) and text:
                example = text
            break
        definitions.append(Definition(definition=glosses[0], example=example))
    return tuple(definitions)


def extract_related(entry: Mapping[str, Any], key: str) -> tuple[str, ...]:
    """Words listed under ``key`` at entry and sense level, deduplicated."""
    words: dict[str, None] = {}
    sources = [entry, *_dicts(entry.get("senses"))]
    for source in sources:
        for item in _dicts(source.get(key)):
            word = item.get("word")
            if isinstance(word, str) and word:
                words.setdefault(word, None)
    return tuple(words)


def extract_translations(
    entry: Mapping[str, Any], pos: str
) -> tuple[TranslationItem, ...]:
    items = []
    for tr in _dicts(entry.get("translations")):
        word = tr.get("word")
        if not isinstance(word, str) or not word:
            continue
        items.append(TranslationItem(
            part_of_speech=pos,
            lang_code=_text(tr.get("lang_code")) or _text(tr.get("code")),
            lang=_text(tr.get("lang")),
            word=word,
        ))
    return tuple(items)


def extract_tenses(word: str, entry: Mapping[str, Any]) -> Tenses | None:
    """Inflection bundle, or ``None`` when no inflected form was found."""
    forms = []
    for f in _dicts(entry.get("forms")):
        surface = f.get("form")
        if not isinstance(surface, str) or not surface.strip() or surface == "-":
            continue
        tags = frozenset(t for t in _list(f.get("tags")) if isinstance(t, str))
        forms.append((surface, tags))

    found = {field: _match_form(forms, rules) for field, rules in _TENSE_RULES.items()}
    if not any(found.values()):
        return None
    return Tenses(base=word, **found)


def _match_form(
    forms: list[tuple[str, frozenset[str]]],
    rules: tuple[frozenset[str], ...],
) -> str:
    for rule in rules:
        for surface, tags in forms:
            if len(rule) == 1 and tags == rule:
                return surface
            if len(rule) > 1 and rule <= tags:
                return surface
    return ""
