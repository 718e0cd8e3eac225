"""Shared test fixtures for wiktapi."""

import json

import pytest

from wiktapi import Dictionary, Settings, db, run_import


def entry(word, pos="noun", lang_code="en", **fields):
    """Serialize a minimal wiktextract record."""
    data = {"word": word, "pos": pos, "lang_code": lang_code}
    data.setdefault("senses", [{"glosses": [f"Definition of {word}."]}])
    data.update(fields)
    return json.dumps(data, ensure_ascii=False)


EN_LINES = [
    entry(
        "chat",
        sounds=[{"ipa": "/tʃæt/", "tags": ["US"], "mp3_url": "https://audio/chat.mp3"}],
        senses=[{
            "glosses": ["An informal conversation."],
            "examples": [{"text": "We had a chat."}],
            "synonyms": [{"word": "talk"}],
        }],
        translations=[{"lang_code": "fr", "lang": "French", "word": "causerie"}],
    ),
    entry(
        "run",
        senses=[{"glosses": ["An act of running."]}],
        translations=[{"code": "de", "lang": "German", "word": "Lauf"}],
    ),
    entry(
        "run",
        pos="verb",
        sounds=[{"ipa": "/ɹʌn/", "tags": ["UK"], "ogg_url": "https://audio/run.ogg"}],
        senses=[{"glosses": ["To move swiftly."], "examples": [{"text": "Run!"}]}],
        antonyms=[{"word": "walk"}],
        forms=[
            {"form": "runs", "tags": ["present", "singular", "third-person"]},
            {"form": "ran", "tags": ["past"]},
        ],
        translations=[{"lang_code": "fr", "lang": "French", "word": "courir"}],
    ),
    entry("computer"),
    entry("100%"),
    entry("1000"),
    entry("a_b"),
    entry("axb"),
    "",
    "{not json",
    json.dumps({"word": "orphan", "pos": "noun"}),
    json.dumps(["not", "an", "object"]),
]

FR_LINES = [
    entry(
        "chat",
        lang_code="fr",
        sounds=[{"ipa": "/ʃa/"}],
        senses=[{"glosses": ["Mammifère carnivore."]}],
    ),
    entry("école", lang_code="fr"),
]


def topic_classifier(record):
    """Files ``computer`` under technology, everything else under general."""
    return "technology" if record.get("word") == "computer" else "general"


@pytest.fixture
def conn():
    """In-memory database with an empty words table."""
    connection = db.connect(":memory:")
    db.init_db(connection)
    yield connection
    connection.close()


@pytest.fixture
def data_dir(tmp_path):
    """Directory holding en.jsonl and fr.jsonl."""
    directory = tmp_path / "jsonl"
    directory.mkdir()
    (directory / "en.jsonl").write_text("\n".join(EN_LINES) + "\n", encoding="utf-8")
    (directory / "fr.jsonl").write_text("\n".join(FR_LINES) + "\n", encoding="utf-8")
    return directory


@pytest.fixture
def settings(tmp_path, data_dir):
    return Settings(db_path=tmp_path / "wiktionary.db", data_dir=data_dir)


@pytest.fixture
def sample_db(settings):
    """Path of a database built from the sample files by the real importer."""
    run_import(settings, classifier=topic_classifier)
    return settings.db_path


@pytest.fixture
def dictionary(sample_db):
    with Dictionary(sample_db) as d:
        yield d
