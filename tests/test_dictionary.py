"""Tests for the Dictionary facade."""

import pytest

from wiktapi import Dictionary, db
from wiktapi.exceptions import DatabaseError, ValidationError, WordNotFoundError


class TestLifecycle:
    def test_context_manager(self, sample_db):
        with Dictionary(sample_db) as d:
            assert d.languages() == {"languages": ["en", "fr"]}

    def test_missing_database(self, tmp_path):
        with pytest.raises(DatabaseError, match="Database not found"):
            Dictionary(tmp_path / "missing.db")
        assert not (tmp_path / "missing.db").exists()

    def test_database_without_words(self, tmp_path):
        path = tmp_path / "blank.db"
        conn = db.connect(path)
        conn.execute("CREATE TABLE other (x)")
        conn.commit()
        conn.close()
        with pytest.raises(DatabaseError, match="No words table"):
            Dictionary(path)

    def test_incompatible_schema(self, sample_db):
        conn = db.connect(sample_db)
        conn.execute("UPDATE meta SET value = '9.9' WHERE key = 'schema_version'")
        conn.commit()
        conn.close()
        with pytest.raises(DatabaseError, match="Incompatible schema version"):
            Dictionary(sample_db)


class TestWord:
    def test_full_entry(self, dictionary):
        data = dictionary.word("chat")
        assert set(data) == {
            "word", "edition", "phonetic", "phonetics", "meanings",
            "category", "translations", "tenses",
        }
        assert data["word"] == "chat"
        assert data["edition"] == "en"
        assert data["tenses"] is None
        assert data["meanings"][0]["definitions"] == [
            {"definition": "An informal conversation.", "example": "We had a chat."},
        ]

    def test_run_merges_parts_of_speech(self, dictionary):
        data = dictionary.word("run")
        assert [m["partOfSpeech"] for m in data["meanings"]] == ["noun", "verb"]
        assert data["tenses"] == {
            "base": "run", "past": "ran", "present": "",
            "future": "", "singular": "runs", "plural": "",
        }
        assert data["phonetic"] == "/ɹʌn/"

    def test_case_insensitive(self, dictionary):
        assert dictionary.word("Chat")["word"] == "chat"

    def test_case_insensitive_accented(self, dictionary):
        data = dictionary.word("ÉCOLE")
        assert data["word"] == "école"
        assert data["edition"] == "fr"

    def test_edition_and_category(self, dictionary):
        assert dictionary.word("chat", edition="fr")["edition"] == "fr"
        assert dictionary.word("computer", category="technology")["category"] == "technology"

    def test_unknown_word(self, dictionary):
        with pytest.raises(WordNotFoundError) as excinfo:
            dictionary.word("doesnotexist")
        assert excinfo.value.status_code == 404

    @pytest.mark.parametrize("word", ["", "   ", None])
    def test_empty_word(self, dictionary, word):
        with pytest.raises(ValidationError) as excinfo:
            dictionary.word(word)
        assert excinfo.value.status_code == 400


class TestSubResources:
    def test_definitions(self, dictionary):
        data = dictionary.definitions("run")
        assert data["word"] == "run"
        assert data["edition"] == "en"
        assert len(data["meanings"]) == 2

    def test_pronunciations(self, dictionary):
        assert dictionary.pronunciations("chat") == {
            "word": "chat",
            "phonetic": "/tʃæt/",
            "phonetics": [
                {"text": "/tʃæt/", "type": "us", "audioUrl": "https://audio/chat.mp3"},
            ],
        }

    def test_synonyms_antonyms(self, dictionary):
        assert dictionary.synonyms_antonyms("chat")["synonyms"] == ["talk"]
        data = dictionary.synonyms_antonyms("run")
        assert data["antonyms"] == ["walk"]
        assert data["synonyms"] == []

    def test_tenses(self, dictionary):
        assert dictionary.tenses("chat") == {"word": "chat", "tenses": None}
        assert dictionary.tenses("run")["tenses"]["past"] == "ran"

    def test_translations(self, dictionary):
        data = dictionary.translations("run")
        assert data["edition"] == "en"
        assert data["translations"] == [
            {"partOfSpeech": "noun", "lang_code": "de", "lang": "German", "word": "Lauf"},
            {"partOfSpeech": "verb", "lang_code": "fr", "lang": "French", "word": "courir"},
        ]


class TestCollections:
    def test_search(self, dictionary):
        data = dictionary.search("CH")
        assert [(r["word"], r["category"]) for r in data["results"]] == [
            ("chat", "general"),
        ]
        assert data["results"][0]["phonetic"] in ("/tʃæt/", "/ʃa/")

    def test_search_strips_query(self, dictionary):
        assert [r["word"] for r in dictionary.search("  comp ")["results"]] == ["computer"]

    @pytest.mark.parametrize("q", [None, "", "  "])
    def test_search_requires_query(self, dictionary, q):
        with pytest.raises(ValidationError, match="Missing required query param: q"):
            dictionary.search(q)

    def test_empty_filters_ignored(self, dictionary):
        assert [r["word"] for r in dictionary.search("c", category="")["results"]] == [
            "chat", "computer",
        ]
        assert dictionary.words(category="", edition="")["total"] == 9
        assert dictionary.word("computer", category="")["word"] == "computer"

    def test_words_defaults(self, dictionary):
        data = dictionary.words()
        assert data["page"] == 1
        assert data["limit"] == 50
        assert data["total"] == 9
        assert len(data["words"]) == 9

    def test_words_clamped(self, dictionary):
        data = dictionary.words(page="0", limit="0")
        assert data["page"] == 1
        assert data["limit"] == 1
        assert len(data["words"]) == 1

    def test_categories(self, dictionary):
        assert dictionary.categories() == {"categories": ["general", "technology"]}
