"""
Tests for the wiktapi command line.
"""
import json

import pytest

from wiktapi import db
from wiktapi.cli import create_parser, main


@pytest.fixture
def config_file(tmp_path, settings):
    path = tmp_path / "wiktapi.yaml"
    path.write_text(
        f"db_path: {settings.db_path}\n"
        f"data_dir: {settings.data_dir}\n"
    )
    return path


def _run(capsys, *argv):
    code = main([str(a) for a in argv])
    captured = capsys.readouterr()
    return code, captured.out, captured.err


class TestParser:
    def test_subcommands(self):
        parser = create_parser()
        args = parser.parse_args(["words", "--page", "2", "--limit", "10"])
        assert args.command == "words"
        assert args.page == "2"
        assert args.limit == "10"

    def test_global_options(self, tmp_path):
        args = create_parser().parse_args(
            ["-v", "--config", str(tmp_path / "c.yaml"), "search", "ab"]
        )
        assert args.verbose is True
        assert args.q == "ab"

    def test_no_command(self, capsys):
        code, out, _ = _run(capsys)
        assert code == 1
        assert "usage" in out


class TestImportCommands:
    def test_import(self, capsys, config_file, settings):
        code, out, _ = _run(capsys, "--config", config_file, "import")
        assert code == 0
        assert "Inserted: 10" in out
        assert "Skipped:  3" in out
        assert settings.db_path.exists()

    def test_import_edition_to_output(self, capsys, config_file, tmp_path):
        target = tmp_path / "staging.db"
        code, out, _ = _run(
            capsys, "--config", config_file,
            "import", "--edition", "fr", "--fresh", "--output", target,
        )
        assert code == 0
        assert "Inserted: 2" in out
        assert target.exists()

    def test_skip_indexes_then_index(self, capsys, config_file, settings):
        code, out, _ = _run(capsys, "--config", config_file, "import", "--skip-indexes")
        assert code == 0
        assert "wiktapi index" in out

        code, out, _ = _run(capsys, "--config", config_file, "index")
        assert code == 0
        assert "Rows: 10" in out
        conn = db.connect(settings.db_path)
        assert len(db.index_names(conn)) == 5
        conn.close()

    def test_import_without_sources(self, capsys, config_file, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        code, _, err = _run(
            capsys, "--config", config_file, "import", "--data-dir", empty,
        )
        assert code == 1
        assert "No JSONL files" in err

    def test_bad_config(self, capsys, tmp_path):
        config = tmp_path / "bad.yaml"
        config.write_text("colour: blue\n")
        code, _, err = _run(capsys, "--config", config, "categories")
        assert code == 1
        assert "CONFIG ERROR" in err

    def test_missing_config(self, capsys, tmp_path):
        code, _, err = _run(capsys, "--config", tmp_path / "nope.yaml", "categories")
        assert code == 1
        assert "File not found" in err


class TestQueryCommands:
    @pytest.fixture
    def imported(self, config_file, sample_db):
        return config_file

    def test_lookup(self, capsys, imported):
        code, out, _ = _run(capsys, "--config", imported, "lookup", "run")
        assert code == 0
        data = json.loads(out)
        assert data["word"] == "run"
        assert len(data["meanings"]) == 2

    def test_lookup_edition(self, capsys, imported):
        code, out, _ = _run(capsys, "--config", imported, "lookup", "chat", "--edition", "fr")
        assert code == 0
        assert json.loads(out)["edition"] == "fr"

    def test_lookup_unknown(self, capsys, imported):
        code, out, err = _run(capsys, "--config", imported, "lookup", "zzz")
        assert code == 1
        assert out == ""
        assert 'No entry found for "zzz"' in err

    def test_search(self, capsys, imported):
        code, out, _ = _run(capsys, "--config", imported, "search", "co")
        assert code == 0
        assert [r["word"] for r in json.loads(out)["results"]] == ["computer"]

    def test_words(self, capsys, imported):
        code, out, _ = _run(
            capsys, "--config", imported, "words", "--page", "2", "--limit", "5",
        )
        assert code == 0
        data = json.loads(out)
        assert data["page"] == 2
        assert data["total"] == 9
        assert len(data["words"]) == 4

    def test_categories_and_languages(self, capsys, imported):
        code, out, _ = _run(capsys, "--config", imported, "categories")
        assert code == 0
        assert json.loads(out) == {"categories": ["general", "technology"]}

        code, out, _ = _run(capsys, "--config", imported, "languages")
        assert json.loads(out) == {"languages": ["en", "fr"]}

    def test_query_without_database(self, capsys, config_file):
        code, _, err = _run(capsys, "--config", config_file, "categories")
        assert code == 1
        assert "Database not found" in err
