"""
Tests for the command line interface.
"""

import asyncio
import json

import pytest

from streamlog import cli


@pytest.fixture
def local_env(tmp_path, monkeypatch):
    """Fixture pointing the CLI at a local backend in a temporary directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("STREAMLOG_BACKEND", "local")
    monkeypatch.setenv("STREAMLOG_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("STREAMLOG_API_KEY", raising=False)
    return tmp_path


def test_parse_json_input_string():
    """Test parsing a direct JSON string."""
    assert cli.parse_json_input('{"summary": "x"}') == {"summary": "x"}


def test_parse_json_input_file(tmp_path, monkeypatch):
    """Test parsing JSON from an @file relative to the working directory."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "records.json").write_text(json.dumps([{"summary": "x"}]))

    assert cli.parse_json_input("@records.json") == [{"summary": "x"}]


def test_parse_json_input_errors(tmp_path, monkeypatch):
    """Test invalid JSON and missing files."""
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ValueError, match="Invalid JSON input"):
        cli.parse_json_input("{nope")
    with pytest.raises(ValueError, match="File not found"):
        cli.parse_json_input("@missing.json")


def test_build_query_from_arguments():
    """Test that query options become filters."""
    args = cli.create_parser().parse_args(
        ["query", "--context", "post", "--author", "1", "--page", "2", "--per-page", "5", "--fields", "summary,author"]
    )

    query = cli.build_query(args)
    body = query.to_search_body()

    assert query.fields == ["summary", "author"]
    assert body["from"] == 5
    assert body["query"]["bool"]["filter"] == [
        {"term": {"author": "1"}},
        {"term": {"context": "post"}},
    ]


def test_store_query_distinct_and_meta(local_env, capsys):
    """Test a full round of CLI commands against the local backend."""
    record = {"summary": "Post updated", "context": "post", "meta": {"post_title": "Hi"}}

    assert asyncio.run(cli.main(["store", json.dumps(record)])) == 0
    stored = capsys.readouterr().out
    record_id = stored.strip().split()[-1]

    assert asyncio.run(cli.main(["query", "--context", "post"])) == 0
    out = capsys.readouterr().out
    assert "Found 1 records:" in out
    assert record_id in out

    assert asyncio.run(cli.main(["distinct", "context"])) == 0
    assert capsys.readouterr().out.strip() == "- post"

    assert asyncio.run(cli.main(["meta", record_id, "--key", "post_title", "--single"])) == 0
    assert json.loads(capsys.readouterr().out) == "Hi"


def test_store_unrecognized_record_is_skipped(local_env, capsys):
    """Test storing a record without recognized fields."""
    assert asyncio.run(cli.main(["store", '{"colour": "red"}'])) == 0
    assert "skipped" in capsys.readouterr().out


def test_configuration_error_exit_code(local_env, monkeypatch, capsys):
    """Test that configuration errors stop the CLI."""
    monkeypatch.setenv("STREAMLOG_BACKEND", "remote")

    assert asyncio.run(cli.main(["distinct", "context"])) == 2
    assert "Configuration error" in capsys.readouterr().out


def test_corrupt_local_storage_reports_error(local_env, capsys):
    """Test that unreadable local storage is reported without a traceback."""
    data_dir = local_env / "data"
    data_dir.mkdir()
    (data_dir / "records.json").write_text("{not json")

    assert asyncio.run(cli.main(["distinct", "context"])) == 1
    assert "Storage error" in capsys.readouterr().out
    assert (data_dir / "records.json").read_text() == "{not json"


def test_no_command_prints_help(capsys):
    """Test running without a command."""
    assert asyncio.run(cli.main([])) == 1
    assert "usage" in capsys.readouterr().out.lower()
