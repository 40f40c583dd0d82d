import pytest

from userstore.database import QuerySource
from userstore.exceptions import ConfigurationError, ErrorKind

EXPECTED_QUERIES = [
    "create_user",
    "delete_user",
    "find_all_users",
    "find_user_by_email",
    "find_user_by_id",
    "update_user",
]


def test_packaged_queries_are_available():
    source = QuerySource()

    assert source.list_available() == EXPECTED_QUERIES
    for name in EXPECTED_QUERIES:
        assert "users" in source.load_query(name)


def test_load_query_reads_file(tmp_path):
    (tmp_path / "ping.sql").write_text("SELECT 1", encoding="utf-8")

    assert QuerySource(tmp_path).load_query("ping") == "SELECT 1"


def test_load_query_is_memoized(tmp_path):
    path = tmp_path / "ping.sql"
    path.write_text("SELECT 1", encoding="utf-8")
    source = QuerySource(tmp_path)

    first = source.load_query("ping")
    path.write_text("SELECT 2", encoding="utf-8")

    assert source.load_query("ping") == first

    source.clear_cache()
    assert source.load_query("ping") == "SELECT 2"


def test_cache_survives_file_removal(tmp_path):
    path = tmp_path / "ping.sql"
    path.write_text("SELECT 1", encoding="utf-8")
    source = QuerySource(tmp_path)
    source.load_query("ping")

    path.unlink()

    assert source.has_query("ping")
    assert source.load_query("ping") == "SELECT 1"


def test_missing_query_raises_configuration_error(tmp_path):
    source = QuerySource(tmp_path)

    with pytest.raises(ConfigurationError) as exc_info:
        source.load_query("nope")

    assert exc_info.value.kind is ErrorKind.CONFIGURATION
    assert exc_info.value.message.startswith("Failed to load SQL query 'nope'")
    assert not source.has_query("nope")


def test_list_available_ignores_other_files(tmp_path):
    (tmp_path / "b.sql").write_text("SELECT 2")
    (tmp_path / "a.sql").write_text("SELECT 1")
    (tmp_path / "README.md").write_text("docs")

    assert QuerySource(tmp_path).list_available() == ["a", "b"]


def test_list_available_missing_dir(tmp_path):
    with pytest.raises(ConfigurationError):
        QuerySource(tmp_path / "missing").list_available()
