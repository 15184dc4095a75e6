"""
Tests for bookmark persistence.
"""

import json
import pytest

from jobfeed.bookmarks import BOOKMARKS_KEY, BookmarkStore, contains, toggled, without
from jobfeed.errors import PersistenceError
from jobfeed.storage import JsonFileStore, MemoryStore


class FailingStore(MemoryStore):
    """Reads work, writes fail."""

    def set_item(self, key, value):
        raise PersistenceError("disk full")


class BrokenReadStore(MemoryStore):
    def get_item(self, key):
        raise PersistenceError("database is locked")


def test_key_is_versioned():
    assert BOOKMARKS_KEY == "@JobApp:bookmarks_v1"


class TestLoad:
    def test_nothing_stored(self, memory_store):
        assert BookmarkStore(memory_store).load() == []

    @pytest.mark.parametrize("raw", ["not json", '{"id": 1}', '"text"', "42", "null"])
    def test_invalid_payload_returns_empty(self, raw):
        store = MemoryStore({BOOKMARKS_KEY: raw})
        assert BookmarkStore(store).load() == []

    def test_read_failure_returns_empty(self):
        assert BookmarkStore(BrokenReadStore()).load() == []

    def test_failure_is_logged(self, quiet_logger, tmp_path):
        BookmarkStore(MemoryStore({BOOKMARKS_KEY: "not json"})).load()
        log_text = next((tmp_path / "logs").glob("*.log")).read_text()
        assert "Failed to load bookmarks" in log_text


class TestSave:
    def test_round_trip(self, memory_store, job_factory, full_job):
        bookmarks = BookmarkStore(memory_store)
        saved = [job_factory(1), full_job, job_factory(7, title="Tele-caller")]

        assert bookmarks.save(saved) is True
        assert bookmarks.load() == saved

    def test_round_trip_json_file(self, tmp_path, full_job):
        bookmarks = BookmarkStore(JsonFileStore(tmp_path / "store.json"))
        assert bookmarks.save([full_job])
        assert BookmarkStore(JsonFileStore(tmp_path / "store.json")).load() == [full_job]

    def test_writes_whole_list_under_key(self, memory_store, job_factory):
        BookmarkStore(memory_store).save([job_factory(1)])
        BookmarkStore(memory_store).save([job_factory(2)])
        assert list(memory_store.items) == [BOOKMARKS_KEY]
        assert [j["id"] for j in json.loads(memory_store.items[BOOKMARKS_KEY])] == [2]

    @pytest.mark.parametrize("value", [None, {"id": 1}, "[]", ({"id": 1},)])
    def test_rejects_non_list(self, memory_store, value):
        assert BookmarkStore(memory_store).save(value) is False
        assert memory_store.items == {}

    def test_write_failure_reports_false(self, job_factory, quiet_logger):
        assert BookmarkStore(FailingStore()).save([job_factory(1)]) is False
        assert quiet_logger.metrics["bookmark_save_failures"] == 1

    def test_unserialisable_value_reports_false(self, memory_store):
        assert BookmarkStore(memory_store).save([{"id": 1, "tags": {"a"}}]) is False
        assert memory_store.items == {}

    def test_success_is_counted(self, memory_store, job_factory, quiet_logger):
        BookmarkStore(memory_store).save([job_factory(1)])
        assert quiet_logger.metrics["bookmark_saves"] == 1


class TestHelpers:
    def test_contains(self, job_factory):
        assert contains([job_factory(1), job_factory(2)], 2)
        assert not contains([job_factory(1)], 2)
        assert not contains(["junk", None], 2)

    def test_toggled_adds_then_removes(self, job_factory):
        start = [job_factory(1)]
        added = toggled(start, job_factory(2))
        assert [j["id"] for j in added] == [1, 2]
        assert [j["id"] for j in toggled(added, job_factory(2))] == [1]
        assert [j["id"] for j in start] == [1]

    def test_toggled_matches_by_id_only(self, job_factory):
        saved = [job_factory(1, title="Old title")]
        assert toggled(saved, job_factory(1, title="New title")) == []

    def test_without(self, job_factory):
        assert without([job_factory(1), "junk", job_factory(2)], 1) == ["junk", job_factory(2)]
