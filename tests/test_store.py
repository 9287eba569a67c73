"""Tests for the in-memory LogStore adapter (the shared store contract)."""

from datetime import timedelta

import pytest

from blob_logger import InMemoryLogStore, NamespaceNotFound, PersistenceFailure
from blob_logger.naming import RecordNamer

from conftest import HKT, FakeClock


def _store(**kwargs):
    return InMemoryLogStore(namer=RecordNamer(tz=HKT, clock=FakeClock()), **kwargs)


class TestFetchLatest:
    def test_none_when_family_empty(self):
        assert _store().fetch_latest("log") is None

    def test_highest_sort_key_wins(self):
        store = _store()
        store.create("log")
        store.create("log")
        newest = store.create("log")
        assert store.fetch_latest("log").id == newest.id

    def test_other_families_do_not_match(self):
        store = _store()
        mine = store.create("log")
        store.create("logger")
        store.create("audit")
        assert store.fetch_latest("log").id == mine.id

    def test_family_with_longer_name_is_not_a_member(self):
        store = _store()
        mine = store.create("log")
        store.create("log_error")
        store.create("log_audit")
        assert store.fetch_latest("log").id == mine.id
        assert [r.id for r in store.fetch_recent("log")] == [mine.id]
        assert store.fetch_latest("log_error").sort_key.startswith("log_error_")

    def test_returns_body(self):
        store = _store()
        rec = store.create("log")
        rec.body = "hello\n"
        store.update(rec)
        assert store.fetch_latest("log").body == "hello\n"


class TestFetchRecent:
    def test_capped_and_newest_first(self):
        store = _store()
        created = [store.create("log").id for _ in range(14)]
        recent = store.fetch_recent("log", 10)
        assert len(recent) == 10
        assert [r.id for r in recent] == list(reversed(created))[:10]

    def test_metadata_only(self):
        store = _store()
        rec = store.create("log")
        rec.body = "abc"
        store.update(rec)
        meta = store.fetch_recent("log")[0]
        assert meta.body == ""
        assert meta.size == 3

    def test_empty_when_nothing_matches(self):
        assert _store().fetch_recent("log", 10) == []

    def test_non_positive_limit(self):
        store = _store()
        store.create("log")
        assert store.fetch_recent("log", 0) == []


class TestCreate:
    def test_new_record_is_empty_and_named(self):
        rec = _store().create("Error_Log")
        assert rec.body == ""
        assert rec.sort_key.startswith("Error_Log_")
        assert rec.display_name.startswith("Error Log 2026-10-16 ")
        assert rec.created_at is not None

    def test_missing_namespace_raises_and_creates_nothing(self):
        store = _store(namespace="logs", namespace_exists=False)
        with pytest.raises(NamespaceNotFound) as info:
            store.create("log")
        assert info.value.namespace == "logs"
        assert store.records == []

    def test_rapid_creates_get_distinct_keys(self):
        store = InMemoryLogStore(
            namer=RecordNamer(tz=HKT, clock=FakeClock(step=timedelta(0)))
        )
        a, b = store.create("log"), store.create("log")
        assert a.sort_key < b.sort_key


class TestUpdate:
    def test_persists_body(self):
        store = _store()
        rec = store.create("log")
        rec.body = "x"
        store.update(rec)
        assert store.get(rec.id).body == "x"

    def test_disabled_is_silent_no_op(self):
        store = _store(enabled=False)
        rec = store.create("log")
        rec.body = "never written"
        assert store.update(rec) is rec
        assert store.get(rec.id).body == ""

    def test_flag_is_read_on_every_call(self):
        store = _store(enabled=False)
        rec = store.create("log")
        rec.body = "later"
        store.update(rec)
        store.enabled = True
        store.update(rec)
        assert store.get(rec.id).body == "later"

    def test_unknown_record_fails(self):
        store = _store()
        rec = store.create("log")
        rec.id = "log_missing"
        with pytest.raises(PersistenceFailure):
            store.update(rec)

    def test_injected_failure_fires_once(self):
        store = _store()
        store.inject_failure("update", PersistenceFailure("update", "disk full"))
        rec = store.create("log")
        with pytest.raises(PersistenceFailure):
            store.update(rec)
        store.update(rec)
