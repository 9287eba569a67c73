"""HTTP tests for the log routes, with the store dependency overridden."""

import pytest
from fastapi.testclient import TestClient

from blob_logger import InMemoryLogStore, LoggerConfig
from blob_logger.naming import RecordNamer

from main import app
from routers.log.deps import get_config, get_store

from conftest import HKT, FakeClock


class _RacingStore(InMemoryLogStore):
    """Another writer opens a newer record right after each of our writes."""

    def _write(self, record):
        written = super()._write(record)
        self.create(record.sort_key.rpartition("_")[0])
        return written


@pytest.fixture
def mem_store():
    return InMemoryLogStore(namer=RecordNamer(tz=HKT, clock=FakeClock()))


@pytest.fixture
def client(mem_store):
    config = LoggerConfig(max_length=10_000)
    app.dependency_overrides[get_config] = lambda: config
    app.dependency_overrides[get_store] = lambda: mem_store
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestAppend:
    def test_post_flushes_to_store(self, client, mem_store):
        resp = client.post("/api/log", json={"message": "hello"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "success"
        assert data["log_id"].startswith("log_")
        assert mem_store.get(data["log_id"]).body.endswith(" | hello\n")
        assert data["length"] == mem_store.get(data["log_id"]).body_length

    def test_each_request_has_its_own_buffer(self, client, mem_store):
        client.post("/api/log", json={"message": "one"})
        client.post("/api/log", json={"message": "two"})
        body = mem_store.records[0].body
        assert body.count(" | one\n") == 1
        assert body.index(" | two") < body.index(" | one")

    def test_error_block_and_separator(self, client, mem_store):
        resp = client.post("/api/log", json={
            "message": "sync failed",
            "error": {"label": "OrderSync", "message": "timeout", "location": "sync.py:9"},
            "separator": True,
        })
        assert resp.status_code == 200
        body = mem_store.records[0].body
        assert " | Message: timeout\n" in body
        assert " | Line: sync.py:9\n" in body

    def test_custom_family(self, client, mem_store):
        client.post("/api/log", json={"message": "x", "base_name": "Error_Log"})
        assert mem_store.fetch_latest("Error_Log") is not None

    def test_rejects_bad_family_name(self, client):
        resp = client.post("/api/log", json={"message": "x", "base_name": "../etc"})
        assert resp.status_code == 422

    def test_reports_the_record_it_wrote(self, client):
        racing = _RacingStore(namer=RecordNamer(tz=HKT, clock=FakeClock()))
        app.dependency_overrides[get_store] = lambda: racing

        data = client.post("/api/log", json={"message": "hello"}).json()

        written = racing.get(data["log_id"])
        assert written.body.endswith(" | hello\n")
        assert data["length"] == written.body_length
        assert racing.fetch_latest("log").id != data["log_id"]

    def test_namespace_missing_is_503(self, client, mem_store):
        mem_store.namespace_exists = False
        resp = client.post("/api/log", json={"message": "x"})
        assert resp.status_code == 503
        assert resp.json()["detail"]["type"] == "NamespaceNotFound"


class TestQueries:
    def test_current_404_when_empty(self, client):
        assert client.get("/api/log/current").status_code == 404

    def test_current_includes_body(self, client):
        client.post("/api/log", json={"message": "latest"})
        data = client.get("/api/log/current").json()
        assert data["body"].endswith(" | latest\n")
        assert data["display_name"].startswith("log 2026-10-16")

    def test_list_is_capped(self, client, mem_store):
        for _ in range(12):
            mem_store.create("log")
        resp = client.get("/api/log/list", params={"limit": 10})
        assert resp.status_code == 200
        assert len(resp.json()) == 10
        assert client.get("/api/log/list", params={"limit": 11}).status_code == 422


class TestConsole:
    def test_list_page(self, client):
        client.post("/api/log", json={"message": "<b>escaped</b>"})
        resp = client.get("/api/log/console/")
        assert resp.status_code == 200
        assert "Log Records" in resp.text

    def test_record_page_escapes_lines(self, client, mem_store):
        client.post("/api/log", json={"message": "<b>escaped</b>"})
        rec_id = mem_store.records[0].id
        resp = client.get(f"/api/log/console/{rec_id}")
        assert resp.status_code == 200
        assert "&lt;b&gt;escaped&lt;/b&gt;" in resp.text

    def test_view_links_keep_family(self, client, mem_store):
        client.post("/api/log", json={"message": "x", "base_name": "Error_Log"})
        rec_id = mem_store.fetch_latest("Error_Log").id
        resp = client.get("/api/log/console/", params={"base_name": "Error_Log"})
        assert f'href="/api/log/console/{rec_id}?base_name=Error_Log"' in resp.text

    def test_back_link_keeps_family(self, client, mem_store):
        client.post("/api/log", json={"message": "x", "base_name": "Error_Log"})
        rec_id = mem_store.fetch_latest("Error_Log").id
        resp = client.get(f"/api/log/console/{rec_id}", params={"base_name": "Error_Log"})
        assert 'href="/api/log/console/?base_name=Error_Log"' in resp.text

    def test_back_link_without_family(self, client, mem_store):
        client.post("/api/log", json={"message": "x"})
        resp = client.get(f"/api/log/console/{mem_store.records[0].id}")
        assert 'href="/api/log/console/"' in resp.text

    def test_unknown_record_404(self, client):
        assert client.get("/api/log/console/log_nope").status_code == 404

    def test_empty_family(self, client):
        assert "No logs found" in client.get("/api/log/console/").text


def test_healthz(client):
    data = client.get("/healthz").json()
    assert data == {"status": "healthy", "store": "InMemoryLogStore",
                    "enabled": True, "family": "log"}
