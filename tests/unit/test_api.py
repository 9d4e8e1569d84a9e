"""Tests for the scrape HTTP endpoint."""

import pytest
from fastapi.testclient import TestClient

from confs_scraper.api import create_app
from confs_scraper.errors import FetchError
from confs_scraper.store import JSONRecordStore


@pytest.fixture
def client(json_store) -> TestClient:
    return TestClient(create_app(json_store))


class TestScrapeEndpoint:
    """Tests for GET /api/scrape."""

    @pytest.mark.parametrize("params", [
        {},
        {"url": "https://confs.tech"},
        {"className": "ConferenceItem_wrapper"},
    ])
    def test_requires_url_and_class_name(self, client, params):
        response = client.get("/api/scrape", params=params)
        assert response.status_code == 400
        assert response.json() == {"error": "URL and className are required"}

    def test_success(self, client, json_store, fragments, monkeypatch):
        async def fake_fetch(url, class_name):
            return fragments

        monkeypatch.setattr("confs_scraper.pipeline.fetch_fragments", fake_fetch)
        response = client.get(
            "/api/scrape",
            params={"url": "https://confs.tech", "className": "ConferenceItem_wrapper"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["results"]["created"] == 3
        assert len(body["parsedData"]) == 3
        assert json_store.count() == 3

    def test_fetch_failure_is_server_error(self, client, monkeypatch):
        async def failing_fetch(url, class_name):
            raise FetchError(url, "timeout")

        monkeypatch.setattr("confs_scraper.pipeline.fetch_fragments", failing_fetch)
        response = client.get(
            "/api/scrape",
            params={"url": "https://confs.tech", "className": "x"},
        )

        assert response.status_code == 500
        assert "timeout" in response.json()["error"]

    def test_lists_stored_conferences(self, client, fragments, monkeypatch):
        async def fake_fetch(url, class_name):
            return fragments

        monkeypatch.setattr("confs_scraper.pipeline.fetch_fragments", fake_fetch)
        client.get("/api/scrape", params={"url": "https://confs.tech", "className": "x"})

        records = client.get("/api/conferences").json()
        assert sorted(r["normalized_url"] for r in records) == [
            "https://jsconf.eu",
            "https://pycon.de",
            "https://rustfest.global",
        ]

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}


class TestLifespan:
    """Tests for app startup and shutdown."""

    def test_shutdown_closes_store(self, tmp_path):
        class TrackingStore(JSONRecordStore):
            closed = False

            def close(self) -> None:
                self.closed = True
                super().close()

        store = TrackingStore(tmp_path / "conferences.json")
        with TestClient(create_app(store)) as client:
            assert client.get("/health").status_code == 200
            assert not store.closed

        assert store.closed
