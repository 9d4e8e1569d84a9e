"""Tests for the record store implementations."""

from datetime import date

import pytest

from confs_scraper.errors import DuplicateRecordError, RecordNotFoundError, StoreError
from confs_scraper.models import RecordFields
from confs_scraper.store import JSONRecordStore, SQLRecordStore, open_store


def fields(url: str, cfp: str = None, **extra) -> RecordFields:
    return RecordFields(
        name=extra.pop("name", "Conf"),
        url=url,
        normalized_url=url,
        cfp_url=cfp,
        normalized_cfp_url=cfp,
        **extra,
    )


class TestRecordStore:
    """Behaviour shared by every store implementation."""

    def test_create_and_find(self, store):
        created = store.create(fields("https://a.dev", "https://cfp.dev/a", topics=["#go"]))
        assert store.find_by_url("https://a.dev").id == created.id
        assert store.find_by_cfp_url("https://cfp.dev/a").id == created.id
        assert store.find_by_url("https://b.dev") is None
        assert created.topics == ["#go"]

    def test_find_by_identity_is_or_match(self, store):
        a = store.create(fields("https://a.dev", "https://cfp.dev/a"))
        assert store.find_by_identity("https://a.dev", None).id == a.id
        assert store.find_by_identity("https://other.dev", "https://cfp.dev/a").id == a.id
        assert store.find_by_identity(None, None) is None
        assert store.find_by_identity("https://other.dev", None) is None

    def test_find_by_identity_prefers_url(self, store):
        a = store.create(fields("https://a.dev", "https://cfp.dev/a"))
        store.create(fields("https://b.dev", "https://cfp.dev/b"))
        assert store.find_by_identity("https://a.dev", "https://cfp.dev/b").id == a.id

    def test_duplicate_url_rejected(self, store):
        store.create(fields("https://a.dev"))
        with pytest.raises(DuplicateRecordError):
            store.create(fields("https://a.dev"))
        assert store.count() == 1

    def test_duplicate_cfp_url_rejected(self, store):
        store.create(fields("https://a.dev", "https://cfp.dev/x"))
        with pytest.raises(StoreError):
            store.create(fields("https://b.dev", "https://cfp.dev/x"))

    def test_null_cfp_urls_do_not_collide(self, store):
        store.create(fields("https://a.dev"))
        store.create(fields("https://b.dev"))
        assert store.count() == 2

    def test_update_overwrites_fields(self, store):
        created = store.create(fields("https://a.dev", city="Lyon", start_date=date(2026, 5, 3)))
        updated = store.update(created.id, fields("https://a.dev", name="Renamed"))

        assert updated.id == created.id
        assert updated.name == "Renamed"
        assert updated.city is None
        assert updated.start_date is None
        assert updated.created_at == created.created_at
        assert updated.updated_at >= created.updated_at

    def test_update_missing_record(self, store):
        with pytest.raises(RecordNotFoundError):
            store.update("does-not-exist", fields("https://a.dev"))

    def test_stats(self, store):
        store.create(fields("https://a.dev", "https://cfp.dev/a", country="Germany", topics=["#python"]))
        store.create(fields("https://b.dev", country="Germany"))
        stats = store.stats()
        assert stats["total"] == 2
        assert stats["with_cfp"] == 1
        assert stats["undated"] == 2
        assert stats["top_countries"] == {"Germany": 2}
        assert stats["top_topics"] == {"#python": 1}


class TestJSONRecordStore:
    """Tests specific to the JSON file store."""

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "conferences.json"
        created = JSONRecordStore(path).create(fields("https://a.dev", start_date=date(2026, 5, 3)))

        reloaded = JSONRecordStore(path).find_by_url("https://a.dev")
        assert reloaded.id == created.id
        assert reloaded.start_date == date(2026, 5, 3)

    def test_corrupt_file_raises_store_error(self, tmp_path):
        path = tmp_path / "conferences.json"
        path.write_text("{not json")
        with pytest.raises(StoreError):
            JSONRecordStore(path)

    def test_returned_records_are_copies(self, json_store):
        created = json_store.create(fields("https://a.dev", topics=["#go"]))
        created.topics.append("#mutated")
        assert json_store.find_by_url("https://a.dev").topics == ["#go"]


class TestOpenStore:
    """Tests for picking a store from configuration."""

    def test_database_url(self):
        store = open_store("sqlite://")
        assert isinstance(store, SQLRecordStore)
        store.close()

    def test_file_path(self, tmp_path):
        store = open_store(str(tmp_path / "records.json"))
        assert isinstance(store, JSONRecordStore)
        assert store.store_path == tmp_path / "records.json"
