"""
Local adapters: blob storage, draft files, change feed and query cache.
"""

from uuid import uuid4

import pytest

from src.adapters.blob_store import LocalBlobStorage
from src.adapters.change_feed import ChangeFeed
from src.adapters.draft_store import JsonFileDraftStore
from src.adapters.query_cache import InMemoryQueryCache
from src.domain.events import LISTINGS_TOPIC, POSTS_TOPIC, ChangeEvent
from src.ports.filestore import BlobStorageError


class TestLocalBlobStorage:
    def test_upload_and_read(self, tmp_path):
        storage = LocalBlobStorage(tmp_path, public_base_url="https://cdn.example.com/")

        stored = storage.upload("listing-images", "abc.png", b"png-bytes", "image/png")

        assert stored == "abc.png"
        assert storage.read("listing-images", "abc.png") == b"png-bytes"
        assert (
            storage.get_public_url("listing-images", stored)
            == "https://cdn.example.com/listing-images/abc.png"
        )

    def test_traversal_is_refused(self, tmp_path):
        storage = LocalBlobStorage(tmp_path / "blobs")
        with pytest.raises(BlobStorageError):
            storage.upload("listing-images", "../../escape.png", b"x", "image/png")
        with pytest.raises(ValueError):
            storage.read("listing-images", "../other/file.png")

    def test_bad_bucket_name(self, tmp_path):
        storage = LocalBlobStorage(tmp_path)
        with pytest.raises(BlobStorageError):
            storage.upload("Bad Bucket", "a.png", b"x", "image/png")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            LocalBlobStorage(tmp_path).read("blog-images", "nope.png")


class TestJsonFileDraftStore:
    def test_write_read_remove(self, tmp_path):
        store = JsonFileDraftStore(tmp_path)
        store.write("listing-draft-new", '{"a": 1}')

        assert store.read("listing-draft-new") == '{"a": 1}'
        assert store.keys() == ["listing-draft-new"]

        store.remove("listing-draft-new")
        store.remove("listing-draft-new")
        assert store.read("listing-draft-new") is None

    def test_key_cannot_escape_directory(self, tmp_path):
        with pytest.raises(ValueError):
            JsonFileDraftStore(tmp_path).write("../evil", "{}")


class TestChangeFeed:
    def test_topics_and_unsubscribe(self):
        feed = ChangeFeed()
        seen = []
        unsubscribe = feed.subscribe(POSTS_TOPIC, seen.append)

        feed.publish(ChangeEvent(POSTS_TOPIC, "insert", uuid4()))
        feed.publish(ChangeEvent(LISTINGS_TOPIC, "insert", uuid4()))
        unsubscribe()
        feed.publish(ChangeEvent(POSTS_TOPIC, "delete", uuid4()))

        assert [e.kind for e in seen] == ["insert"]

    def test_failing_handler_does_not_stop_others(self):
        feed = ChangeFeed()
        seen = []

        def broken(event):
            raise RuntimeError("boom")

        feed.subscribe(POSTS_TOPIC, broken)
        feed.subscribe(POSTS_TOPIC, seen.append)
        feed.publish(ChangeEvent(POSTS_TOPIC, "update", uuid4()))

        assert len(seen) == 1


class TestInMemoryQueryCache:
    def test_loads_once(self):
        cache = InMemoryQueryCache()
        calls = []

        def load():
            calls.append(1)
            return ["x"]

        assert cache.get_or_load("business-listings:all", load) == ["x"]
        assert cache.get_or_load("business-listings:all", load) == ["x"]
        assert len(calls) == 1

    def test_invalidate_by_prefix(self):
        cache = InMemoryQueryCache()
        cache.get_or_load("business-listings:a", lambda: 1)
        cache.get_or_load("business-listings:b", lambda: 2)
        cache.get_or_load("admin-listings:a", lambda: 3)

        assert cache.invalidate("business-listings") == 2
        assert cache.get_or_load("admin-listings:a", lambda: 99) == 3

    def test_listing_changes_clear_listing_queries(self):
        feed = ChangeFeed()
        cache = InMemoryQueryCache()
        cache.attach(feed)
        cache.get_or_load("business-listings:all", lambda: "old")
        cache.get_or_load("admin-listing-stats", lambda: "old")

        feed.publish(ChangeEvent(LISTINGS_TOPIC, "update", uuid4()))

        assert cache.get_or_load("business-listings:all", lambda: "new") == "new"
        assert cache.get_or_load("admin-listing-stats", lambda: "new") == "new"
