"""
NFT cache tests
"""

import json
import time

from cache.memory_store import MemoryStore


NFTS = [{"identifier": "1", "display_image_url": "https://img.test/1.png"}]


class TestMemoryStore:

    def test_store_and_get(self):
        store = MemoryStore()
        key = MemoryStore.make_key("nftCache", "0xabc")
        store.store(key, NFTS, ttl=300)

        entry = store.get(key)
        assert key == "nftCache:0xabc"
        assert entry.nfts == NFTS
        assert not entry.is_expired()

    def test_expired_entry_still_returned(self):
        store = MemoryStore()
        store.store("ns:0x1", NFTS, ttl=-1)

        entry = store.get("ns:0x1")
        assert entry is not None
        assert entry.is_expired()

    def test_expiry_boundary(self):
        store = MemoryStore()
        entry = store.store("ns:0x1", NFTS, ttl=10)

        assert not entry.is_expired(entry.exptime)
        assert entry.is_expired(entry.exptime + 1)

    def test_missing_key(self):
        assert MemoryStore().get("ns:none") is None

    def test_oldest_evicted_at_capacity(self):
        store = MemoryStore(max_entries=2)
        store.store("a", NFTS, ttl=300)
        time.sleep(0.01)
        store.store("b", NFTS, ttl=300)
        time.sleep(0.01)
        store.store("c", NFTS, ttl=300)

        assert store.get("a") is None
        assert store.get("b") is not None
        assert store.get("c") is not None

    def test_expired_evicted_before_fresh(self):
        store = MemoryStore(max_entries=2)
        store.store("fresh", NFTS, ttl=300)
        time.sleep(0.01)
        store.store("stale", NFTS, ttl=-5)
        store.store("new", NFTS, ttl=300)

        assert store.get("stale") is None
        assert store.get("fresh") is not None

    def test_restore_replaces_entry(self):
        store = MemoryStore(max_entries=1)
        store.store("a", [], ttl=300)
        store.store("a", NFTS, ttl=300)

        assert store.get("a").nfts == NFTS
        assert store.stats()["total_entries"] == 1

    def test_delete_and_clear(self):
        store = MemoryStore()
        store.store("a", NFTS, ttl=300)
        store.store("b", NFTS, ttl=300)

        assert store.delete("a") is True
        assert store.delete("a") is False
        assert store.clear() == 1
        assert store.list_all() == []

    def test_stats(self):
        store = MemoryStore(max_entries=10)
        store.store("a", NFTS, ttl=300)
        store.store("b", NFTS, ttl=-1)

        stats = store.stats()
        assert stats["total_entries"] == 2
        assert stats["expired_entries"] == 1
        assert stats["max_entries"] == 10
        assert stats["total_size_bytes"] > 0

    def test_to_json_blob(self):
        entry = MemoryStore().store("a", NFTS, ttl=300)

        blob = json.loads(entry.to_json())
        assert blob == {"exptime": entry.exptime, "nfts": NFTS}
