"""
Memory Store Implementation
内存存储实现

Thread-safe in-memory storage for wallet NFT lists.
Stands in for a hosted key/value store in the serverless deployment.

Features:
- Thread-safe operations with Lock
- Entries carry their own expiry timestamp (``exptime``)
- Oldest-first eviction when max entries exceeded
- Simple CRUD operations
"""

import json
import os
import time
from typing import Dict, Any, Optional, List
from dataclasses import dataclass
from threading import Lock
from datetime import datetime


@dataclass
class CacheEntry:
    """
    Cache entry data structure
    缓存条目数据结构
    """
    key: str                         # "<namespace>:<address>"
    nfts: List[Dict[str, Any]]       # NFT list as returned by OpenSea
    timestamp: float                 # Unix timestamp when stored
    exptime: int                     # Unix timestamp (seconds) after which it is stale

    def is_expired(self, now: Optional[float] = None) -> bool:
        """Check if this entry has expired"""
        now = time.time() if now is None else now
        return int(now) > self.exptime

    @property
    def created_at(self) -> str:
        """Get ISO format creation time"""
        return datetime.fromtimestamp(self.timestamp).isoformat()

    @property
    def expires_at(self) -> str:
        """Get ISO format expiration time"""
        return datetime.fromtimestamp(self.exptime).isoformat()

    @property
    def size_bytes(self) -> int:
        """Estimate size in bytes"""
        return len(self.to_json())

    def to_json(self) -> str:
        """Serialize as the ``{"exptime", "nfts"}`` blob."""
        return json.dumps(
            {"exptime": self.exptime, "nfts": self.nfts},
            ensure_ascii=False,
        )

    def to_summary(self) -> Dict[str, Any]:
        """Metadata only, without the NFT list"""
        return {
            "key": self.key,
            "nft_count": len(self.nfts),
            "created_at": self.created_at,
            "expires_at": self.expires_at,
            "expired": self.is_expired(),
            "size_bytes": self.size_bytes,
        }


class MemoryStore:
    """
    Thread-safe in-memory storage
    线程安全的内存存储

    Features:
    - Maximum entry limit, evicting the oldest entry
    - Expired entries are still returned by get() so callers can decide
      whether to refresh; they are dropped first on eviction
    - Thread-safe with Lock
    """

    def __init__(self, max_entries: int = 500):
        """
        Initialize memory store

        Args:
            max_entries: Maximum number of entries to keep
        """
        self._store: Dict[str, CacheEntry] = {}
        self._lock = Lock()
        self._max_entries = max(1, max_entries)

    @staticmethod
    def make_key(namespace: str, address: str) -> str:
        return f"{namespace}:{address}"

    def store(self, key: str, nfts: List[Dict[str, Any]], ttl: int) -> CacheEntry:
        """
        Store an NFT list
        存储 NFT 列表

        Args:
            key: Cache key
            nfts: NFT list
            ttl: Seconds until the entry is considered stale

        Returns:
            The stored entry
        """
        now = time.time()
        entry = CacheEntry(
            key=key,
            nfts=list(nfts),
            timestamp=now,
            exptime=int(now) + ttl,
        )

        with self._lock:
            self._store.pop(key, None)

            if len(self._store) >= self._max_entries:
                self._cleanup_expired(now)

            while len(self._store) >= self._max_entries:
                oldest_key = min(
                    self._store,
                    key=lambda k: self._store[k].timestamp
                )
                del self._store[oldest_key]

            self._store[key] = entry

        return entry

    def get(self, key: str) -> Optional[CacheEntry]:
        """
        Get cache entry by key, expired or not
        根据 key 获取缓存条目（含已过期条目）

        Returns:
            CacheEntry if present, None otherwise
        """
        with self._lock:
            return self._store.get(key)

    def list_all(self) -> List[CacheEntry]:
        """
        List all cache entries, newest first
        """
        with self._lock:
            return sorted(
                self._store.values(),
                key=lambda e: -e.timestamp
            )

    def delete(self, key: str) -> bool:
        """
        Delete cache entry

        Returns:
            True if deleted, False if not found
        """
        with self._lock:
            if key in self._store:
                del self._store[key]
                return True
            return False

    def clear(self) -> int:
        """
        Clear all cache entries
        清空所有缓存

        Returns:
            Number of entries deleted
        """
        with self._lock:
            count = len(self._store)
            self._store.clear()
            return count

    def stats(self) -> Dict[str, Any]:
        """
        Get cache statistics
        """
        with self._lock:
            entries = list(self._store.values())
            now = time.time()
            return {
                "total_entries": len(entries),
                "expired_entries": sum(1 for e in entries if e.is_expired(now)),
                "max_entries": self._max_entries,
                "total_size_bytes": sum(e.size_bytes for e in entries),
            }

    def _cleanup_expired(self, now: float) -> int:
        """
        Remove expired entries (internal, assumes lock held)

        Returns:
            Number of entries removed
        """
        expired = [
            k for k, v in self._store.items()
            if v.is_expired(now)
        ]
        for k in expired:
            del self._store[k]
        return len(expired)


# Global singleton instance
nft_cache = MemoryStore(max_entries=int(os.getenv("NFT_CACHE_MAX_ENTRIES", "500")))
