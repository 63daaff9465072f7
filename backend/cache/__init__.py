"""
Memory Cache Module
内存缓存模块

Provides in-memory storage for wallet NFT lists,
keyed by "<namespace>:<address>" with a per-entry expiry.
"""

from .memory_store import MemoryStore, CacheEntry, nft_cache
from .routes import router as cache_router

__all__ = [
    "MemoryStore",
    "CacheEntry",
    "nft_cache",
    "cache_router",
]
