"""
Cache API Routes
缓存 API 路由

Read-only HTTP endpoints for inspecting the NFT list cache:
- GET /api/cache/list   - List cached wallets (no NFT data)
- GET /api/cache/stats  - Get cache statistics
"""

from fastapi import APIRouter
from pydantic import BaseModel
from typing import List

from .memory_store import nft_cache

router = APIRouter(prefix="/api/cache", tags=["cache"])


# ============================================
# Response Models
# ============================================

class CacheSummary(BaseModel):
    """Summary of a cache entry (for list endpoint)"""
    key: str
    nft_count: int
    created_at: str
    expires_at: str
    expired: bool
    size_bytes: int

class CacheListResponse(BaseModel):
    """Response model for list endpoint"""
    success: bool
    count: int
    items: List[CacheSummary]

class CacheStatsResponse(BaseModel):
    """Response model for stats endpoint"""
    total_entries: int
    expired_entries: int
    max_entries: int
    total_size_bytes: int


# ============================================
# API Endpoints
# ============================================

@router.get("/list", response_model=CacheListResponse)
async def list_cache():
    """List all cached wallets, newest first."""
    entries = nft_cache.list_all()
    return CacheListResponse(
        success=True,
        count=len(entries),
        items=[CacheSummary(**e.to_summary()) for e in entries],
    )


@router.get("/stats", response_model=CacheStatsResponse)
async def get_cache_stats():
    """
    Get cache statistics
    获取缓存统计信息
    """
    return CacheStatsResponse(**nft_cache.stats())

