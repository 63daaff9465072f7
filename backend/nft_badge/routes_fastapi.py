"""
NFT Badge API Routes

Provides endpoints for:
- Rendering a wallet's NFT mosaic as SVG
- Health check
"""

import os
import time
import logging
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse, Response

from cache.memory_store import MemoryStore, nft_cache
from .opensea_client import DEFAULT_BASE_URL, fetch_nfts
from .svg_generator import render

logger = logging.getLogger(__name__)

# ============================================
# Configuration
# ============================================

REFRESH_INTERVAL = int(os.getenv("REFRESH_INTERVAL", "300"))
KV_NAMESPACE = os.getenv("KV_NAMESPACE", "nftCache")
OPENSEA_API_KEY = os.getenv("OPENSEA_API_KEY")
OPENSEA_BASE_URL = os.getenv("OPENSEA_BASE_URL", DEFAULT_BASE_URL)
IMAGE_CONCURRENCY = int(os.getenv("NFT_IMAGE_CONCURRENCY", "5"))
IMAGE_TIMEOUT_MS = int(os.getenv("NFT_IMAGE_TIMEOUT_MS", "5000"))
DEFAULT_COUNT = 10

# ============================================
# Router
# ============================================

router = APIRouter(prefix="/api/nft-badge", tags=["NFT Badge"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def parse_count(raw: Optional[str], default: int = DEFAULT_COUNT) -> int:
    """Parse the ``count`` query value; anything non-numeric falls back to the default."""
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        logger.info(f"[NFTBadge] Ignoring non-numeric count {raw!r}")
        return default


async def load_nfts(address: str, count: int, store: MemoryStore = nft_cache):
    """
    Return the wallet's NFT list, from cache while it is fresh.

    Returns:
        NFT list, or None if OpenSea could not be reached
    """
    cache_key = MemoryStore.make_key(KV_NAMESPACE, address)

    try:
        entry = store.get(cache_key)
    except Exception as e:
        logger.error(f"[NFTCache] Read failed for {address}, ignoring: {e}")
        entry = None

    if entry is not None and not entry.is_expired(time.time()):
        logger.info(f"[NFTCache] Using cached NFTs for {address}")
        return entry.nfts

    logger.info(f"[NFTCache] Fetching new NFTs for {address}...")
    nfts = await fetch_nfts(
        address,
        count,
        api_key=OPENSEA_API_KEY,
        base_url=OPENSEA_BASE_URL,
    )
    if nfts is None:
        return None

    try:
        store.store(cache_key, nfts, ttl=REFRESH_INTERVAL)
    except Exception as e:
        logger.error(f"[NFTCache] Write failed for {address}: {e}")

    return nfts


# ============================================
# Endpoints
# ============================================

@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return JSONResponse(content={
        "status": "healthy",
        "service": "nft-badge",
    })


@router.get("")
@router.get("/")
async def nft_badge(
    address: Optional[str] = Query(None, description="Wallet address"),
    count: Optional[str] = Query(None, description="Number of NFTs to show (max 9 rendered)"),
):
    """
    Render the NFT mosaic for a wallet.

    Example:
        GET /api/nft-badge?address=0xabc...&count=9

    Embed in a README:
        ![NFTs](https://<host>/api/nft-badge?address=0xabc...)
    """
    if not address:
        return _error(400, "address parameter is required")

    count = parse_count(count)

    try:
        nfts = await load_nfts(address, count)
        if nfts is None:
            return _error(500, "unable to fetch NFT data")

        svg = await render(
            nfts,
            count,
            concurrency=IMAGE_CONCURRENCY,
            timeout_ms=IMAGE_TIMEOUT_MS,
        )
        return Response(content=svg, media_type="image/svg+xml")

    except Exception as e:
        logger.error(f"[NFTBadge] Failed to render badge for {address}: {e}", exc_info=True)
        return _error(500, "server error")
