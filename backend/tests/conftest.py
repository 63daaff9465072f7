"""
NFT Badge test configuration

Shared fixtures:
- image_transport: an httpx MockTransport serving fake image bytes,
  with knobs for latency, failures, and in-flight counting
- clean_cache: empties the global NFT cache around each test
"""

import asyncio
import sys
from pathlib import Path

import httpx
import pytest

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from cache.memory_store import nft_cache


# ============================================
# Image server stub
# ============================================

class FakeImageServer:
    """
    Serves ``b"<path>"`` as the body for every request.

    Attributes:
        delays: path -> seconds to sleep before responding
        statuses: path -> HTTP status to return
        errors: paths that raise a connection error
        requested: every URL seen, in arrival order
        max_in_flight: highest number of concurrent requests observed
    """

    def __init__(self):
        self.delays = {}
        self.statuses = {}
        self.errors = set()
        self.requested = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.requested.append(request.url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delays.get(path, 0)
            if delay:
                await asyncio.sleep(delay)
            if path in self.errors:
                raise httpx.ConnectError("connection refused", request=request)
            status = self.statuses.get(path, 200)
            return httpx.Response(status, content=path.encode())
        finally:
            self.in_flight -= 1

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def image_server():
    return FakeImageServer()


@pytest.fixture
def clean_cache():
    nft_cache.clear()
    yield nft_cache
    nft_cache.clear()


# ============================================
# Helper Functions
# ============================================

def count_images(svg: str) -> int:
    return svg.count("<image ")
