"""
Bounded Image Fetcher
有界并发图片下载器

Handles:
- Rewriting marketplace thumbnail URLs to a smaller width variant
- Downloading images with a fixed number of concurrent workers
- Per-image deadline (a slow image never blocks the rest of the batch)
- Converting bodies to Base64 data URIs for inline SVG embedding
"""

import asyncio
import base64
import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

import httpx

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 5
DEFAULT_TIMEOUT_MS = 5000
DEFAULT_TARGET_WIDTH = 200

# Only a "w" parameter in the query string, not "aw=" or a path segment
WIDTH_PARAM_PATTERN = re.compile(r"([?&])w=\d+")


@dataclass
class ImageFetchConfig:
    """Configuration for a batch of image fetches."""
    concurrency: int = DEFAULT_CONCURRENCY     # Max simultaneous downloads
    timeout_ms: int = DEFAULT_TIMEOUT_MS       # Per-image deadline
    target_width: int = DEFAULT_TARGET_WIDTH   # Width requested via URL rewrite

    def __post_init__(self):
        # Non-positive values fall back to defaults instead of raising
        if self.concurrency <= 0:
            self.concurrency = DEFAULT_CONCURRENCY
        if self.timeout_ms <= 0:
            self.timeout_ms = DEFAULT_TIMEOUT_MS
        if self.target_width <= 0:
            self.target_width = DEFAULT_TARGET_WIDTH

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0


def rewrite_width(url: str, width: int = DEFAULT_TARGET_WIDTH) -> str:
    """
    Request a smaller variant of a resizable image URL.

    Only the first ``w=<digits>`` query parameter is rewritten; URLs without
    it are returned unchanged.
    """
    return WIDTH_PARAM_PATTERN.sub(rf"\g<1>w={width}", url, count=1)


def to_data_uri(data: bytes) -> str:
    """Encode an image body as a data URI (always labelled PNG)."""
    encoded = base64.b64encode(data).decode("utf-8")
    return f"data:image/png;base64,{encoded}"


class ImageFetcher:
    """
    Downloads a list of images with bounded concurrency.

    Usage:
        fetcher = ImageFetcher(ImageFetchConfig(concurrency=5, timeout_ms=5000))
        try:
            payloads = await fetcher.fetch_all(urls)
        finally:
            await fetcher.close()

    The result has one entry per input URL, in input order; failed or
    timed-out slots are None.
    """

    def __init__(
        self,
        config: Optional[ImageFetchConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or ImageFetchConfig()

        # Injected clients are owned by the caller and not closed here
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(
            timeout=self.config.timeout_seconds,
            follow_redirects=True,
            headers={
                "User-Agent": "Mozilla/5.0 (compatible; nft-badge/0.1)",
                "Accept": "image/avif,image/webp,image/apng,image/*,*/*;q=0.8",
            },
        )

    async def close(self):
        """Close HTTP client."""
        if self._owns_client:
            await self.http_client.aclose()

    async def _download(self, url: str) -> str:
        response = await self.http_client.get(url)
        response.raise_for_status()
        return to_data_uri(response.content)

    async def fetch_one(self, url: str) -> Optional[str]:
        """
        Fetch a single image as a data URI.

        Never raises: timeouts, transport or HTTP errors and malformed
        (non-string) URLs yield None.
        """
        if not url:
            return None
        if not isinstance(url, str):
            logger.warning(f"[ImageFetcher] Skipping malformed URL: {url!r}")
            return None

        target = rewrite_width(url, self.config.target_width)

        try:
            # wait_for cancels the request (and its connection) on deadline
            payload = await asyncio.wait_for(
                self._download(target),
                timeout=self.config.timeout_seconds,
            )
            logger.debug(f"[ImageFetcher] Success: {target[:60]}...")
            return payload

        except asyncio.TimeoutError:
            logger.warning(
                f"[ImageFetcher] Timeout after {self.config.timeout_ms}ms: {target[:60]}..."
            )
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"[ImageFetcher] HTTP {e.response.status_code}: {target[:60]}..."
            )
        except Exception as e:
            logger.warning(f"[ImageFetcher] Error: {target[:60]}... - {e}")

        return None

    async def fetch_all(self, urls: Sequence[str]) -> List[Optional[str]]:
        """
        Fetch every URL, at most ``concurrency`` at a time.

        Args:
            urls: Image URLs; empty strings are treated as missing

        Returns:
            Payload list aligned with ``urls``
        """
        if not urls:
            return []

        results: List[Optional[str]] = [None] * len(urls)
        queue: asyncio.Queue = asyncio.Queue()
        for index, url in enumerate(urls):
            queue.put_nowait((index, url))

        async def worker():
            while True:
                try:
                    index, url = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return
                results[index] = await self.fetch_one(url)

        worker_count = min(self.config.concurrency, len(urls))
        logger.info(
            f"[ImageFetcher] Fetching {len(urls)} images with {worker_count} workers"
        )
        await asyncio.gather(*(worker() for _ in range(worker_count)))

        success_count = sum(1 for r in results if r is not None)
        logger.info(f"[ImageFetcher] Batch complete: {success_count}/{len(urls)} success")

        return results


async def fetch_images(
    urls: Sequence[str],
    concurrency: int = DEFAULT_CONCURRENCY,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    http_client: Optional[httpx.AsyncClient] = None,
) -> List[Optional[str]]:
    """Fetch a batch of images with a short-lived fetcher."""
    config = ImageFetchConfig(concurrency=concurrency, timeout_ms=timeout_ms)
    fetcher = ImageFetcher(config, http_client=http_client)
    try:
        return await fetcher.fetch_all(urls)
    finally:
        await fetcher.close()
