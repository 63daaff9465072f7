"""
NFT Mosaic SVG Generator
NFT 拼图 SVG 生成器

Lays out NFT thumbnails in a single fixed-size row (suitable for embedding
in a GitHub README) and produces the SVG document text.
"""

import logging
from typing import Any, List, Mapping, Optional, Sequence

import httpx

from .fetcher import DEFAULT_CONCURRENCY, DEFAULT_TIMEOUT_MS, fetch_images

logger = logging.getLogger(__name__)

# ============================================
# Geometry
# ============================================

CANVAS_WIDTH = 830
CANVAS_HEIGHT = 115
CELL_SIZE = 90
SPACING = 2
MAX_PER_ROW = 9
TITLE_HEIGHT = 20

MAX_COUNT = MAX_PER_ROW  # one row only
DEFAULT_COUNT = 9
TITLE = "NFT Collection"


def effective_count(count: int) -> int:
    """Clamp a requested slot count into [0, MAX_COUNT]."""
    if isinstance(count, bool) or not isinstance(count, int):
        raise TypeError(f"count must be an int, got {type(count).__name__}")
    return max(0, min(count, MAX_COUNT))


def cell_position(index: int) -> tuple[int, int]:
    """Top-left corner of slot ``index``."""
    x = (index % MAX_PER_ROW) * (CELL_SIZE + SPACING) + SPACING
    y = SPACING + TITLE_HEIGHT
    return x, y


def escape_href(value: str) -> str:
    """Escape ``&`` so the attribute value stays well-formed XML."""
    return value.replace("&", "&amp;")


def image_url(item: Any) -> str:
    """Return an NFT record's display image URL, or "" if it has none."""
    if item is None:
        return ""
    if isinstance(item, Mapping):
        url = item.get("display_image_url")
    else:
        url = getattr(item, "display_image_url", None)
    return url or ""


# ============================================
# Rendering
# ============================================

def generate_nft_svg(
    items: Sequence[Any],
    count: int = DEFAULT_COUNT,
    payloads: Optional[Sequence[Optional[str]]] = None,
) -> str:
    """
    Build the mosaic SVG document.

    Args:
        items: NFT records, may be shorter than ``count``; slots past the
            last item are blank
        count: Requested slots, clamped to [0, 9]
        payloads: Data URIs aligned with ``items``; None marks a failed slot

    Returns:
        Complete SVG document. Slots without a payload are left empty.
    """
    count = effective_count(count)
    payloads = payloads or []
    filled = min(count, len(items))

    cells = []
    for i in range(filled):
        payload = payloads[i] if i < len(payloads) else None
        if not payload:
            continue
        x, y = cell_position(i)
        cells.append(
            f'<image x="{x}" y="{y}" width="{CELL_SIZE}" height="{CELL_SIZE}" '
            f'href="{escape_href(payload)}" />'
        )

    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{CANVAS_WIDTH}" '
        f'height="{CANVAS_HEIGHT}" style="background:#fff;">\n'
        f'  <text x="50%" y="15" text-anchor="middle" font-size="16" fill="#333" '
        f'font-weight="bold">{TITLE}</text>\n'
        + "".join(f"  {cell}\n" for cell in cells)
        + "</svg>\n"
    )


async def render(
    items: Sequence[Any],
    count: int = DEFAULT_COUNT,
    concurrency: int = DEFAULT_CONCURRENCY,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    http_client: Optional[httpx.AsyncClient] = None,
) -> str:
    """
    Fetch thumbnails for the first ``count`` items and render the mosaic.

    Individual image failures leave gaps; this never fails because of them.
    """
    count = effective_count(count)
    items = list(items or [])

    urls: List[str] = [
        image_url(items[i]) if i < len(items) else ""
        for i in range(count)
    ]
    payloads = await fetch_images(
        urls,
        concurrency=concurrency,
        timeout_ms=timeout_ms,
        http_client=http_client,
    )

    logger.info(
        f"[NFTBadge] Rendering {count} slots, "
        f"{sum(1 for p in payloads if p)} with images"
    )
    return generate_nft_svg(items, count, payloads)
