"""
NFT Badge Module
NFT 徽章模块

Renders a wallet's NFT holdings as an SVG mosaic for README embedding.

Features:
- OpenSea NFT lookup with cached results
- Bounded-concurrency thumbnail download with per-image timeout
- Base64-inlined images in a fixed 830x115 single-row layout
"""

from .fetcher import ImageFetcher, ImageFetchConfig, fetch_images, rewrite_width
from .svg_generator import generate_nft_svg, render
from .routes_fastapi import router

__all__ = [
    "ImageFetcher",
    "ImageFetchConfig",
    "fetch_images",
    "rewrite_width",
    "generate_nft_svg",
    "render",
    "router",
]
