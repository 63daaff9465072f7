"""Vercel serverless entrypoint.

Vercel's Python runtime serves the module-level ASGI ``app``.
"""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "backend"))

from nft_badge.app import app  # noqa: E402

__all__ = ["app"]
