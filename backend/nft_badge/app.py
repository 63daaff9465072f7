"""
FastAPI application

Mounts the badge and cache routers. Served by uvicorn locally and by the
serverless entry point in ``api/index.py``.
"""

from fastapi import FastAPI

from cache import cache_router
from .routes_fastapi import router as badge_router


def create_app() -> FastAPI:
    app = FastAPI(title="NFT Badge", version="0.1.0")
    app.include_router(badge_router)
    app.include_router(cache_router)
    return app


app = create_app()
