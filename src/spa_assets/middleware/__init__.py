"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

Built-in middleware:
    CacheControl -- Default Cache-Control header on every response
"""

from spa_assets.middleware.cache_control import CacheControl
from spa_assets.middleware.protocol import Middleware, Next

__all__ = [
    "CacheControl",
    "Middleware",
    "Next",
]
