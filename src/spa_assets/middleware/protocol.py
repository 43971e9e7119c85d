"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(request: Request, next: Next) -> Response: ...

No base class required. The pipeline checks the shape, not the lineage.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol, TypeAlias

from spa_assets.http.request import Request
from spa_assets.http.response import Response

# The next handler in the middleware chain
Next: TypeAlias = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """Protocol for asset-app middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def vary(request: Request, next: Next) -> Response:
            response = await next(request)
            return response.with_header("Vary", "Accept-Encoding")

        # Class middleware
        class Timing:
            async def __call__(self, request: Request, next: Next) -> Response:
                ...
    """

    async def __call__(self, request: Request, next: Next) -> Response: ...
