"""Cache-Control middleware.

Adds one fixed ``Cache-Control`` header to every response, whatever its
status. Combined with the weak ETag this lets browsers reuse assets for an
hour and revalidate cheaply afterwards.
"""

from spa_assets.http.request import Request
from spa_assets.http.response import Response
from spa_assets.middleware.protocol import Next

DEFAULT_CACHE_CONTROL = "public, max-age=3600"


class CacheControl:
    """Middleware that sets a default ``Cache-Control`` header.

    Usage::

        app.add_middleware(CacheControl())
        app.add_middleware(CacheControl("no-cache"))
    """

    __slots__ = ("_value",)

    def __init__(self, value: str = DEFAULT_CACHE_CONTROL) -> None:
        self._value = value

    @property
    def value(self) -> str:
        return self._value

    async def __call__(self, request: Request, next: Next) -> Response:
        response = await next(request)
        return response.with_header("Cache-Control", self._value)
