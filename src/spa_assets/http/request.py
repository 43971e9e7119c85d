"""Immutable HTTP request.

Asset requests never read a body, so the request is frozen metadata only:
method, path and headers, parsed once from the ASGI scope.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from spa_assets.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request."""

    method: str
    path: str
    headers: Headers
    http_version: str = "1.1"
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None

    @property
    def is_head(self) -> bool:
        """True for HEAD requests (headers only, no body sent)."""
        return self.method == "HEAD"

    @property
    def is_get_or_head(self) -> bool:
        return self.method in ("GET", "HEAD")

    @classmethod
    def from_asgi(cls, scope: dict[str, Any]) -> Request:
        """Create a Request from an ASGI HTTP scope."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
        )
