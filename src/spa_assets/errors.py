"""spa-assets exception hierarchy.

Shared across the resolver, responder, handler and app so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class AssetError(Exception):
    """Base for all spa-assets errors."""


class ConfigurationError(AssetError):
    """Raised when configuration is invalid.

    Only ever raised while building the app, never per request.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(AssetError):
    """An error that maps directly to an HTTP status code.

    Raised by the resolver or responder. The request boundary catches these
    and turns them into plain-text responses.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class AssetNotFound(HTTPError):  # noqa: N818
    """204 — neither the requested asset nor the index document exists.

    A build without a UI bundle lands here, so it answers with an empty
    response instead of an error page.
    """

    def __init__(self, detail: str = "asset bundle not present") -> None:
        super().__init__(status=204, detail=detail)


class StatFailure(HTTPError):
    """403 — the opened asset could not report its metadata."""

    def __init__(self, detail: str) -> None:
        super().__init__(status=403, detail=detail)


class NonSeekableContent(HTTPError):
    """500 — the asset stream cannot seek, so it cannot be served."""

    def __init__(self, detail: str = "asset content is not seekable") -> None:
        super().__init__(status=500, detail=detail)
