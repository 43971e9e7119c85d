"""Error responses for asset requests.

Maps HTTPError exceptions and unexpected failures to plain-text
Response objects. Nothing propagates past the request boundary.
"""

import logging
from http import HTTPStatus

from spa_assets.errors import HTTPError
from spa_assets.http.request import Request
from spa_assets.http.response import Response

logger = logging.getLogger("spa_assets.server")

PLAIN_TEXT = "text/plain; charset=utf-8"


def error_response(
    status: int,
    detail: str,
    *,
    headers: tuple[tuple[str, str], ...] = (),
) -> Response:
    """Plain-text error body with sniffing disabled."""
    return Response(
        body=f"{detail}\n",
        status=status,
        content_type=PLAIN_TEXT,
        headers=(*headers, ("X-Content-Type-Options", "nosniff")),
    )


def handle_http_error(exc: HTTPError, request: Request) -> Response:
    """Map an HTTPError raised while serving an asset to a Response."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    # Only the raw stat error is worth showing; other details stay in the log.
    detail = exc.detail if exc.status == 403 else _reason(exc.status)
    return error_response(exc.status, detail, headers=exc.headers)


def handle_internal_error(exc: Exception, request: Request) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path)
    return error_response(500, _reason(500))


def _reason(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return f"Error {status}"
