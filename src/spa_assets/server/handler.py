"""ASGI handler — translates ASGI scope/messages to request/response types.

The only component that touches raw ASGI for HTTP. Converts the scope to a
Request, runs it through the middleware chain around ``AssetHandler``, and
sends the Response back through ASGI send().
"""

from collections.abc import Awaitable, Callable, Sequence

import anyio

from spa_assets._internal.asgi import Receive, Scope, Send
from spa_assets.assets import AssetSource
from spa_assets.errors import HTTPError
from spa_assets.http.request import Request
from spa_assets.http.response import Response
from spa_assets.middleware.protocol import Middleware, Next
from spa_assets.resolver import DEFAULT_FILE, resolve
from spa_assets.server.errors import handle_http_error, handle_internal_error
from spa_assets.server.responder import respond
from spa_assets.server.sender import send_response


class AssetHandler:
    """Serve one request from an asset source.

    This is the request boundary: every failure is turned into a response
    here, so middleware always receives one.

    Thread safety:
        Holds only immutable state. File work for each request runs in an
        anyio worker thread; the handle is opened and closed inside that
        one call.
    """

    __slots__ = ("build_commit", "default_file", "prefix", "source")

    def __init__(
        self,
        source: AssetSource,
        prefix: str = "",
        *,
        build_commit: str = "",
        default_file: str = DEFAULT_FILE,
    ) -> None:
        self.source = source
        self.prefix = prefix
        self.build_commit = build_commit
        self.default_file = default_file

    def serve(self, request: Request) -> Response:
        """Resolve and respond synchronously (blocking I/O)."""
        asset = resolve(self.source, self.prefix, request.path, default_file=self.default_file)
        return respond(request, asset, self.build_commit)

    async def __call__(self, request: Request) -> Response:
        try:
            return await anyio.to_thread.run_sync(self.serve, request)
        except HTTPError as exc:
            return handle_http_error(exc, request)
        except Exception as exc:
            return handle_internal_error(exc, request)


def build_pipeline(
    handler: Callable[[Request], Awaitable[Response]],
    middleware: Sequence[Middleware],
) -> Next:
    """Wrap *handler* in *middleware*; the first entry runs outermost."""
    pipeline: Next = handler
    for mw in reversed(middleware):
        outer = pipeline

        async def make_next(req: Request, _mw: Middleware = mw, _next: Next = outer) -> Response:
            return await _mw(req, _next)

        pipeline = make_next
    return pipeline


async def handle_request(scope: Scope, receive: Receive, send: Send, *, pipeline: Next) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope)
    response = await pipeline(request)
    await send_response(response, send, head=request.is_head)
