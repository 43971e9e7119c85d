"""Asset application class.

Binds one asset source at construction time (embedded bundle or external
directory) and serves it over ASGI. Middleware can be added during setup;
the pipeline is frozen when the first request or lifespan event arrives.
"""

import logging
import threading
from collections.abc import Sequence
from pathlib import Path

from spa_assets._internal.asgi import Receive, Scope, Send
from spa_assets.assets import DirectoryAssets, EmbeddedBundle
from spa_assets.config import AssetConfig
from spa_assets.errors import ConfigurationError
from spa_assets.middleware.cache_control import CacheControl
from spa_assets.middleware.protocol import Middleware, Next
from spa_assets.server.handler import AssetHandler, build_pipeline, handle_request

logger = logging.getLogger("spa_assets.server")


class AssetApp:
    """ASGI application serving a single-page app's static assets.

    Build one with ``create_asset_app()`` or ``AssetApp.from_config()``::

        app = create_asset_app("./ui/build", build_commit="3f2a9c1")

    Thread safety:
        The source and handler are immutable. The freeze transition uses a
        Lock + double-check so exactly one thread composes the pipeline.
    """

    __slots__ = ("_freeze_lock", "_middleware_list", "_pipeline", "config", "handler")

    def __init__(
        self,
        handler: AssetHandler,
        *,
        middleware: Sequence[Middleware] = (),
        config: AssetConfig | None = None,
    ) -> None:
        self.handler = handler
        self.config: AssetConfig = config or AssetConfig()
        self._middleware_list: list[Middleware] = list(middleware)
        self._pipeline: Next | None = None
        self._freeze_lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        config: AssetConfig,
        *,
        bundle: EmbeddedBundle | None = None,
    ) -> "AssetApp":
        """Build an app from *config*.

        A non-empty ``config.assets_path`` serves that directory from its
        root. Otherwise the embedded bundle (*bundle*, or the one shipped in
        the package) is served from ``config.embed_prefix``.

        Raises:
            ConfigurationError: If ``assets_path`` is not a directory.
        """
        if config.assets_path:
            directory = DirectoryAssets(Path(config.assets_path))
            logger.info("Serving assets from %s", directory.root)
            handler = AssetHandler(
                directory,
                "",
                build_commit=config.build_commit,
                default_file=config.default_file,
            )
        else:
            embedded = bundle if bundle is not None else EmbeddedBundle.from_package(root=config.embed_prefix)
            logger.info("Serving embedded asset bundle (%d files)", len(embedded))
            handler = AssetHandler(
                embedded,
                config.embed_prefix,
                build_commit=config.build_commit,
                default_file=config.default_file,
            )
        return cls(handler, middleware=[CacheControl(config.cache_control)], config=config)

    def add_middleware(self, middleware: Middleware) -> None:
        """Add middleware inside the ones already registered."""
        if self._pipeline is not None:
            msg = "Cannot add middleware after the app has started serving."
            raise ConfigurationError(msg)
        self._middleware_list.append(middleware)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        await handle_request(scope, receive, send, pipeline=self._ensure_frozen())

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol; freezes the pipeline at startup."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    def _ensure_frozen(self) -> Next:
        if self._pipeline is not None:
            return self._pipeline
        with self._freeze_lock:
            if self._pipeline is None:
                self._pipeline = build_pipeline(self.handler, tuple(self._middleware_list))
            return self._pipeline


def create_asset_app(
    assets_path: str = "",
    *,
    build_commit: str = "",
    bundle: EmbeddedBundle | None = None,
) -> AssetApp:
    """Return an app serving *assets_path*, or the embedded bundle if empty.

    Every response carries ``Cache-Control: public, max-age=3600``.
    """
    config = AssetConfig(assets_path=assets_path, build_commit=build_commit)
    return AssetApp.from_config(config, bundle=bundle)
