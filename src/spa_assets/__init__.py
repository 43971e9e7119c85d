"""spa-assets — static asset serving for single-page apps.

Serves a UI bundle over ASGI: real files by path, the index document for
everything else (client-side routing), with weak ETags and a default
Cache-Control header.

Basic usage::

    from spa_assets import create_asset_app

    # Embedded bundle shipped in the package
    app = create_asset_app(build_commit="3f2a9c1")

    # Or a directory on disk
    app = create_asset_app("./ui/build", build_commit="3f2a9c1")

Any ASGI server can mount ``app``; ``spa-assets run`` starts one.
"""

__version__ = "0.1.0"
__all__ = [
    "AssetApp",
    "AssetConfig",
    "AssetError",
    "AssetNotFound",
    "CacheControl",
    "ConfigurationError",
    "DirectoryAssets",
    "EmbeddedBundle",
    "HTTPError",
    "NonSeekableContent",
    "Request",
    "Response",
    "StatFailure",
    "create_asset_app",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import spa_assets`` fast while providing a clean top-level API.
    """
    if name in ("AssetApp", "create_asset_app"):
        from spa_assets import app

        return getattr(app, name)

    if name == "AssetConfig":
        from spa_assets.config import AssetConfig

        return AssetConfig

    if name in ("DirectoryAssets", "EmbeddedBundle"):
        from spa_assets import assets

        return getattr(assets, name)

    if name == "CacheControl":
        from spa_assets.middleware.cache_control import CacheControl

        return CacheControl

    if name == "Request":
        from spa_assets.http.request import Request

        return Request

    if name == "Response":
        from spa_assets.http.response import Response

        return Response

    if name in (
        "AssetError",
        "AssetNotFound",
        "ConfigurationError",
        "HTTPError",
        "NonSeekableContent",
        "StatFailure",
    ):
        from spa_assets import errors

        return getattr(errors, name)

    msg = f"module 'spa_assets' has no attribute {name!r}"
    raise AttributeError(msg)
