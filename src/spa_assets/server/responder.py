"""Caching responder: turns a resolved asset into a response.

The ETag is derived from readily available metadata instead of hashing
the content. Asset files only change with a new release (new build
commit) or a different assets path, so collisions are unlikely and a
weak validator is enough.
"""

from urllib.parse import quote

from spa_assets.assets import AssetInfo
from spa_assets.errors import NonSeekableContent
from spa_assets.http.request import Request
from spa_assets.http.response import Response
from spa_assets.resolver import ResolvedAsset
from spa_assets.server.content import serve_content


def weak_etag(info: AssetInfo, build_commit: str) -> str:
    """``W/"<name>-<size>-<commit>"`` for an asset.

    Name and commit are percent-encoded so the validator stays ASCII and
    free of quotes; plain values like ``app.js`` pass through unchanged.
    """
    return f'W/"{quote(info.name, safe="")}-{info.size}-{quote(build_commit, safe="")}"'


def respond(request: Request, asset: ResolvedAsset, build_commit: str) -> Response:
    """Serve *asset* with cache validators, closing it on every exit path.

    Content-Type is inferred from ``asset.request_name`` unless the resolver
    forced one. Embedded assets carry no modification time, so they get no
    Last-Modified header.

    Raises:
        NonSeekableContent: The asset stream cannot seek.
    """
    with asset:
        etag = weak_etag(asset.info, build_commit)
        if not asset.file.seekable():
            raise NonSeekableContent(f"{asset.info.name} is not seekable")
        return serve_content(
            request,
            asset.request_name,
            asset.info.mtime,
            asset.file.stream,
            etag=etag,
            content_type=asset.content_type,
        )
