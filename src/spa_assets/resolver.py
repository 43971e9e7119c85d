"""Request path to asset resolution with single-page-app fallback.

Any path that does not name a real asset is answered with the index
document, so client-side routes (``/dashboard/42``) load the app shell.
The same routine serves both source types; only ``open`` differs.
"""

import posixpath
from contextlib import ExitStack
from dataclasses import dataclass

from spa_assets.assets import AssetFile, AssetInfo, AssetSource
from spa_assets.errors import AssetNotFound, StatFailure

DEFAULT_FILE = "index.html"

# Forced for the index document: extension lookup is skipped for it.
HTML_CONTENT_TYPE = "text/html"


@dataclass(frozen=True, slots=True)
class ResolvedAsset:
    """An opened asset ready to be served.

    ``request_name`` is the path handed to content-type inference;
    ``content_type`` is set only when inference must not apply.
    """

    file: AssetFile
    info: AssetInfo
    request_name: str
    content_type: str | None = None
    is_fallback: bool = False

    def close(self) -> None:
        self.file.close()

    def __enter__(self) -> "ResolvedAsset":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


def clean_path(request_path: str) -> str:
    """Canonicalize *request_path* relative to the asset root.

    Returns ``"."`` for the root. ``..`` segments cannot climb above the
    root because the path is normalized as an absolute path first.
    """
    name = posixpath.normpath("/" + request_path.lstrip("/"))
    name = name.lstrip("/")
    return name or "."


def resolve(
    source: AssetSource,
    prefix: str,
    request_path: str,
    *,
    default_file: str = DEFAULT_FILE,
) -> ResolvedAsset:
    """Open the asset for *request_path*, falling back to the index document.

    Raises:
        AssetNotFound: Neither the asset nor the index document exists, or
            the asset could not be opened for another reason.
        StatFailure: The opened file could not report its metadata.
    """
    name = clean_path(request_path)
    index_name = posixpath.join(prefix, default_file)
    content_type: str | None = None
    is_fallback = False

    if name == ".":
        name = index_name
        path = index_name
        content_type = HTML_CONTENT_TYPE
        is_fallback = True
    else:
        path = posixpath.join(prefix, name)

    try:
        file = source.open(path)
    except FileNotFoundError:
        try:
            file = source.open(index_name)
        except OSError as exc:
            raise AssetNotFound(str(exc)) from exc
        content_type = HTML_CONTENT_TYPE
        is_fallback = True
    except OSError as exc:
        raise AssetNotFound(str(exc)) from exc

    # The handle is released here unless it is handed to the caller.
    with ExitStack() as stack:
        stack.enter_context(file)
        try:
            info = file.stat()
        except OSError as exc:
            raise StatFailure(str(exc)) from exc
        stack.pop_all()

    return ResolvedAsset(
        file=file,
        info=info,
        request_name=name,
        content_type=content_type,
        is_fallback=is_fallback,
    )
