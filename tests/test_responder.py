"""Tests for spa_assets.server.responder — weak ETags and handle release."""

import io

import pytest

from spa_assets.assets import AssetFile, AssetInfo
from spa_assets.errors import NonSeekableContent
from spa_assets.http.headers import Headers
from spa_assets.http.request import Request
from spa_assets.resolver import ResolvedAsset, resolve
from spa_assets.server.responder import respond, weak_etag


class _PipeStream(io.BytesIO):
    def seekable(self) -> bool:
        return False


class _PipeFile(AssetFile):
    __slots__ = ()

    def stat(self) -> AssetInfo:
        return AssetInfo(name="pipe", size=4)


def _get(path: str = "/") -> Request:
    return Request(method="GET", path=path, headers=Headers())


class TestWeakEtag:
    def test_format(self) -> None:
        assert weak_etag(AssetInfo(name="app.js", size=1), "abc123") == 'W/"app.js-1-abc123"'

    def test_empty_commit(self) -> None:
        assert weak_etag(AssetInfo(name="index.html", size=12), "") == 'W/"index.html-12-"'

    def test_non_ascii_name_is_percent_encoded(self) -> None:
        etag = weak_etag(AssetInfo(name="日本.js", size=3), "abc123")
        assert etag == 'W/"%E6%97%A5%E6%9C%AC.js-3-abc123"'
        assert etag.isascii()

    def test_quotes_and_spaces_are_escaped(self) -> None:
        etag = weak_etag(AssetInfo(name='a "b".js', size=1), "rel 1")
        assert etag == 'W/"a%20%22b%22.js-1-rel%201"'

    def test_deterministic(self) -> None:
        info = AssetInfo(name="app.js", size=10)
        assert weak_etag(info, "c1") == weak_etag(AssetInfo(name="app.js", size=10), "c1")

    def test_commit_changes_etag(self) -> None:
        info = AssetInfo(name="app.js", size=10)
        assert weak_etag(info, "c1") != weak_etag(info, "c2")


class TestRespond:
    def test_sets_etag_and_closes(self, embedded_bundle) -> None:
        asset = resolve(embedded_bundle, "build", "/app.js")
        response = respond(_get("/app.js"), asset, "abc123")
        assert response.status == 200
        assert response.body_bytes == b"B"
        assert response.header("ETag") == 'W/"app.js-1-abc123"'
        assert asset.file.closed

    def test_index_is_html(self, embedded_bundle) -> None:
        asset = resolve(embedded_bundle, "build", "/")
        response = respond(_get(), asset, "abc123")
        assert response.content_type == "text/html"
        assert response.header("ETag") == 'W/"index.html-1-abc123"'

    def test_directory_asset_has_last_modified(self, directory_source) -> None:
        asset = resolve(directory_source, "", "/app.js")
        response = respond(_get("/app.js"), asset, "")
        assert response.header("Last-Modified") is not None

    def test_embedded_asset_has_no_last_modified(self, embedded_bundle) -> None:
        asset = resolve(embedded_bundle, "build", "/app.js")
        response = respond(_get("/app.js"), asset, "")
        assert response.header("Last-Modified") is None

    def test_non_seekable_raises_and_closes(self) -> None:
        file = _PipeFile("pipe", _PipeStream(b"data"))
        asset = ResolvedAsset(file=file, info=file.stat(), request_name="pipe")
        with pytest.raises(NonSeekableContent) as exc_info:
            respond(_get("/pipe"), asset, "")
        assert exc_info.value.status == 500
        assert file.closed
