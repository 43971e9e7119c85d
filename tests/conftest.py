"""Shared fixtures: the same small UI bundle as a directory and embedded."""

import pytest

from spa_assets.assets import DirectoryAssets, EmbeddedBundle

BUNDLE_FILES: dict[str, bytes] = {
    "index.html": b"A",
    "app.js": b"B",
    "css/main.css": b"h1 { font-size: 2em; }",
    "img/logo.png": b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR",
    "robots.txt": b"User-agent: *\n",
    "data/blob": b"\x00\x01\x02\x03binary",
    "readme": b"plain words, no extension\n",
}


@pytest.fixture
def assets_dir(tmp_path):
    """Directory on disk holding the bundle, plus a secret outside it."""
    root = tmp_path / "build"
    for name, data in BUNDLE_FILES.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    (tmp_path / "secret.txt").write_text("do not serve")
    return root


@pytest.fixture
def directory_source(assets_dir) -> DirectoryAssets:
    return DirectoryAssets(assets_dir)


@pytest.fixture
def embedded_bundle() -> EmbeddedBundle:
    """The bundle as it looks when shipped inside the package."""
    return EmbeddedBundle.from_mapping({f"build/{name}": data for name, data in BUNDLE_FILES.items()})


@pytest.fixture
def empty_bundle() -> EmbeddedBundle:
    return EmbeddedBundle.from_mapping({})


@pytest.fixture
def bundle_files() -> dict[str, bytes]:
    return BUNDLE_FILES
