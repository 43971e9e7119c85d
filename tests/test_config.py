"""Tests for spa_assets.config — AssetConfig frozen dataclass."""

import pytest

from spa_assets.config import AssetConfig
from spa_assets.errors import ConfigurationError


class TestAssetConfig:
    def test_defaults(self) -> None:
        cfg = AssetConfig()

        assert cfg.assets_path == ""
        assert cfg.build_commit == ""
        assert cfg.cache_control == "public, max-age=3600"
        assert cfg.default_file == "index.html"
        assert cfg.embed_prefix == "build"
        assert cfg.host == "127.0.0.1"
        assert cfg.port == 8000

    def test_override(self) -> None:
        cfg = AssetConfig(assets_path="/srv/ui", build_commit="abc", port=3000)

        assert cfg.assets_path == "/srv/ui"
        assert cfg.build_commit == "abc"
        assert cfg.port == 3000

    def test_frozen(self) -> None:
        cfg = AssetConfig()

        with pytest.raises(AttributeError):
            cfg.port = 1  # type: ignore[misc]

    @pytest.mark.parametrize("default_file", ["", "nested/index.html"])
    def test_default_file_must_be_bare_name(self, default_file: str) -> None:
        with pytest.raises(ConfigurationError, match="default_file"):
            AssetConfig(default_file=default_file)

    def test_port_range(self) -> None:
        with pytest.raises(ConfigurationError, match="port"):
            AssetConfig(port=70000)


class TestFromEnv:
    def test_empty_environment_gives_defaults(self) -> None:
        assert AssetConfig.from_env({}) == AssetConfig()

    def test_reads_prefixed_variables(self) -> None:
        cfg = AssetConfig.from_env(
            {
                "SPA_ASSETS_PATH": "/srv/ui",
                "SPA_ASSETS_BUILD_COMMIT": "3f2a9c1",
                "SPA_ASSETS_HOST": "0.0.0.0",
                "SPA_ASSETS_PORT": "9000",
                "UNRELATED": "x",
            }
        )
        assert cfg == AssetConfig(
            assets_path="/srv/ui", build_commit="3f2a9c1", host="0.0.0.0", port=9000
        )

    def test_bad_port(self) -> None:
        with pytest.raises(ConfigurationError, match="SPA_ASSETS_PORT"):
            AssetConfig.from_env({"SPA_ASSETS_PORT": "eighty"})

    def test_defaults_to_os_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPA_ASSETS_BUILD_COMMIT", "fromenv")
        assert AssetConfig.from_env().build_commit == "fromenv"
