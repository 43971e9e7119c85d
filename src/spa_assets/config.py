"""Asset server configuration.

AssetConfig is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from spa_assets.errors import ConfigurationError

ENV_PREFIX = "SPA_ASSETS_"


@dataclass(frozen=True, slots=True)
class AssetConfig:
    """Asset server configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AssetConfig(assets_path="./ui/build", build_commit="3f2a9c1")

    An empty ``assets_path`` serves the bundle embedded in the package.
    """

    # Source
    assets_path: str = ""
    default_file: str = "index.html"
    embed_prefix: str = "build"

    # Caching
    build_commit: str = ""
    cache_control: str = "public, max-age=3600"

    # Server (``spa-assets run``)
    host: str = "127.0.0.1"
    port: int = 8000

    def __post_init__(self) -> None:
        if not self.default_file or "/" in self.default_file:
            msg = f"default_file must be a bare file name, got {self.default_file!r}"
            raise ConfigurationError(msg)
        if not 0 <= self.port <= 65535:
            msg = f"port must be between 0 and 65535, got {self.port}"
            raise ConfigurationError(msg)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AssetConfig":
        """Build a config from ``SPA_ASSETS_*`` environment variables.

        Recognised: ``SPA_ASSETS_PATH``, ``SPA_ASSETS_BUILD_COMMIT``,
        ``SPA_ASSETS_HOST`` and ``SPA_ASSETS_PORT``. Unset variables keep
        their defaults.

        Raises:
            ConfigurationError: If ``SPA_ASSETS_PORT`` is not an integer.
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}

        if (path := env.get(f"{ENV_PREFIX}PATH")) is not None:
            kwargs["assets_path"] = path
        if (commit := env.get(f"{ENV_PREFIX}BUILD_COMMIT")) is not None:
            kwargs["build_commit"] = commit
        if (host := env.get(f"{ENV_PREFIX}HOST")) is not None:
            kwargs["host"] = host
        if (port := env.get(f"{ENV_PREFIX}PORT")) is not None:
            try:
                kwargs["port"] = int(port)
            except ValueError as exc:
                msg = f"{ENV_PREFIX}PORT must be an integer, got {port!r}"
                raise ConfigurationError(msg) from exc

        return cls(**kwargs)  # type: ignore[arg-type]
