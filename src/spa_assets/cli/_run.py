"""``spa-assets run`` — build the app from config and serve it.

Environment variables (``SPA_ASSETS_*``) give the base config; command-line
flags override them.
"""

import argparse
import dataclasses
import sys

from spa_assets.app import AssetApp
from spa_assets.config import AssetConfig
from spa_assets.errors import ConfigurationError


def build_config(args: argparse.Namespace) -> AssetConfig:
    """Merge CLI flags over ``AssetConfig.from_env()``."""
    config = AssetConfig.from_env()
    overrides = {
        field: value
        for field, value in (
            ("assets_path", args.assets_path),
            ("build_commit", args.build_commit),
            ("host", args.host),
            ("port", args.port),
        )
        if value is not None
    }
    return dataclasses.replace(config, **overrides) if overrides else config


def run_command(args: argparse.Namespace) -> None:
    """Start the asset server, exiting with status 1 on bad configuration."""
    try:
        config = build_config(args)
        app = AssetApp.from_config(config)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    from spa_assets.server.run import run_server

    run_server(app, config.host, config.port)
