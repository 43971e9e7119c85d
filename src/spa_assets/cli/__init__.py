"""spa-assets CLI — serve a UI bundle.

Entry point registered as ``spa-assets`` in ``pyproject.toml``::

    [project.scripts]
    spa-assets = "spa_assets.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``spa-assets`` command."""
    parser = argparse.ArgumentParser(
        prog="spa-assets",
        description="spa-assets — static asset server for single-page apps.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- spa-assets run ---------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Serve the asset bundle")
    run_parser.add_argument(
        "--assets-path",
        default=None,
        help="Serve this directory instead of the embedded bundle",
    )
    run_parser.add_argument(
        "--build-commit",
        default=None,
        help="Build commit identifier folded into ETags",
    )
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from spa_assets.cli._run import run_command

        run_command(args)
