"""CLI entrypoints for docsite commands."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from .client.loader import ContentLoader, MemoryContainer, MemoryHistory
from .client.sources import IndexContentSource
from .config import ConfigError
from .errors import BuildError
from .logging import configure_logging
from .pipeline import SitePipeline


def _add_logging_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    def default(value: object) -> object:
        return argparse.SUPPRESS if suppress_default else value

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default(False),
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=default(False),
        help="Only report warnings and errors.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=default(None),
        help="Also write debug-level logs to this file.",
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Project directory or .docsite.yml file (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docsite",
        description="Build a static documentation site from a markdown tree.",
    )
    _add_logging_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Render every source document and write routes.json/content.json.",
    )
    _add_logging_options(build_parser, suppress_default=True)
    _add_path_argument(build_parser)
    build_parser.add_argument(
        "--migrate",
        action="store_true",
        help="Standardise configured legacy documents before building.",
    )
    build_parser.add_argument(
        "--clean",
        action="store_true",
        help="Remove HTML pages left over from earlier builds.",
    )

    migrate_parser = subparsers.add_parser(
        "migrate",
        help="Standardise configured legacy documents into their new locations.",
    )
    _add_logging_options(migrate_parser, suppress_default=True)
    _add_path_argument(migrate_parser)

    show_parser = subparsers.add_parser(
        "show",
        help="Print the HTML the site loader would display for a route.",
    )
    _add_logging_options(show_parser, suppress_default=True)
    show_parser.add_argument("route", help="Route id, e.g. core/p2p.")
    _add_path_argument(show_parser)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP build service.",
    )
    _add_logging_options(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for docsite commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose), quiet=bool(args.quiet), log_file=args.log_file
    )

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    try:
        pipeline = SitePipeline.from_path(Path(args.path))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "build":
        try:
            result = pipeline.build(migrate=bool(args.migrate), clean=bool(args.clean))
        except BuildError as exc:
            parser.exit(1, f"docsite build failed: {exc}\n")
        print(f"Built {len(result.items)} routes into {_relativize(result.output_dir)}")
        if result.errors:
            print(f"{len(result.errors)} warnings; run with --verbose for details")
    elif args.command == "migrate":
        created = pipeline.migrate()
        for path in created:
            print(f"Migrated {_relativize(path)}")
        if not created:
            print("No legacy documents to migrate")
    elif args.command == "show":
        index = pipeline.store.load_content_index()
        if not index:
            parser.exit(1, "No content.json found; run `docsite build` first.\n")
        html = asyncio.run(_show(index, args.route, pipeline.config.home_route))
        print(html)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


async def _show(index, route_id: str, home_route: str) -> str:
    container = MemoryContainer()
    loader = ContentLoader(
        IndexContentSource(index), container, MemoryHistory(), home_route=home_route
    )
    await loader.navigate(route_id)
    return container.html


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
