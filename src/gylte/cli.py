"""Command-line front end.

Each subcommand opens the store, waits for the index to load, runs one
backend operation and prints the result as JSON on stdout. Failures print a
JSON error envelope on stdout and exit with status 1; logs go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import BaseModel, ValidationError

from gylte import __version__
from gylte.app import open_app
from gylte.config import Settings
from gylte.errors import ErrorCode, GylteError
from gylte.importer import import_fixture
from gylte.logging_config import setup_logging

if TYPE_CHECKING:
    from gylte.app import GlyphApp

log = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gylte", description="Search icon font glyphs by name and copy them."
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--db", help="Path to the glyph database (overrides config)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_import = sub.add_parser("import", help="Populate the database from a JSON fixture")
    p_import.add_argument("fixture", type=Path)

    p_search = sub.add_parser("search", help="Fuzzy-search glyph names")
    p_search.add_argument("query", nargs="?", default="")
    p_search.add_argument("--category", default="")
    p_search.add_argument("--limit", type=int, default=0)
    p_search.add_argument("--offset", type=int, default=0)
    p_search.add_argument(
        "--copy", action="store_true", help="Copy the top result's glyph to the clipboard"
    )
    p_search.add_argument(
        "--server-side",
        action="store_true",
        help="Filter by plain substring in SQLite instead of fuzzy ranking",
    )

    sub.add_parser("categories", help="List categories with glyph counts")

    p_fav = sub.add_parser("favorite", help="Toggle a glyph's favorite flag")
    p_fav.add_argument("glyph_id", type=int)

    sub.add_parser("favorites", help="List favorite glyphs")

    p_copy = sub.add_parser("copy", help="Copy a glyph to the clipboard")
    p_copy.add_argument("glyph_id", type=int)

    sub.add_parser("stats", help="Show database and index statistics")
    return parser


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_dump(v) for v in value]
    return value


async def _run_command(app: GlyphApp, args: argparse.Namespace) -> Any:
    match args.command:
        case "search" if args.server_side:
            matches = await app.search_store(args.query)
            if args.copy and matches:
                copied = app.copy_to_clipboard(matches[0].glyph.symbol)
                return {"glyphs": _dump(matches), "copied": copied}
            return matches
        case "search":
            result = await app.get_glyphs(args.query, args.category, args.limit, args.offset)
            if args.copy and result.glyphs:
                copied = app.copy_to_clipboard(result.glyphs[0].glyph.symbol)
                return {**_dump(result), "copied": copied}
            return result
        case "categories":
            await app.wait_until_ready()
            return app.get_categories()
        case "favorite":
            return {"glyph_id": args.glyph_id, "favorite": await app.toggle_favorite(args.glyph_id)}
        case "favorites":
            return await app.get_favorites()
        case "copy":
            return {"glyph_id": args.glyph_id, "copied": await app.copy_glyph(args.glyph_id)}
        case "stats":
            await app.wait_until_ready()
            stats = app.get_stats().model_dump()
            stats["last_updated"] = await app.store.get_metadata("last_updated")
            stats["top_categories"] = dict(await app.store.top_categories())
            return stats
    raise GylteError(ErrorCode.INVALID_INPUT, f"Unknown command: {args.command}")


async def _main(settings: Settings, args: argparse.Namespace) -> Any:
    async with open_app(settings) as app:
        if args.command == "import":
            await app.wait_until_ready()
            summary = await import_fixture(app.store, args.fixture)
            await app.reload()
            return summary
        return await _run_command(app, args)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        overrides: dict[str, Any] = {"store": {"db_path": args.db}} if args.db else {}
        settings = Settings(**overrides)
    except ValidationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    setup_logging(settings.logging)
    # Searches on the CLI are one-shot; give the initial load time to finish
    settings.search.ready_timeout = max(settings.search.ready_timeout, 30.0)

    try:
        output = asyncio.run(_main(settings, args))
    except GylteError as exc:
        log.warning("command_failed", command=args.command, code=exc.code.value)
        print(json.dumps(exc.to_dict(), ensure_ascii=False))
        return 1

    print(json.dumps(_dump(output), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
