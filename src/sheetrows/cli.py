"""Command-line interface for sheetrows."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import settings


def parse_where(pairs: Optional[list[str]]) -> dict[str, str]:
    """Parse ``key=value`` arguments into a field filter."""
    expected = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected key=value, got {pair!r}")
        expected[key] = value
    return expected


def table_namespace(spreadsheet_id: str, sheet_name: str) -> str:
    """Cache namespace shared by every CLI run against the same sheet."""
    return f"{spreadsheet_id}-{sheet_name}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="sheetrows - read Google Sheets tables as records"
    )
    parser.add_argument(
        "--log-level", default=settings.log_level, help="Logging level (default: %(default)s)"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("auth", help="Authenticate with Google Sheets API")

    for name, help_text in (
        ("headers", "Print the header row of a table"),
        ("rows", "Print the records of a table as JSON"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("spreadsheet_id", help="Spreadsheet ID (from the URL)")
        sub.add_argument("sheet_name", help="Exact sheet (tab) name")
        sub.add_argument(
            "--position",
            "-p",
            default=settings.default_table_position,
            help="Top-left cell of the table as LETTER:NUMBER (default: %(default)s)",
        )
        sub.add_argument(
            "--no-cache", action="store_true", help="Bypass the cache for this call"
        )
        if name == "rows":
            sub.add_argument(
                "--where",
                "-w",
                action="append",
                metavar="KEY=VALUE",
                help="Only print records whose field equals the value (repeatable)",
            )

    clear_parser = subparsers.add_parser("clear-cache", help="Remove the durable cache directory")
    clear_parser.add_argument(
        "--cache-dir", type=Path, default=settings.cache_dir, help="Cache directory (default: %(default)s)"
    )

    return parser


def main(argv: Optional[list[str]] = None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "auth":
        run_auth()
    elif args.command in ("headers", "rows"):
        try:
            where_fields = parse_where(getattr(args, "where", None))
        except ValueError as e:
            parser.error(str(e))
        sys.exit(asyncio.run(run_table_command(args, where_fields)))
    elif args.command == "clear-cache":
        run_clear_cache(args.cache_dir)
    else:
        parser.print_help()
        sys.exit(1)


async def run_table_command(args: argparse.Namespace, where_fields: dict[str, str]) -> int:
    """Run the headers/rows commands against Google Sheets."""
    from .exceptions import SheetRowsError
    from .sheets import GoogleSheetsClient
    from .table import TableManager, where

    manager = TableManager(
        GoogleSheetsClient(settings=settings),
        spreadsheet_id=args.spreadsheet_id,
        sheet_name=args.sheet_name,
        use_cache=False if args.no_cache else None,
        namespace=table_namespace(args.spreadsheet_id, args.sheet_name),
        settings=settings,
    )

    try:
        if args.command == "headers":
            output = await manager.get_headers(args.position)
        else:
            row_filter = where(**where_fields) if where_fields else None
            output = await manager.get_rows(args.position, filter=row_filter)
    except SheetRowsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


def run_auth():
    """Run the Google authentication flow."""
    from .sheets import GoogleSheetsClient

    print("Authenticating with Google Sheets API...")
    try:
        client = GoogleSheetsClient()
        # Accessing the service property triggers auth
        _ = client.service
        print("Authentication successful!")
        print("Token saved. You can now use sheetrows with Google Sheets.")
    except Exception as e:
        print(f"Authentication failed: {e}")
        sys.exit(1)


def run_clear_cache(cache_dir: Path):
    """Remove the durable cache directory."""
    from .cache import clear_all_cache

    if clear_all_cache(cache_dir):
        print(f"Removed cache directory {cache_dir}")
    else:
        print(f"No cache directory at {cache_dir}")


if __name__ == "__main__":
    main()
