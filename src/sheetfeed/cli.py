"""Command-line interface for sheetfeed."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from .config import Settings, settings as default_settings
from .feeds import ConfigError, GoogleCredentialsAuth, SheetFeedError, Transport
from .sheets import Cell, Spreadsheet, Worksheet


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="sheetfeed - read Google Spreadsheets list and cells feeds"
    )
    parser.add_argument(
        "--private",
        action="store_true",
        help="Use the saved Google token and read private feeds",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    worksheets_parser = subparsers.add_parser("worksheets", help="List worksheets")
    worksheets_parser.add_argument("key", help="Spreadsheet key")

    rows_parser = subparsers.add_parser("rows", help="Print every row as JSON")
    rows_parser.add_argument("key", help="Spreadsheet key")
    rows_parser.add_argument("worksheet", help="Worksheet id or 1-based index")

    cells_parser = subparsers.add_parser("cells", help="Print every cell as JSON")
    cells_parser.add_argument("key", help="Spreadsheet key")
    cells_parser.add_argument("worksheet", help="Worksheet id or 1-based index")

    map_parser = subparsers.add_parser(
        "map", help="Replace R<row>C<col> tokens in a JSON template with cells"
    )
    map_parser.add_argument("key", help="Spreadsheet key")
    map_parser.add_argument("worksheet", help="Worksheet id or 1-based index")
    map_parser.add_argument("template", type=Path, help="Path to a JSON template file")
    map_parser.add_argument(
        "--values", action="store_true", help="Substitute cell values instead of whole cells"
    )

    subparsers.add_parser("auth", help="Authenticate with Google and save a token")
    return parser


def main(
    argv: Optional[list[str]] = None,
    config: Optional[Settings] = None,
    transport: Optional[Transport] = None,
):
    """Main entry point for the CLI."""
    config = config or default_settings
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose or config.debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "auth":
        run_auth(config)
        return

    try:
        asyncio.run(run_command(args, config, transport))
    except SheetFeedError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


async def run_command(
    args: argparse.Namespace,
    config: Settings,
    transport: Optional[Transport] = None,
) -> None:
    auth = GoogleCredentialsAuth.from_token_file(config.google_token_path) if args.private else None

    async with Spreadsheet(
        args.key, auth=auth, transport=transport, config=config
    ) as spreadsheet:
        if args.command == "worksheets":
            for worksheet in await spreadsheet.discover_worksheets():
                print(f"{worksheet.index}\t{worksheet.id}\t{worksheet.title}")
            return

        worksheet = await spreadsheet.get_worksheet(_worksheet_ref(args.worksheet))

        if args.command == "rows":
            for row, meta in await worksheet.each_row():
                print(json.dumps({"id": meta.id, "index": meta.index, "row": row.as_dict()}))
        elif args.command == "cells":
            for cell, meta in await worksheet.each_cell():
                print(json.dumps({"id": meta.id, "index": meta.index, **cell.model_dump()}))
        elif args.command == "map":
            print(json.dumps(await map_template(worksheet, args.template, args.values), indent=2))


async def map_template(worksheet: Worksheet, template_path: Path, values_only: bool) -> Any:
    """Load a JSON template and resolve its cell tokens."""
    try:
        with open(template_path) as f:
            template = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigError(f"Cannot read template {template_path}: {e}") from e

    if values_only:
        return await worksheet.map_cells(template, lambda cell: cell.value)
    return await worksheet.map_cells(template, _cell_to_json)


def _cell_to_json(cell: Cell) -> dict:
    return cell.model_dump()


def _worksheet_ref(value: str):
    """Treat an all-digit reference as a 1-based index, anything else as an id."""
    return int(value) if value.isdigit() else value


def run_auth(config: Settings):
    """Run the Google installed-app OAuth flow and save the token."""
    from google_auth_oauthlib.flow import InstalledAppFlow

    from .feeds.auth import SCOPES

    print("Authenticating with Google...")
    if not config.google_credentials_path.exists():
        print(
            f"Google credentials file not found at {config.google_credentials_path}. "
            "Please download it from Google Cloud Console."
        )
        sys.exit(1)

    try:
        flow = InstalledAppFlow.from_client_secrets_file(
            str(config.google_credentials_path), SCOPES
        )
        creds = flow.run_local_server(port=0)
    except Exception as e:
        print(f"Authentication failed: {e}")
        sys.exit(1)

    config.google_token_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config.google_token_path, "w") as token:
        token.write(creds.to_json())
    print(f"Token saved to {config.google_token_path}.")


if __name__ == "__main__":
    main()
