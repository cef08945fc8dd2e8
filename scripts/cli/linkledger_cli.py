#!/usr/bin/env python3
"""
Command-line interface for the link ledger.

Talks to the database directly, without the HTTP server.

Usage:
    python linkledger_cli.py shorten <url> [--code CODE]
    python linkledger_cli.py info <code>
    python linkledger_cli.py list [--limit N]
    python linkledger_cli.py delete <code>
    python linkledger_cli.py stats
    python linkledger_cli.py health
"""

import argparse
import asyncio
import json
import sys
import os
from typing import Optional

# Add repository root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from linkledger.database import create_ledger
from linkledger.errors import LinkLedgerError, NotFound
from linkledger.service import LinkService
from linkledger.common.logging_config import setup_logging


DEFAULT_DATABASE_URL = "sqlite:///./data/links.sqlite3"


class LinkLedgerCLI:
    """Command-line interface for the link ledger."""

    def __init__(self, db_url: str, verbose: bool = False):
        self.db_url = db_url
        self.verbose = verbose
        self.logger = setup_logging(level="DEBUG" if verbose else "ERROR")
        self.service = None

    async def initialize(self):
        """Open the ledger and make sure the schema exists."""
        ledger = create_ledger(self.db_url, logger=self.logger)
        self.service = LinkService(ledger=ledger, logger=self.logger)
        await ledger.ensure_schema()

    async def cleanup(self):
        if self.service:
            await self.service.close()

    def _ok(self, payload: dict) -> int:
        print(json.dumps({"success": True, **payload}, indent=2))
        return 0

    def _fail(self, error: str) -> int:
        print(json.dumps({"success": False, "error": error}, indent=2), file=sys.stderr)
        return 1

    async def shorten(self, url: str, code: Optional[str] = None) -> int:
        try:
            link = await self.service.create_link(url, code)
        except LinkLedgerError as e:
            return self._fail(str(e))
        return self._ok({"link": link.to_dict()})

    async def info(self, code: str) -> int:
        try:
            link = await self.service.get_link(code)
        except NotFound as e:
            return self._fail(str(e))
        return self._ok({"link": link.to_dict()})

    async def list_links(self, limit: Optional[int] = None) -> int:
        links = await self.service.list_links(limit)
        return self._ok({"count": len(links), "links": [link.to_dict() for link in links]})

    async def delete(self, code: str) -> int:
        if not await self.service.delete_link(code):
            return self._fail(f"Code '{code}' not found")
        return self._ok({"deleted": code})

    async def stats(self) -> int:
        return self._ok({"statistics": await self.service.get_statistics()})

    async def health(self) -> int:
        health_status = await self.service.health_check()
        print(json.dumps({"success": health_status["overall"], "health": health_status}, indent=2))
        return 0 if health_status["overall"] else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Link Ledger CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL with a generated code
  %(prog)s shorten https://example.com/long/url

  # Shorten with a custom code
  %(prog)s shorten https://example.com/long/url --code mylink1

  # Show a link and its click count
  %(prog)s info mylink1

  # List the ten newest links
  %(prog)s list --limit 10
        """
    )

    parser.add_argument(
        "--db-url",
        default=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        help=f"Database URL (default: from DATABASE_URL env or {DEFAULT_DATABASE_URL})"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Create a short link")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--code", help="Custom code (6-8 letters or digits)")

    info_parser = subparsers.add_parser("info", help="Show a link")
    info_parser.add_argument("code", help="Code to look up")

    list_parser = subparsers.add_parser("list", help="List links, newest first")
    list_parser.add_argument("--limit", type=int, default=None, help="Maximum number to return")

    delete_parser = subparsers.add_parser("delete", help="Delete a link")
    delete_parser.add_argument("code", help="Code to delete")

    subparsers.add_parser("stats", help="Show totals")
    subparsers.add_parser("health", help="Check database health")

    return parser


async def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    cli = LinkLedgerCLI(db_url=args.db_url, verbose=args.verbose)

    try:
        await cli.initialize()

        if args.command == "shorten":
            return await cli.shorten(args.url, args.code)
        elif args.command == "info":
            return await cli.info(args.code)
        elif args.command == "list":
            return await cli.list_links(args.limit)
        elif args.command == "delete":
            return await cli.delete(args.code)
        elif args.command == "stats":
            return await cli.stats()
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1

    except LinkLedgerError as e:
        return cli._fail(str(e))

    finally:
        await cli.cleanup()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
