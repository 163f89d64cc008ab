"""
Command-line interface for Bookmark Cosmos.

Browse, search and categorize browser bookmarks from the terminal, with
optional AI-assisted categorization through Gemini.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from bookmark_cosmos.config.pydantic_config import ConfigurationManager
from bookmark_cosmos.core.bookmark_session import BookmarkSession
from bookmark_cosmos.core.data_models import ALL_CATEGORIES, Bookmark
from bookmark_cosmos.core.hosts import HostError
from bookmark_cosmos.utils.logging_setup import setup_logging

logger = logging.getLogger(__name__)


class CLIInterface:
    """Command line interface over a bookmark session."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create argument parser."""
        parser = argparse.ArgumentParser(
            prog="bookmark-cosmos",
            description="Browse, search and categorize your bookmarks",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  bookmark-cosmos list
  bookmark-cosmos list --query git --category Development
  bookmark-cosmos --host chrome categories
  bookmark-cosmos --host chrome --bookmarks-file ~/Bookmarks organize
  bookmark-cosmos --host chrome move 42 17
  bookmark-cosmos --host chrome mkdir "Reading List"
  bookmark-cosmos open 42

Configuration:
  Settings are read from user_config.toml (or --config). The Gemini API key
  may also be given through the GEMINI_API_KEY or API_KEY environment variable.
  Without --host chrome, a built-in preview data set is used.
            """,
        )

        parser.add_argument(
            "--version", "-V", action="version", version="%(prog)s 1.0.0"
        )
        parser.add_argument(
            "--config",
            "-c",
            help="Configuration file path (TOML or JSON format)",
        )
        parser.add_argument(
            "--host",
            choices=["mock", "chrome"],
            help="Bookmark host: built-in preview data or a Chrome profile file",
        )
        parser.add_argument(
            "--bookmarks-file",
            help="Chrome profile Bookmarks file (default: the default Chrome profile)",
        )
        parser.add_argument(
            "--batch-size",
            "-b",
            type=int,
            help="Maximum bookmarks sent per classification request",
        )
        parser.add_argument(
            "--verbose",
            "-v",
            action="store_true",
            help="Enable verbose logging",
        )
        parser.add_argument("--log-file", help="Also write logs to this file")

        subparsers = parser.add_subparsers(dest="command", required=True)

        list_parser = subparsers.add_parser("list", help="List bookmarks")
        list_parser.add_argument("--query", "-q", default="", help="Free-text search")
        list_parser.add_argument(
            "--category",
            default=ALL_CATEGORIES,
            help=f"Only show this category (default: {ALL_CATEGORIES})",
        )

        subparsers.add_parser("categories", help="Show categories by popularity")
        subparsers.add_parser("folders", help="List folders")
        subparsers.add_parser(
            "organize", help="Auto-organize categories with AI and show the result"
        )

        delete_parser = subparsers.add_parser("delete", help="Delete a bookmark")
        delete_parser.add_argument("bookmark_id")

        move_parser = subparsers.add_parser("move", help="Move a bookmark to a folder")
        move_parser.add_argument("bookmark_id")
        move_parser.add_argument("folder_id")

        mkdir_parser = subparsers.add_parser("mkdir", help="Create a folder")
        mkdir_parser.add_argument("title")

        open_parser = subparsers.add_parser(
            "open", help="Open a bookmark in the default browser"
        )
        open_parser.add_argument("bookmark_id")

        return parser

    def parse_args(self, args=None) -> argparse.Namespace:
        """Parse command line arguments."""
        return self.parser.parse_args(args)

    def build_session(self, args: argparse.Namespace) -> BookmarkSession:
        """
        Load configuration, apply CLI overrides and build the session.

        Raises:
            ValueError: If the configuration is invalid
        """
        config_path = Path(args.config) if args.config else None
        manager = ConfigurationManager(config_path)
        manager.update_from_cli_args(
            {
                "host": args.host,
                "bookmarks_file": args.bookmarks_file,
                "batch_size": args.batch_size,
            }
        )
        return BookmarkSession.from_config(manager.config)

    async def run_command(self, session: BookmarkSession, args: argparse.Namespace) -> int:
        """Load the session and run one sub-command."""
        await session.load()

        if args.command == "list":
            print(session.status_line)
            self._print_bookmarks(session, session.filter(args.query, args.category))
        elif args.command == "categories":
            print(session.status_line)
            self._print_categories(session)
        elif args.command == "folders":
            for folder in session.folders:
                print(f"{folder.id:>8}  {folder.title}")
        elif args.command == "organize":
            if session.classifier is None or not session.classifier.is_available:
                print(
                    "Please configure your Gemini API key to use this feature.",
                    file=sys.stderr,
                )
                return 1
            classification = await session.organize()
            print(f"Assigned categories to {len(classification)} bookmarks")
            self._print_usage(session.classifier.last_usage)
            self._print_categories(session)
        elif args.command == "delete":
            if not session.delete(args.bookmark_id):
                print(f"No bookmark with id {args.bookmark_id}")
        elif args.command == "move":
            if not session.move(args.bookmark_id, args.folder_id):
                print(f"No bookmark with id {args.bookmark_id}")
        elif args.command == "mkdir":
            folder = session.create_folder(args.title)
            if folder is None:
                print("Folder title must not be blank", file=sys.stderr)
                return 1
        elif args.command == "open":
            bookmark = await session.open(args.bookmark_id)
            if bookmark is None:
                print(f"No bookmark with id {args.bookmark_id}")
            else:
                print(f"Opening {bookmark.url}")

        failures = await session.drain()
        for failure in failures:
            print(
                f"Warning: host {failure.operation} of {failure.target_id} failed: "
                f"{failure.error}",
                file=sys.stderr,
            )

        if args.command == "mkdir" and not failures:
            print(f"Created folder {folder.title!r} ({folder.id})")

        return 1 if failures else 0

    def _print_bookmarks(self, session: BookmarkSession, bookmarks: List[Bookmark]) -> None:
        if not bookmarks:
            print("No bookmarks found")
            return
        for bookmark in bookmarks:
            print(
                f"{bookmark.id:>8}  [{bookmark.category}] "
                f"{bookmark.get_effective_title()}  <{bookmark.url}>"
            )

    def _print_usage(self, usage: dict) -> None:
        if "total_input_tokens" not in usage:
            return
        print(
            f"Token usage: {usage['total_input_tokens']} input / "
            f"{usage.get('total_output_tokens', 0)} output tokens"
        )

    def _print_categories(self, session: BookmarkSession) -> None:
        for category in session.categories():
            print(f"{category.count:>6}  {category.name}")

    def run(self, args=None) -> int:
        """
        Main entry point for CLI execution.

        Args:
            args: Command line arguments (for testing)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)
        setup_logging(verbose=parsed_args.verbose, log_file=parsed_args.log_file)

        try:
            session = self.build_session(parsed_args)
        except (ValueError, FileNotFoundError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        try:
            return asyncio.run(self.run_command(session, parsed_args))
        except HostError as e:
            logger.error(f"Host error: {e}")
            print(f"Error: {e}", file=sys.stderr)
            return 1
        except KeyboardInterrupt:
            print("\nInterrupted", file=sys.stderr)
            return 130


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    cli = CLIInterface()
    return cli.run(args)


if __name__ == "__main__":
    sys.exit(main())
