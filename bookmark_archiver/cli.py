"""
Command-line interface for the bookmark archiver.

    bookmark <url>                  fetch the page once, then save the URL
    bookmark -list                  print saved URLs, sorted
    bookmark -available <url>       ask the Wayback Machine for a snapshot

Every failure propagates up to CLIInterface.run, which prints it with the
program name as prefix and picks the exit status: 0 on success, 1 on any
error, 2 on a malformed command line.
"""

import argparse
import logging
import sys
from pathlib import Path

from bookmark_archiver import __version__
from bookmark_archiver.config.configuration import Configuration
from bookmark_archiver.core.availability import AvailabilityChecker, format_snapshots
from bookmark_archiver.core.bookmarker import Bookmarker
from bookmark_archiver.core.fetcher import PageFetcher
from bookmark_archiver.core.store import ENCODING, ENCODING_ERRORS, BookmarkStore
from bookmark_archiver.utils.error_handler import BookmarkArchiverError, UsageError
from bookmark_archiver.utils.logging_setup import resolve_log_level, setup_logging

PROG = "bookmark"

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2

logger = logging.getLogger(__name__)


class CLIInterface:
    """Argument parsing and dispatch for the bookmark command."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create the argument parser."""
        parser = argparse.ArgumentParser(
            prog=PROG,
            usage="%(prog)s [-list] [-available [-timestamp TS]] [options] [url]",
            description="Save URLs for future reference.",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            allow_abbrev=False,
            epilog="""
Examples:
  bookmark https://example.com/article
  bookmark -list
  bookmark -available https://example.com -timestamp 2015

Bookmarks are kept in $HOME/.bookmark unless -file, the BOOKMARK_FILE
environment variable or the [storage] section of the configuration file
says otherwise.
            """,
        )

        parser.add_argument(
            "-version", "--version", action="version", version=f"%(prog)s {__version__}"
        )
        parser.add_argument(
            "-list", "--list", action="store_true", help="list bookmarks"
        )
        parser.add_argument(
            "-available",
            "--available",
            action="store_true",
            help="check whether the URL is archived in the Wayback Machine",
        )
        parser.add_argument(
            "-timestamp",
            "--timestamp",
            help="with -available, find the snapshot closest to "
            "YYYYMMDDhhmmss (1-14 digits)",
        )
        parser.add_argument(
            "-config",
            "--config",
            type=Path,
            help="configuration file (TOML or JSON)",
        )
        parser.add_argument(
            "-file",
            "--file",
            dest="store_path",
            type=Path,
            help="bookmark file (default: $HOME/.bookmark)",
        )
        parser.add_argument(
            "-v",
            "-verbose",
            "--verbose",
            action="count",
            default=0,
            help="log progress to stderr; repeat for debug output",
        )
        parser.add_argument("urls", nargs="*", metavar="url", help="URL to save")

        return parser

    def parse_args(self, args=None) -> argparse.Namespace:
        """Parse command line arguments."""
        return self.parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> dict:
        """
        Check the shape of the command line and pick a mode.

        Returns:
            Dictionary of validated arguments, including ``mode``

        Raises:
            UsageError: If the flags and positionals do not form a command
        """
        if args.list and args.available:
            raise UsageError("-list and -available are mutually exclusive")
        if args.timestamp is not None and not args.available:
            raise UsageError("-timestamp requires -available")

        if args.list:
            if args.urls:
                raise UsageError()
            mode = "list"
        elif args.available:
            if len(args.urls) != 1:
                raise UsageError()
            mode = "available"
        else:
            if len(args.urls) > 1:
                raise UsageError("too many arguments")
            if not args.urls:
                raise UsageError()
            mode = "add"

        return {
            "mode": mode,
            "url": args.urls[0] if args.urls else None,
            "timestamp": args.timestamp,
            "config_path": args.config,
            "store_path": args.store_path,
            "verbosity": args.verbose,
        }

    def process_arguments(self, validated_args: dict) -> Configuration:
        """
        Load configuration, apply command-line overrides and set up logging.

        Raises:
            ConfigurationError: If configuration cannot be loaded
        """
        config = Configuration(validated_args["config_path"])
        config.update_from_args(validated_args)

        log_settings = config.config.logging
        setup_logging(
            resolve_log_level(log_settings.level, validated_args["verbosity"]),
            log_settings.log_file,
        )
        if config.source:
            logger.debug(f"Configuration loaded from {config.source}")

        return config

    def run_list(self, config: Configuration) -> int:
        """Print every stored URL, sorted, one per line."""
        store = BookmarkStore.load(config.store_path)
        # Stored lines may hold bytes that are not valid UTF-8
        out = sys.stdout.buffer
        for url in Bookmarker(store).list():
            out.write(url.encode(ENCODING, ENCODING_ERRORS) + b"\n")
        out.flush()
        return EXIT_OK

    def run_add(self, config: Configuration, url: str) -> int:
        """Fetch a URL and save it."""
        store = BookmarkStore.load(config.store_path)
        fetcher = PageFetcher(**config.get_fetcher_settings())
        try:
            entry = Bookmarker(store, fetcher).add(url)
        finally:
            fetcher.close()
        logger.info(f"Bookmarked {entry.url} in {config.store_path}")
        return EXIT_OK

    def run_available(self, config: Configuration, url: str, timestamp=None) -> int:
        """Print the closest Wayback snapshot of a URL."""
        checker = AvailabilityChecker(**config.get_availability_settings())
        snapshots = checker.check(url, timestamp)
        print(format_snapshots(snapshots))
        return EXIT_OK

    def run(self, args=None) -> int:
        """Execute CLI interface."""
        parsed_args = self.parse_args(args)

        try:
            validated_args = self.validate_args(parsed_args)
        except UsageError as e:
            if str(e):
                print(str(e), file=sys.stderr)
            self.parser.print_help(sys.stderr)
            return EXIT_USAGE

        try:
            config = self.process_arguments(validated_args)

            mode = validated_args["mode"]
            if mode == "list":
                return self.run_list(config)
            if mode == "available":
                return self.run_available(
                    config, validated_args["url"], validated_args["timestamp"]
                )
            return self.run_add(config, validated_args["url"])

        except BookmarkArchiverError as e:
            print(f"{PROG}: {e}", file=sys.stderr)
            logger.debug("Aborting", exc_info=True)
            return EXIT_ERROR
        except Exception as e:
            print(f"{PROG}: {e}", file=sys.stderr)
            logger.exception("Unexpected error in CLI")
            return EXIT_ERROR


def main(args=None):
    """Main entry point for the CLI."""
    cli = CLIInterface()
    return cli.run(args)


if __name__ == "__main__":
    sys.exit(main())
