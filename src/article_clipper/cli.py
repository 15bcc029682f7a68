"""Command-line interface for article-clipper."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from article_clipper.clients.exceptions import ConfigError
from article_clipper.clipboard import ClipboardError, CommandClipboard
from article_clipper.config import (
    DEFAULT_CONFIG_PATH,
    ClipperConfig,
    load_config,
    save_config,
)
from article_clipper.pipeline.orchestrator import run_clip
from article_clipper.storage import FilesystemStorage

DEFAULT_STORE_DIR = Path(".")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def clip(args: argparse.Namespace) -> int:
    """Execute the clip command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 when the note was stored, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error(e.message)
        return 1

    url = args.url
    if url is None:
        try:
            url = CommandClipboard().read_text()
        except ClipboardError as e:
            logger.error(f"Cannot read URL from clipboard: {e}")
            return 1
    url = url.strip()

    if not url:
        logger.error("No URL given and the clipboard is empty")
        return 1

    store_dir = args.store.resolve()
    if not store_dir.is_dir():
        logger.error(f"Store directory not found: {store_dir}")
        return 1

    try:
        result = asyncio.run(run_clip(url, FilesystemStorage(store_dir), config=config))
    except KeyboardInterrupt:
        logger.warning("Clip cancelled")
        return 1
    except Exception as e:
        logger.error(f"Clip failed: {e}")
        return 1

    if not result.succeeded:
        return 1

    logger.info(f"Clipped: {result.title}")
    logger.info(f"  Note: {store_dir / result.note_path}")
    logger.info(f"  Assets: {len(result.assets)}")
    if result.failed_assets:
        logger.warning(f"  Failed assets: {len(result.failed_assets)}")
        for asset_url in result.failed_assets:
            logger.warning(f"    - {asset_url}")

    return 0


def _parse_value(value: str) -> str | None:
    """Interpret a --set value; pydantic coerces numeric strings."""
    if value.lower() in ("", "null", "none"):
        return None
    return value


def configure(args: argparse.Namespace) -> int:
    """Execute the config command.

    Prints the effective configuration, persisting any --set overrides
    first.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error(e.message)
        return 1

    if args.set:
        data = config.model_dump()
        for item in args.set:
            key, sep, value = item.partition("=")
            if not sep:
                logger.error(f"Expected KEY=VALUE, got: {item}")
                return 1
            data[key.strip()] = _parse_value(value.strip())

        try:
            config = ClipperConfig.model_validate(data)
        except ValidationError as e:
            logger.error(f"Invalid configuration: {e}")
            return 1

        path = save_config(config, args.config)
        logger.info(f"Saved configuration to {path}")

    print(config.model_dump_json(indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        prog="article-clipper",
        description="Clip web articles into a local Markdown store",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    clip_parser = subparsers.add_parser(
        "clip",
        help="Clip a web page into the store",
        description="Fetch a web page, extract its article as Markdown and store it with its images. Reads the URL from the clipboard when none is given.",
    )
    clip_parser.add_argument(
        "url",
        nargs="?",
        default=None,
        help="URL to clip (default: the clipboard contents)",
    )
    clip_parser.add_argument(
        "--store",
        type=Path,
        default=DEFAULT_STORE_DIR,
        help="Root directory of the note store (default: current directory)",
    )
    clip_parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help=f"Configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    clip_parser.set_defaults(func=clip)

    config_parser = subparsers.add_parser(
        "config",
        help="Show or change the configuration",
        description="Print the effective configuration. With --set, validate and persist overrides first.",
    )
    config_parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help=f"Configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    config_parser.add_argument(
        "--set",
        action="append",
        metavar="KEY=VALUE",
        help="Override an option (repeatable), e.g. --set reading_root=Inbox",
    )
    config_parser.set_defaults(func=configure)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
