# src/main.py — v2
"""CLI entry point — validate, aggregate, automate-statuses, flush-cache commands.

Usage:
    storykeeper validate <story_id>
    storykeeper aggregate <story_id>
    storykeeper automate-statuses
    storykeeper flush-cache
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import TYPE_CHECKING

from storykeeper.version import __version__

if TYPE_CHECKING:
    from storykeeper.api.facade import Coordinator
    from storykeeper.config.settings import Settings

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        from storykeeper.config.settings import load_settings

        settings = load_settings()
        _setup_logging(settings, args.verbose)
        coordinator = _build(settings)
        try:
            return args.func(coordinator, args)
        finally:
            coordinator.close()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="storykeeper",
        description=f"storykeeper v{__version__} — story cache and publication coordinator",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- validate ---
    p_validate = subparsers.add_parser(
        "validate", help="Show whether a story can be published",
    )
    p_validate.add_argument("story_id", type=int, help="Story id")
    p_validate.set_defaults(func=_cmd_validate)

    # --- aggregate ---
    p_aggregate = subparsers.add_parser(
        "aggregate", help="Show cached statistics for a story",
    )
    p_aggregate.add_argument("story_id", type=int, help="Story id")
    p_aggregate.set_defaults(func=_cmd_aggregate)

    # --- automate-statuses ---
    p_automate = subparsers.add_parser(
        "automate-statuses", help="Run the ongoing/on-hiatus/abandoned automation once",
    )
    p_automate.set_defaults(func=_cmd_automate)

    # --- flush-cache ---
    p_flush = subparsers.add_parser(
        "flush-cache", help="Delete every cache entry in the namespace",
    )
    p_flush.set_defaults(func=_cmd_flush)

    return parser


def _build(settings: Settings) -> Coordinator:
    """Wire a coordinator with store-backed statistics."""
    from storykeeper.api.facade import build_coordinator
    from storykeeper.store.statistics import StoreStatisticsProvider
    from storykeeper.store.store_factory import create_record_store

    store = create_record_store(settings)
    return build_coordinator(
        settings,
        store=store,
        statistics=StoreStatisticsProvider(store),
    )


def _cmd_validate(coordinator: Coordinator, args: argparse.Namespace) -> int:
    """Print the publish gate result. Exit code 2 when publishing is blocked."""
    check = coordinator.can_publish_story(args.story_id)
    if check.allowed:
        print(f"Story {args.story_id} can be published.")
        return 0
    print(f"Story {args.story_id} cannot be published:")
    for field, message in check.missing_fields.items():
        print(f"  {field}: {message}")
    return 2


def _cmd_aggregate(coordinator: Coordinator, args: argparse.Namespace) -> int:
    """Print the cached story aggregate."""
    aggregate = coordinator.get_story_aggregate(args.story_id)
    print(f"\nStory {aggregate.story_id}:")
    print(f"  Views:     {aggregate.view_count}")
    print(f"  Chapters:  {aggregate.chapter_count}")
    print(f"  Words:     {aggregate.word_count}")
    print(f"  Rating:    {aggregate.rating:.2f}")
    print(f"  Valid:     {'yes' if aggregate.is_valid else 'no'}")
    return 0


def _cmd_automate(coordinator: Coordinator, args: argparse.Namespace) -> int:
    """Run status automation once."""
    result = coordinator.automation.run()
    print(f"\nStatus automation complete:")
    print(f"  Scanned:       {result.scanned}")
    print(f"  Transitioned:  {result.transitioned}")
    print(f"  To hiatus:     {result.to_hiatus}")
    print(f"  To abandoned:  {result.to_abandoned}")
    print(f"  Errors:        {result.errors}")
    return 0 if result.errors == 0 else 1


def _cmd_flush(coordinator: Coordinator, args: argparse.Namespace) -> int:
    """Flush the whole cache namespace."""
    removed = coordinator.taxonomy.flush()
    print(f"Flushed {removed} cache entries.")
    return 0


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from storykeeper.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
