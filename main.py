"""AniSync Command Line Application."""

import argparse
import asyncio
import sys

from pydantic import ValidationError

from anisync import __version__, log
from anisync.config.settings import get_config
from anisync.core.service import AniSyncService
from anisync.models.request import LocalPlaybackEvent


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="anisync", description="Sync local playback progress with AniList"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser(
        "viewer", help="Show the AniList viewer and ensure the sentinel list exists"
    )

    search = commands.add_parser("search", help="Resolve a title to its AniList media")
    search.add_argument("name", help="Title to look up")

    sync = commands.add_parser("sync", help="Resolve a title and sync an episode")
    sync.add_argument("name", help="Title to look up")
    sync.add_argument("episode", nargs="?", help="Episode being watched")

    return parser


async def run(args: argparse.Namespace) -> int:
    """Run the selected command.

    Returns:
        int: Exit code (0 for success, 1 for error)
    """
    config = get_config()
    log.debug(f"AniSync: Configuration {config!s}")

    async with AniSyncService(config) as service:
        if args.command == "viewer":
            viewer = await service.start()
            if viewer is None:
                log.error("AniSync: No authenticated AniList viewer")
                return 1
            log.info(
                f"AniSync: Viewer $$'{viewer.name}'$$ "
                f"$${{custom_lists: {viewer.anime_custom_lists()}}}$$"
            )
            return 0

        result = await service.search(args.name)
        media = result.page_media()
        if not media:
            log.error(f"AniSync: No AniList match for $$'{args.name}'$$")
            return 1

        match = media[0]
        log.info(
            f"AniSync: Best match for $$'{args.name}'$$ is {match} "
            f"$${{distance: {match.match_distance}}}$$"
        )

        if args.command == "sync":
            await service.sync(LocalPlaybackEvent(media=match, episode=args.episode))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Args:
        argv (list[str] | None): Command-line arguments.

    Returns:
        int: Exit code (0 for success, 1 for error)
    """
    args = build_parser().parse_args(argv)
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        log.info("AniSync: Application interrupted")
        return 0
    except ValidationError as e:
        log.error(f"AniSync: Configuration validation error: {e}")
        return 1
    except Exception as e:
        log.error(f"AniSync: Fatal error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
