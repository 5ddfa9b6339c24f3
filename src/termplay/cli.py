"""
termplay CLI - Entry point

Subcommands:
    play     Play a song, a directory of songs or a playlist
    edit     Edit or create a playlist
    display  Show a playlist's settings and songs
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from termplay import __version__
from termplay.core import TermplayError, load_config, print_error, safe_print, setup_loguru
from termplay.core.config import Config
from termplay.domain import playlists
from termplay.domain.playlists import RandomMode, parse_volume


def non_negative_float(value: str) -> float:
    """argparse type for volumes: a finite number >= 0."""
    try:
        return parse_volume(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid volume: {value!r} (expected a number >= 0)"
        ) from None


def random_mode(value: str) -> RandomMode:
    try:
        return RandomMode.from_cli(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid choice: {value!r} (choose from off, on, shuffle)"
        ) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="termplay",
        description="termplay - play songs and playlists in the terminal",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Override the configured log level",
    )

    subparsers = parser.add_subparsers(dest="subcommand", required=True)

    play_parser = subparsers.add_parser("play", help="Play sound files or playlist")
    play_parser.add_argument("file", type=Path, help="Sound file or directory of sound files")
    play_parser.add_argument(
        "-p", "--playlist", action="store_true", help="Given file is a single playlist"
    )
    play_parser.add_argument("--repeat", action="store_true", help="Play songs in a loop")
    play_parser.add_argument(
        "--volume", type=non_negative_float, help="Overwrites playlist volume"
    )

    edit_parser = subparsers.add_parser("edit", help="Edit or create a playlist")
    edit_parser.add_argument(
        "playlist", type=Path, help="Playlist to edit. Will create if not existing."
    )
    edit_parser.add_argument(
        "--file",
        type=Path,
        help="Sound file or directory of sound files to add to playlist.",
    )
    edit_parser.add_argument(
        "--volume",
        type=non_negative_float,
        help="Acts multiplicative to the volume of each song.",
    )
    edit_parser.add_argument(
        "--random",
        type=random_mode,
        metavar="{off,on,shuffle}",
        help="Unless songs are repeating 'on' and 'shuffle' act the same.",
    )
    edit_parser.add_argument(
        "--validate",
        action="store_true",
        help="Remove songs that are not playable audio files.",
    )

    display_parser = subparsers.add_parser("display", help="Display a playlist")
    display_parser.add_argument("playlist", type=Path, help="Playlist to display")

    return parser


def run_play(args: argparse.Namespace, config: Config) -> None:
    from termplay.session import play

    play(
        args.file,
        as_playlist=args.playlist,
        repeat=args.repeat,
        volume=args.volume,
        config=config,
    )


def run_edit(args: argparse.Namespace, config: Config) -> None:
    try:
        playlist = playlists.load_playlist(args.playlist)
    except playlists.PlaylistStoreError as e:
        logger.info(f"Starting new playlist {args.playlist} ({e})")
        playlist = playlists.Playlist()

    playlist = playlists.edit_playlist(
        playlist,
        file=args.file,
        volume=args.volume,
        random=args.random,
        validate=args.validate,
        library=config.library,
    )
    playlists.save_playlist(playlist, args.playlist)


def run_display(args: argparse.Namespace, config: Config) -> None:
    safe_print(str(playlists.load_playlist(args.playlist)))


COMMANDS = {
    "play": run_play,
    "edit": run_edit,
    "display": run_display,
}


def run(argv: Optional[Sequence[str]] = None, config: Optional[Config] = None) -> int:
    """Parse arguments and run a subcommand.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = build_parser().parse_args(argv)

    if config is None:
        config = load_config()
        level = args.log_level or config.logging.level
        setup_loguru(
            config.logging.log_file_path(),
            level=level,
            rotation=f"{config.logging.max_file_size_mb} MB",
            retention=config.logging.backup_count,
        )

    logger.info(f"Running {args.subcommand}")
    try:
        COMMANDS[args.subcommand](args, config)
    except TermplayError as e:
        logger.error(f"{args.subcommand} failed: {e}")
        print_error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.warning(f"{args.subcommand} interrupted by user")
        print_error("Interrupted")
        return 1
    return 0


def main() -> None:
    """Main entry point for the termplay command."""
    sys.exit(run())


if __name__ == "__main__":
    main()
