"""
Command-line interface for clipmark
"""
import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .config import Settings
from .config.settings import LOG_LEVELS
from .coordinator import ExportCoordinator
from .exceptions import ConfigError
from .formatting import print_error, print_header, print_info, print_key_table
from .logging import configure_logging
from .presentation import MpvPresenter
from .session import SessionState

MPV_LOG_LEVELS = {
    "fatal": logging.CRITICAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
}


def parse_args(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description="Play media in mpv and export marked clips with ffmpeg"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=LOG_LEVELS,
        default=None,
        help="Set logging level (default: CLIPMARK_LOG_LEVEL or INFO)"
    )
    parser.add_argument(
        "--ffmpeg",
        default=None,
        help="Path to the ffmpeg executable (default: search common locations)"
    )
    parser.add_argument(
        "--ffprobe",
        default=None,
        help="Path to the ffprobe executable (default: search common locations)"
    )
    parser.add_argument(
        "--profiles",
        default=None,
        help="Comma-separated encoder profiles to offer, in order (e.g. copy,libx264)"
    )
    parser.add_argument(
        "media",
        type=Path,
        help="Media file to play"
    )
    return parser.parse_args(argv)


def _mpv_log_handler(level, prefix, text):
    logging.getLogger("clipmark.mpv").log(
        MPV_LOG_LEVELS.get(level, logging.DEBUG), "[%s] %s", prefix, text.rstrip()
    )


def run_player(settings: Settings, media: Path) -> None:
    """Open mpv on ``media`` with clip mode attached and block until it closes."""
    import mpv

    state = SessionState(settings.build_catalog())
    coordinator = ExportCoordinator(settings)
    player = mpv.MPV(
        input_default_bindings=True,
        input_vo_keyboard=True,
        osc=True,
        log_handler=_mpv_log_handler,
        loglevel="warn",
    )
    presenter = MpvPresenter(player, state, coordinator, settings)
    try:
        presenter.attach()
        player.play(str(media))
        player.wait_for_shutdown()
    finally:
        player.terminate()
        # Let running exports finish writing their files
        coordinator.shutdown(wait=True)


def main(argv=None):
    """Main entry point"""
    args = parse_args(argv)
    profiles = args.profiles.split(",") if args.profiles else None
    try:
        settings = Settings.from_environment(
            ffmpeg=args.ffmpeg,
            ffprobe=args.ffprobe,
            profiles=profiles,
            log_level=args.log_level,
        )
    except ConfigError as e:
        print_error(str(e))
        return 1

    log_file = configure_logging(settings.log_level, settings.paths.log_dir)
    log = logging.getLogger("clipmark")
    if log_file:
        log.info("Log file: %s", log_file)

    if not args.media.exists():
        log.error("Input %s does not exist", args.media)
        return 1

    print_header(f"clipmark v{__version__}")
    print_info(f"Profiles: {', '.join(settings.export.profiles)}")
    print_key_table(settings.keys.all_keys())

    try:
        run_player(settings, args.media)
    except KeyboardInterrupt:
        log.warning("Interrupted by user")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
