"""
Postcard Scan Extractor - command line entry point
License: GPLv3
"""

import argparse
import logging
from typing import List, Optional

from . import __version__
from .config import ExtractorConfig
from .session import ExtractorSession

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    # -h/--help stays in the playlist, the session prints its own usage for it
    parser = argparse.ArgumentParser(prog="postcard-extractor", add_help=False)
    parser.add_argument("images", nargs="*", help="scans to extract postcards from")
    parser.add_argument("--suffix", default=None, help="postcard file suffix (default: _postcard)")
    parser.add_argument("--zoom-level", type=float, default=None, help="initial zoom half-extent in display px")
    parser.add_argument("--no-auto-rotate", action="store_true", help="keep portrait scans as they are")
    parser.add_argument("--log-level", default="WARNING", help="DEBUG, INFO, WARNING, ERROR")
    return parser


def setup_logging(level: str = "WARNING") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    args, extra = build_parser().parse_known_intermixed_args(argv)
    setup_logging(args.log_level)
    logger.info("postcard-extractor %s", __version__)

    session = ExtractorSession(ExtractorConfig.from_args(args))
    # terminates on an empty or help-request playlist
    session.load_playlist(list(args.images) + list(extra))

    from .app import run
    run(session)
    return 0
