"""CLI entry point for converting a Signal text export into LaTeX.

Usage::

  txt2tex messages.txt

writes ``messages.tex`` next to the input, resolving attachment lines
against the files in ``./attachments``. Compile the result with lualatex.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import DocumentConfig, default_attachments_dir, output_path_for
from .converter import convert_transcript
from .errors import ConversionError

LOGGER_NAME = "transcript_tex"


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for ``txt2tex``."""
    parser = argparse.ArgumentParser(
        prog="txt2tex",
        description=(
            "Convert an exported chat transcript into a LuaLaTeX document, "
            "embedding attachments found in ./attachments"
        ),
    )
    # Optional at the argparse level so a missing input exits with status 1.
    parser.add_argument("input", nargs="?", help="Transcript text file to convert")
    parser.add_argument(
        "--emoji-font",
        default=DocumentConfig.emoji_font,
        help=(
            "Font family used for emoji and other non-ASCII glyphs "
            f"(default: {DocumentConfig.emoji_font}; "
            "'Noto Color Emoji' is the usual choice on Linux)"
        ),
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    parser.add_argument(
        "--log-file", help="Write a detailed log to this path (appends)"
    )
    parser.add_argument(
        "--no-progress", action="store_true", help="Disable the progress bar"
    )
    return parser


def setup_logging(verbose: bool, log_file: Optional[str]) -> logging.Logger:
    """Configure the package logger for a CLI run."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG if log_file else logging.INFO)
    ch = logging.StreamHandler()
    ch.setLevel(logging.INFO if verbose else logging.WARNING)
    ch.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(ch)
    if log_file:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
        logger.addHandler(fh)
    return logger


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Run the converter.

    Exits with status 1 and an ``Error:`` message on stderr when the input
    is missing or unreadable, the output cannot be created, or the
    attachment directory cannot be opened.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.input:
        parser.print_usage(sys.stderr)
        raise SystemExit("Error: missing input file")

    logger = setup_logging(args.verbose, args.log_file)

    src = Path(args.input)
    dest = output_path_for(src)
    logger.info("Converting %s -> %s", src, dest)
    try:
        result = convert_transcript(
            src,
            dest,
            attachments_dir=default_attachments_dir(),
            config=DocumentConfig(emoji_font=args.emoji_font),
            show_progress=not args.no_progress,
        )
    except ConversionError as e:
        raise SystemExit(f"Error: {e}") from e

    logger.info("Summary: %s", result.stats.summary())
    print(f"Wrote {result.output_path}", file=sys.stderr)


if __name__ == "__main__":
    main()
