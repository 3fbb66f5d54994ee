"""Shared constants and document settings for transcript conversion.

The attachment directory name and the output suffix are fixed conventions of
the exporter; only the fonts of the generated preamble are meant to vary
between machines (Segoe UI Emoji on Windows, Noto Color Emoji on Linux).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

ATTACHMENTS_DIR_NAME = "attachments"

OUTPUT_SUFFIX = ".tex"

IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "bmp", "tif", "tiff"})

NO_FILENAME = "no filename"

ATTACHMENT_PREFIX = "Attachment:"

DROPPED_PREFIXES = ("type:", "received:")

SENDER_PREFIX = "from:"


@dataclass(frozen=True)
class DocumentConfig:
    """Settings rendered into the fixed LaTeX preamble.

    Parameters
    ----------
    paper:
        Paper size option passed to the ``article`` class.
    font_size:
        Base font size option passed to the ``article`` class.
    margin:
        Page margin handed to ``geometry``.
    main_font:
        Body font selected through ``fontspec``.
    emoji_font:
        Font family used by the ``\\emoji`` text command for every
        non-ASCII glyph.
    emergency_stretch:
        Value for ``\\emergencystretch`` so long unbroken runs still wrap.
    """

    paper: str = "a4paper"
    font_size: str = "11pt"
    margin: str = "25mm"
    main_font: str = "Latin Modern Roman"
    emoji_font: str = "Segoe UI Emoji"
    emergency_stretch: str = "3em"


def default_attachments_dir() -> Path:
    """Return the attachment directory relative to the working directory."""

    return Path(".") / ATTACHMENTS_DIR_NAME


def output_path_for(input_path: Path | str) -> Path:
    """Derive the ``.tex`` output location for ``input_path``.

    The final extension is replaced; names without one (including dotfiles
    such as ``.notes``) get the suffix appended.
    """

    path = Path(input_path)
    if path.suffix:
        return path.with_suffix(OUTPUT_SUFFIX)
    return path.with_name(path.name + OUTPUT_SUFFIX)
