"""Convert one exported chat transcript into a LuaLaTeX document.

The attachment directory is indexed first, then the transcript is streamed
line by line: each line is classified, attachment lines are resolved against
the catalog, and the resulting fragment is written before the next line is
read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, Optional, TextIO

from tqdm import tqdm

from .catalog import Catalog, load_catalog
from .classifier import LineKind, classify_line
from .config import (
    ATTACHMENTS_DIR_NAME,
    DocumentConfig,
    default_attachments_dir,
    output_path_for,
)
from .errors import InputFileError, OutputFileError
from .escaping import decode_line
from .fragments import (
    DOCUMENT_END,
    Fragment,
    ParagraphBreak,
    TextFragment,
    UnmatchedFragment,
    fragment_for_attachment,
    render_preamble,
)
from .matcher import match_attachment
from .references import parse_attachment_line

LOGGER = logging.getLogger(__name__)

_UTF8_BOM = b"\xef\xbb\xbf"


@dataclass
class ConversionStats:
    """Counters for one conversion run."""

    lines: int = 0
    dropped: int = 0
    prose: int = 0
    blank: int = 0
    attachments_matched: int = 0
    attachments_unmatched: int = 0

    def summary(self) -> str:
        """Return a one-line summary of the run."""
        return (
            f"{self.lines} lines, {self.prose} text, {self.blank} blank, "
            f"{self.dropped} dropped, {self.attachments_matched} attachments "
            f"matched, {self.attachments_unmatched} unmatched"
        )


@dataclass
class ConversionResult:
    """Where the document went and what happened along the way."""

    input_path: Path
    output_path: Path
    stats: ConversionStats = field(default_factory=ConversionStats)
    unused_attachments: int = 0


def iter_fragments(
    lines: Iterable[str],
    catalog: Catalog,
    *,
    attachments_prefix: str = ATTACHMENTS_DIR_NAME,
    stats: Optional[ConversionStats] = None,
) -> Iterator[Fragment]:
    """Yield the fragment for each transcript line, in input order.

    Parameters
    ----------
    lines:
        Decoded transcript lines; trailing newlines are allowed.
    catalog:
        Attachment catalog for this run. Matched entries are consumed.
    attachments_prefix:
        Directory prefix used for attachment paths in the document.
    stats:
        Optional counters updated as lines are processed.
    """

    stats = stats if stats is not None else ConversionStats()
    for line in lines:
        stats.lines += 1
        classified = classify_line(line)

        if classified.kind is LineKind.DROP:
            stats.dropped += 1
            continue

        if classified.kind is LineKind.ATTACHMENT:
            reference = parse_attachment_line(classified.text)
            idx = match_attachment(reference, catalog) if reference else None
            if idx is None:
                stats.attachments_unmatched += 1
                LOGGER.warning("[UNMATCHED] %s", classified.text)
                yield UnmatchedFragment(classified.text)
                continue
            entry = catalog[idx]
            stats.attachments_matched += 1
            LOGGER.info("[ATTACHMENT] %s -> %s", classified.text, entry.name)
            yield fragment_for_attachment(
                reference, entry, classified.text, prefix=attachments_prefix
            )
            continue

        if classified.kind is LineKind.BLANK:
            stats.blank += 1
            yield ParagraphBreak()
            continue

        stats.prose += 1
        yield TextFragment(classified.text)


def iter_decoded_lines(stream: BinaryIO) -> Iterator[str]:
    """Decode a binary transcript stream one line at a time."""
    for lineno, raw in enumerate(stream, start=1):
        if lineno == 1 and raw.startswith(_UTF8_BOM):
            raw = raw[len(_UTF8_BOM) :]
        yield decode_line(raw, lineno)


def write_document(
    lines: Iterable[str],
    catalog: Catalog,
    out: TextIO,
    *,
    config: Optional[DocumentConfig] = None,
    attachments_prefix: str = ATTACHMENTS_DIR_NAME,
    stats: Optional[ConversionStats] = None,
) -> ConversionStats:
    """Write the preamble, one fragment per line and the closing marker."""
    stats = stats if stats is not None else ConversionStats()
    out.write(render_preamble(config))
    for fragment in iter_fragments(
        lines, catalog, attachments_prefix=attachments_prefix, stats=stats
    ):
        out.write(fragment.render())
    out.write(DOCUMENT_END)
    return stats


def convert_transcript(
    input_path: Path | str,
    output_path: Path | str | None = None,
    *,
    attachments_dir: Path | str | None = None,
    config: Optional[DocumentConfig] = None,
    show_progress: bool = False,
) -> ConversionResult:
    """Convert ``input_path`` into a ``.tex`` document.

    Parameters
    ----------
    input_path:
        Transcript exported as plain text.
    output_path:
        Target document; defaults to the input path with a ``.tex`` suffix.
    attachments_dir:
        Directory of exported attachments; defaults to ``./attachments``.
    config:
        Preamble settings.
    show_progress:
        Show a tqdm bar over the input lines.

    Returns
    -------
    ConversionResult
        Output location and per-run counters.

    Raises
    ------
    AttachmentDirError
        If the attachment directory cannot be opened.
    InputFileError
        If the transcript cannot be opened.
    OutputFileError
        If the output document cannot be created, or would replace the
        transcript itself.
    """

    src = Path(input_path)
    dest = Path(output_path) if output_path is not None else output_path_for(src)
    att_dir = (
        Path(attachments_dir)
        if attachments_dir is not None
        else default_attachments_dir()
    )

    # The catalog is loaded before any file is opened or created.
    catalog = load_catalog(att_dir)

    try:
        fin = src.open("rb")
    except OSError as e:
        raise InputFileError(f"could not open '{src}': {e.strerror or e}") from e

    result = ConversionResult(input_path=src, output_path=dest)
    with fin:
        if dest.resolve() == src.resolve():
            raise OutputFileError(f"refusing to overwrite input '{src}'")
        try:
            fout = dest.open("w", encoding="utf-8", newline="\n")
        except OSError as e:
            raise OutputFileError(
                f"could not open '{dest}' for writing: {e.strerror or e}"
            ) from e
        with fout:
            lines: Iterable[str] = iter_decoded_lines(fin)
            if show_progress:
                lines = tqdm(lines, desc=src.name, unit="line")
            write_document(
                lines,
                catalog,
                fout,
                config=config,
                attachments_prefix=att_dir.as_posix(),
                stats=result.stats,
            )

    result.unused_attachments = catalog.remaining()
    LOGGER.info("[OK] %s: %s", dest, result.stats.summary())
    if result.unused_attachments:
        LOGGER.info(
            "%d attachment file(s) were not referenced", result.unused_attachments
        )
    return result
