"""Per-line classification of Signal text-export transcripts.

Every line is handled on its own: export metadata is dropped, sender lines
lose their trailing parenthetical (the phone number), attachment lines are
sent to the matcher and everything else is prose.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .config import DROPPED_PREFIXES, SENDER_PREFIX
from .escaping import trim_right
from .references import is_attachment_line


class LineKind(enum.Enum):
    """Outcome of classifying one transcript line."""

    DROP = "drop"
    ATTACHMENT = "attachment"
    BLANK = "blank"
    PROSE = "prose"


@dataclass(frozen=True)
class ClassifiedLine:
    """A transcript line with its kind and the text left to emit."""

    kind: LineKind
    text: str


def redact_sender(line: str) -> str:
    """Drop everything from the first ``(`` after the ``From:`` label."""
    colon = line.find(":")
    if colon < 0:
        return line
    paren = line.find("(", colon)
    if paren < 0:
        return line
    return trim_right(line[:paren])


def classify_line(line: str) -> ClassifiedLine:
    """Classify a single line; trailing whitespace and newlines are ignored."""
    text = trim_right(line)
    lowered = text.lower()
    if lowered.startswith(DROPPED_PREFIXES):
        return ClassifiedLine(LineKind.DROP, text)
    if lowered.startswith(SENDER_PREFIX):
        text = redact_sender(text)
    if is_attachment_line(text):
        return ClassifiedLine(LineKind.ATTACHMENT, text)
    if not text:
        return ClassifiedLine(LineKind.BLANK, text)
    return ClassifiedLine(LineKind.PROSE, text)
