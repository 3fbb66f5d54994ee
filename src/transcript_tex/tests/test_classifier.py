"""
Tests for per-line classification.
"""

from __future__ import annotations

import pytest

from transcript_tex.classifier import LineKind, classify_line, redact_sender


@pytest.mark.parametrize(
    "line",
    ["Type: incoming", "TYPE: outgoing\n", "Received: 2024-01-01 10:00", "received:"],
)
def test_metadata_lines_are_dropped(line: str) -> None:
    """Type/Received lines are dropped regardless of case."""

    assert classify_line(line).kind is LineKind.DROP


def test_sender_line_is_redacted() -> None:
    """The parenthetical after the sender name is removed."""

    classified = classify_line("From: Jane Doe (+15551234567)\r\n")

    assert classified.kind is LineKind.PROSE
    assert classified.text == "From: Jane Doe"


def test_sender_line_without_parenthesis() -> None:
    """Sender lines without a parenthetical are kept as they are."""

    assert redact_sender("from: Someone") == "from: Someone"
    assert classify_line("FROM: Me (you)").text == "FROM: Me"


def test_attachment_marker_is_case_sensitive() -> None:
    """Only 'Attachment:' routes to the matcher; other casings are prose."""

    assert classify_line("Attachment: a.png (image/png, 1 bytes)\n").kind is (
        LineKind.ATTACHMENT
    )
    assert classify_line("attachment: a.png").kind is LineKind.PROSE


@pytest.mark.parametrize("line", ["", "\n", "   \t\r\n"])
def test_blank_lines(line: str) -> None:
    """Lines that are empty after trimming are paragraph breaks."""

    assert classify_line(line).kind is LineKind.BLANK


def test_prose_keeps_leading_whitespace() -> None:
    """Prose is only trimmed on the right."""

    classified = classify_line("   indented text  \n")

    assert classified.kind is LineKind.PROSE
    assert classified.text == "   indented text"
