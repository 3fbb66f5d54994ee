"""LaTeX escaping for transcript text backed by ``pylatexenc``.

ASCII characters that are special to TeX get fixed, spacing-safe
replacements; every other ASCII character passes through. Each non-ASCII
code point is wrapped in ``\\emoji{...}`` so that the document routes it
through the emoji font declared in the preamble instead of the body font.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from pylatexenc.latexencode import (
    RULE_CALLABLE,
    RULE_DICT,
    UnicodeToLatexConversionRule,
    UnicodeToLatexEncoder,
)

LOGGER = logging.getLogger(__name__)

LATEX_RESERVED = {
    ord("\\"): r"\textbackslash{}",
    ord("{"): r"\{",
    ord("}"): r"\}",
    ord("#"): r"\#",
    ord("$"): r"\$",
    ord("%"): r"\%",
    ord("&"): r"\&",
    ord("_"): r"\_",
    ord("^"): r"\textasciicircum{}",
    ord("~"): r"\textasciitilde{}",
}

EMOJI_COMMAND = r"\emoji"

# isspace() in the C locale
_ASCII_WHITESPACE = " \t\n\r\f\v"


def _wrap_non_ascii(s: str, pos: int) -> Optional[Tuple[int, str]]:
    """Wrap a single non-ASCII code point in the emoji text command."""
    ch = s[pos]
    if ord(ch) < 0x80:
        return None
    return 1, f"{EMOJI_COMMAND}{{{ch}}}"


_ENCODER = UnicodeToLatexEncoder(
    conversion_rules=[
        UnicodeToLatexConversionRule(RULE_DICT, LATEX_RESERVED),
        UnicodeToLatexConversionRule(RULE_CALLABLE, _wrap_non_ascii),
    ],
    replacement_latex_protection="none",
    unknown_char_policy="keep",
    unknown_char_warning=False,
)


def escape_latex(text: Optional[str]) -> str:
    """Escape ``text`` for the body of the generated document.

    Parameters
    ----------
    text:
        Input text. ``None`` is treated as an empty string.

    Returns
    -------
    str
        Text safe to place in running LaTeX prose.
    """
    if not text:
        return ""
    return _ENCODER.unicode_to_latex(text)


def trim_right(text: str) -> str:
    """Strip trailing ASCII whitespace, including CR and LF."""
    return text.rstrip(_ASCII_WHITESPACE)


def decode_line(raw: bytes, lineno: Optional[int] = None) -> str:
    """Decode one raw transcript line as UTF-8.

    Malformed byte sequences are replaced with U+FFFD (which is then
    escaped like any other non-ASCII glyph) and reported as a warning.
    """
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        where = f"line {lineno}" if lineno is not None else "input"
        LOGGER.warning("Malformed UTF-8 on %s (%s); using U+FFFD", where, e.reason)
        return raw.decode("utf-8", errors="replace")
