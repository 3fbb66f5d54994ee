"""Parser for attachment reference lines in Signal text exports.

Exports describe each attachment on its own line, for example::

  Attachment: no filename (image/jpeg, 439593 bytes)
  Attachment: myImage.png (image/png, 311164 bytes)

Parsing is forgiving: a line that starts with the marker is always an
attachment line, and unreadable parts simply leave the matching fields empty.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from .config import ATTACHMENT_PREFIX, NO_FILENAME
from .escaping import trim_right

_LEADING_INT_RE = re.compile(r"\d+")


@dataclass(frozen=True)
class AttachmentReference:
    """Attachment described by one transcript line.

    Parameters
    ----------
    declared_name:
        Filename given by the export, or ``None`` when it says
        ``no filename`` or leaves the field blank.
    mime_type:
        Declared MIME type; empty when it could not be read.
    declared_size:
        Declared size in bytes, or ``None`` when it could not be read.
    """

    declared_name: Optional[str] = None
    mime_type: str = ""
    declared_size: Optional[int] = None

    @property
    def is_image_mime(self) -> bool:
        """Return True if the declared MIME type is an ``image/*`` type."""
        return self.mime_type.startswith("image/")

    @property
    def is_matchable(self) -> bool:
        """Return True if either a name or a size is available for matching."""
        return self.declared_name is not None or self.declared_size is not None


def is_attachment_line(line: str) -> bool:
    """Return True if ``line`` starts with the case-sensitive marker."""
    return line.startswith(ATTACHMENT_PREFIX)


def parse_attachment_line(line: str) -> Optional[AttachmentReference]:
    """Parse ``line`` into an :class:`AttachmentReference`.

    Returns ``None`` only when the line is not an attachment line at all.
    A line without an opening parenthesis yields an empty reference.
    """

    if not is_attachment_line(line):
        return None

    rest = line[len(ATTACHMENT_PREFIX) :].lstrip()
    paren = rest.find("(")
    if paren < 0:
        return AttachmentReference()

    name_part = trim_right(rest[:paren])
    name = None if name_part in ("", NO_FILENAME) else name_part

    inside = rest[paren + 1 :]
    end = inside.find(")")
    if end < 0:
        return AttachmentReference(declared_name=name)

    mime, sep, size_part = trim_right(inside[:end]).partition(",")
    if not sep:
        return AttachmentReference(declared_name=name)

    m = _LEADING_INT_RE.match(size_part.lstrip())
    return AttachmentReference(
        declared_name=name,
        mime_type=mime.strip(),
        declared_size=int(m.group(0)) if m else None,
    )
