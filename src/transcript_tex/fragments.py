"""LaTeX output fragments and the fixed document wrapper.

Each transcript line yields at most one fragment. Fragments render to
self-contained LaTeX text; paths inside ``\\detokenize`` are written
verbatim since they come from the attachment directory listing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .catalog import CatalogEntry
from .config import ATTACHMENTS_DIR_NAME, DocumentConfig
from .escaping import EMOJI_COMMAND, escape_latex
from .matcher import has_image_extension
from .references import AttachmentReference

# ----- LaTeX snippets -----

LATEX_LINE_BREAK = "\\\\\n"

LATEX_PARAGRAPH_BREAK = "\n\n"

DOCUMENT_END = "\n\\end{document}\n"


class Fragment:
    """Base class for one unit of generated LaTeX."""

    def render(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class ImageFragment(Fragment):
    """Block-level image scaled to the text block, aspect ratio preserved."""

    rel_path: str

    def render(self) -> str:
        return (
            "\n\\par\\noindent\n"
            "\\includegraphics[width=\\linewidth,height=0.9\\textheight,"
            "keepaspectratio]{\\detokenize{" + self.rel_path + "}}\n"
            "\\par\\medskip\n\n"
        )


@dataclass(frozen=True)
class AttachmentFragment(Fragment):
    """Quoted reference to a non-image attachment file."""

    rel_path: str

    def render(self) -> str:
        return (
            "\n\\begin{quote}\n"
            "\\textbf{Attachment:} \\detokenize{" + self.rel_path + "}\n"
            "\\end{quote}\n\n"
        )


@dataclass(frozen=True)
class UnmatchedFragment(Fragment):
    """Placeholder keeping the original attachment line for manual fixing."""

    source_line: str

    def render(self) -> str:
        return (
            "\n\\begin{quote}\n"
            "\\textbf{Unmatched attachment placeholder:} "
            + escape_latex(self.source_line)
            + "\\end{quote}\n\n"
        )


@dataclass(frozen=True)
class TextFragment(Fragment):
    """Escaped prose line ending in a forced line break."""

    text: str

    def render(self) -> str:
        return escape_latex(self.text) + LATEX_LINE_BREAK


@dataclass(frozen=True)
class ParagraphBreak(Fragment):
    """Blank line in the transcript."""

    def render(self) -> str:
        return LATEX_PARAGRAPH_BREAK


def attachment_rel_path(entry: CatalogEntry, prefix: str = ATTACHMENTS_DIR_NAME) -> str:
    """Return the document-relative path of ``entry``."""
    return f"{prefix}/{entry.name}"


def fragment_for_attachment(
    reference: AttachmentReference,
    entry: Optional[CatalogEntry],
    source_line: str,
    *,
    prefix: str = ATTACHMENTS_DIR_NAME,
) -> Fragment:
    """Pick the fragment for an attachment line.

    An entry is rendered as an image when either the declared MIME type is
    ``image/*`` or the matched file has an image extension.
    """
    if entry is None:
        return UnmatchedFragment(source_line)
    rel_path = attachment_rel_path(entry, prefix)
    if reference.is_image_mime or has_image_extension(entry.name):
        return ImageFragment(rel_path)
    return AttachmentFragment(rel_path)


def render_preamble(config: Optional[DocumentConfig] = None) -> str:
    """Return the fixed preamble up to and including ``\\begin{document}``."""
    cfg = config or DocumentConfig()
    return (
        f"\\documentclass[{cfg.paper},{cfg.font_size}]{{article}}\n"
        f"\\usepackage[margin={cfg.margin}]{{geometry}}\n"
        "\\usepackage{graphicx}\n"
        "\\usepackage{fontspec}\n"
        f"\\setmainfont{{{cfg.main_font}}}\n"
        f"\\newfontfamily\\emojifont{{{cfg.emoji_font}}}\n"
        f"\\DeclareTextFontCommand{{{EMOJI_COMMAND}}}{{\\emojifont}}\n"
        f"\\setlength{{\\emergencystretch}}{{{cfg.emergency_stretch}}}\n"
        "\\begin{document}\n\n"
    )
