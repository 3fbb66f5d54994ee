"""Convert exported chat transcripts into LuaLaTeX documents."""

from .catalog import Catalog, CatalogEntry, load_catalog
from .converter import ConversionResult, ConversionStats, convert_transcript
from .errors import (
    AttachmentDirError,
    ConversionError,
    InputFileError,
    OutputFileError,
)
from .escaping import escape_latex
from .matcher import match_attachment
from .references import AttachmentReference, parse_attachment_line

__all__ = [
    "AttachmentDirError",
    "AttachmentReference",
    "Catalog",
    "CatalogEntry",
    "ConversionError",
    "ConversionResult",
    "ConversionStats",
    "InputFileError",
    "OutputFileError",
    "convert_transcript",
    "escape_latex",
    "load_catalog",
    "match_attachment",
    "parse_attachment_line",
]
