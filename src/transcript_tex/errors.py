"""Fatal error types raised while converting a transcript.

Recoverable, per-line problems (unparseable attachment lines, unmatched
attachments, files vanishing during the directory scan) never raise; they
degrade to placeholders or are skipped where they occur.
"""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for errors that abort a conversion run."""


class AttachmentDirError(ConversionError):
    """Raised when the attachment directory cannot be opened."""


class InputFileError(ConversionError):
    """Raised when the transcript cannot be opened for reading."""


class OutputFileError(ConversionError):
    """Raised when the output document cannot be created."""
