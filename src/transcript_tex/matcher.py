"""Resolve attachment references to files in the catalog.

Exported transcripts usually carry generic names that do not survive the
export, so the byte size is the identity that matters. Resolution order:

1. exact, case-sensitive filename match;
2. same size and an image extension, when the reference is ``image/*``;
3. same size, any extension;
4. no match.

The matched entry is consumed, so each file is bound to at most one line.
"""

from __future__ import annotations

import logging
from typing import Optional

from .catalog import Catalog
from .config import IMAGE_EXTENSIONS
from .references import AttachmentReference

LOGGER = logging.getLogger(__name__)


def has_image_extension(name: str) -> bool:
    """Return True if ``name`` ends in a recognised image extension."""
    dot = name.rfind(".")
    if dot <= 0:
        return False
    return name[dot + 1 :].lower() in IMAGE_EXTENSIONS


def find_by_name(catalog: Catalog, name: str) -> Optional[int]:
    """Return the first unconsumed entry named exactly ``name``."""
    for idx, entry in catalog.unconsumed():
        if entry.name == name:
            return idx
    return None


def find_by_size(catalog: Catalog, size: int, *, prefer_image: bool) -> Optional[int]:
    """Return the first unconsumed entry of ``size`` bytes.

    With ``prefer_image`` a same-sized file with an image extension wins over
    earlier non-image files.
    """
    if prefer_image:
        for idx, entry in catalog.unconsumed():
            if entry.size == size and has_image_extension(entry.name):
                return idx
    for idx, entry in catalog.unconsumed():
        if entry.size == size:
            return idx
    return None


def match_attachment(reference: AttachmentReference, catalog: Catalog) -> Optional[int]:
    """Bind ``reference`` to at most one catalog entry.

    Parameters
    ----------
    reference:
        Parsed attachment line.
    catalog:
        Catalog for the current run; the matched entry is marked consumed.

    Returns
    -------
    Optional[int]
        Index of the matched entry, or ``None`` when nothing matches.
    """

    idx: Optional[int] = None
    how = ""
    if reference.declared_name is not None:
        idx = find_by_name(catalog, reference.declared_name)
        how = "name"
    if idx is None and reference.declared_size is not None:
        idx = find_by_size(
            catalog,
            reference.declared_size,
            prefer_image=reference.is_image_mime,
        )
        how = "size"
    if idx is None:
        return None

    entry = catalog.consume(idx)
    LOGGER.info("Matched %s by %s", entry.name, how)
    return idx
