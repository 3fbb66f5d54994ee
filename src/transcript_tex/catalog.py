"""In-memory index of the attachment files exported next to a transcript.

The catalog is built once per run from a flat directory listing and then
only mutated through :meth:`Catalog.consume`, which binds an entry to the
first transcript line that claims it.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Tuple

from .errors import AttachmentDirError

LOGGER = logging.getLogger(__name__)


@dataclass
class CatalogEntry:
    """One regular file found in the attachment directory."""

    name: str
    path: Path
    size: int
    consumed: bool = False


class Catalog:
    """Ordered, append-only collection of :class:`CatalogEntry` records."""

    def __init__(self, entries: List[CatalogEntry] | None = None):
        self._entries: List[CatalogEntry] = list(entries or [])

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> CatalogEntry:
        return self._entries[index]

    def append(self, entry: CatalogEntry) -> None:
        """Add ``entry`` at the end of the catalog."""
        self._entries.append(entry)

    def unconsumed(self) -> Iterator[Tuple[int, CatalogEntry]]:
        """Yield ``(index, entry)`` pairs still eligible for matching."""
        for idx, entry in enumerate(self._entries):
            if not entry.consumed:
                yield idx, entry

    def consume(self, index: int) -> CatalogEntry:
        """Mark the entry at ``index`` as bound and return it."""
        entry = self._entries[index]
        entry.consumed = True
        return entry

    def remaining(self) -> int:
        """Return how many entries were never claimed."""
        return sum(1 for entry in self._entries if not entry.consumed)


def load_catalog(directory: Path | str) -> Catalog:
    """Index the regular files directly under ``directory``.

    Subdirectories, symbolic links and special files are ignored. Entries
    that disappear or cannot be stat'ed after being listed are skipped.
    Entries are sorted by name so that size-based tie-breaking does not
    depend on filesystem enumeration order.

    Parameters
    ----------
    directory:
        Directory holding the exported attachment files.

    Returns
    -------
    Catalog
        Catalog with every entry unconsumed.

    Raises
    ------
    AttachmentDirError
        If the directory cannot be opened.
    """

    dir_path = Path(directory)
    found: List[CatalogEntry] = []
    try:
        with os.scandir(dir_path) as it:
            for ent in it:
                try:
                    if not ent.is_file(follow_symlinks=False):
                        continue
                    size = ent.stat(follow_symlinks=False).st_size
                except OSError as e:
                    LOGGER.debug("Skipping attachment %s: %s", ent.name, e)
                    continue
                found.append(
                    CatalogEntry(
                        name=ent.name,
                        path=Path(ent.path).absolute(),
                        size=size,
                    )
                )
    except OSError as e:
        raise AttachmentDirError(
            f"could not open attachments directory '{dir_path}': {e.strerror or e}"
        ) from e

    found.sort(key=lambda entry: entry.name)
    LOGGER.info("Indexed %d attachment file(s) under %s", len(found), dir_path)
    return Catalog(found)
