"""
Tests for the attachment catalog and the matcher.
"""

from __future__ import annotations

import contextlib
import logging
import os
from pathlib import Path

import pytest

from transcript_tex.catalog import Catalog, CatalogEntry, load_catalog
from transcript_tex.errors import AttachmentDirError
from transcript_tex.matcher import has_image_extension, match_attachment
from transcript_tex.references import AttachmentReference


def _catalog(*entries: tuple[str, int]) -> Catalog:
    """Build a catalog from (name, size) pairs."""

    return Catalog(
        [CatalogEntry(name=name, path=Path(name), size=size) for name, size in entries]
    )


def test_load_catalog_lists_regular_files_sorted(tmp_path: Path) -> None:
    """Only regular files are indexed, sorted by name, with their sizes."""

    att = tmp_path / "attachments"
    att.mkdir()
    (att / "b.jpg").write_bytes(b"x" * 5)
    (att / "a.txt").write_bytes(b"hello")
    (att / "empty.bin").write_bytes(b"")
    (att / "nested").mkdir()
    (att / "nested" / "deep.png").write_bytes(b"123")
    os.symlink(att / "a.txt", att / "link.txt")

    catalog = load_catalog(att)

    assert [e.name for e in catalog] == ["a.txt", "b.jpg", "empty.bin"]
    assert [e.size for e in catalog] == [5, 5, 0]
    assert all(e.path.is_absolute() for e in catalog)
    assert not any(e.consumed for e in catalog)


def test_load_catalog_skips_vanished_files(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """A file removed between listing and stat is left out of the index."""

    att = tmp_path / "attachments"
    att.mkdir()
    for name in ("a.png", "gone.jpg", "c.txt"):
        (att / name).write_bytes(b"abc")

    real_scandir = os.scandir

    class _VanishingEntry:
        def __init__(self, entry: os.DirEntry) -> None:
            self._entry = entry
            self.name = entry.name
            self.path = entry.path

        def is_file(self, *, follow_symlinks: bool = True) -> bool:
            return self._entry.is_file(follow_symlinks=follow_symlinks)

        def stat(self, *, follow_symlinks: bool = True) -> os.stat_result:
            if self.name == "gone.jpg":
                raise FileNotFoundError(2, "No such file or directory", self.path)
            return self._entry.stat(follow_symlinks=follow_symlinks)

    @contextlib.contextmanager
    def fake_scandir(path):
        with real_scandir(path) as it:
            yield (_VanishingEntry(ent) for ent in it)

    monkeypatch.setattr(os, "scandir", fake_scandir)

    catalog = load_catalog(att)

    assert [e.name for e in catalog] == ["a.png", "c.txt"]
    assert [e.size for e in catalog] == [3, 3]


def test_load_catalog_missing_directory(tmp_path: Path) -> None:
    """An unopenable directory is a fatal error naming the directory."""

    with pytest.raises(AttachmentDirError, match="attachments directory"):
        load_catalog(tmp_path / "missing")


def test_has_image_extension() -> None:
    """Image extensions are recognised case-insensitively."""

    assert has_image_extension("IMG_0001.JPG")
    assert has_image_extension("scan.tiff")
    assert not has_image_extension(".png")
    assert not has_image_extension("noext")
    assert not has_image_extension("archive.png.zip")


def test_name_match_takes_priority_over_size() -> None:
    """A name match wins even when another image matches the size."""

    catalog = _catalog(("doc.txt", 10), ("pic.png", 20))
    ref = AttachmentReference("doc.txt", "image/png", 20)

    assert match_attachment(ref, catalog) == 0
    assert catalog[0].consumed
    assert not catalog[1].consumed


def test_name_match_is_case_sensitive() -> None:
    """Names differing only in case do not match."""

    catalog = _catalog(("img.jpg", 10))

    ref = AttachmentReference("IMG.JPG", "image/jpeg")

    assert match_attachment(ref, catalog) is None


def test_image_mime_prefers_image_extension() -> None:
    """Same-sized image files win over earlier non-image files for image refs."""

    catalog = _catalog(("a.dat", 100), ("b.jpg", 100))

    assert match_attachment(AttachmentReference(None, "image/jpeg", 100), catalog) == 1


def test_non_image_mime_takes_first_size_match() -> None:
    """Non-image refs take the first unconsumed file of the right size."""

    catalog = _catalog(("a.dat", 100), ("b.jpg", 100))

    assert match_attachment(AttachmentReference(None, "audio/aac", 100), catalog) == 0


def test_image_mime_falls_back_to_any_type() -> None:
    """Without a same-sized image, any same-sized file is used."""

    catalog = _catalog(("clip.heic", 64))

    assert match_attachment(AttachmentReference(None, "image/heic", 64), catalog) == 0


def test_unknown_name_falls_back_to_size() -> None:
    """A name that is not on disk still matches by size."""

    catalog = _catalog(("IMG_0001.jpg", 439593))
    ref = AttachmentReference("signal-2024.jpg", "image/jpeg", 439593)

    assert match_attachment(ref, catalog) == 0


def test_each_entry_is_claimed_once() -> None:
    """Identical references bind to distinct files, then stop matching."""

    catalog = _catalog(("one.png", 7), ("two.png", 7))
    ref = AttachmentReference(None, "image/png", 7)

    results = [match_attachment(ref, catalog) for _ in range(3)]

    assert results == [0, 1, None]
    assert catalog.remaining() == 0


def test_consumed_name_match_falls_back_to_size() -> None:
    """Once a named file is consumed, the reference can still match by size."""

    catalog = _catalog(("a.png", 5), ("b.png", 5))
    ref = AttachmentReference("a.png", "image/png", 5)

    assert match_attachment(ref, catalog) == 0
    assert match_attachment(ref, catalog) == 1


def test_match_method_is_logged_at_info(caplog: pytest.LogCaptureFixture) -> None:
    """Each match reports at INFO whether it was found by name or by size."""

    catalog = _catalog(("a.png", 5), ("b.png", 9))

    with caplog.at_level(logging.INFO, logger="transcript_tex.matcher"):
        match_attachment(AttachmentReference("a.png", "image/png", 5), catalog)
        match_attachment(AttachmentReference(None, "image/png", 9), catalog)

    messages = [r.getMessage() for r in caplog.records if r.levelno == logging.INFO]
    assert "Matched a.png by name" in messages
    assert "Matched b.png by size" in messages


def test_reference_without_name_or_size_is_unmatched() -> None:
    """Nothing to match on is a valid unmatched outcome."""

    catalog = _catalog(("a.png", 0))

    assert match_attachment(AttachmentReference(), catalog) is None
    assert not catalog[0].consumed


def test_matching_is_deterministic(tmp_path: Path) -> None:
    """Repeated runs over the same directory produce the same assignments."""

    att = tmp_path / "attachments"
    att.mkdir()
    for name in ("z.png", "m.png", "a.dat", "k.gif"):
        (att / name).write_bytes(b"1234")
    refs = [
        AttachmentReference(None, "image/png", 4),
        AttachmentReference(None, "application/pdf", 4),
        AttachmentReference(None, "image/gif", 4),
        AttachmentReference(None, "image/png", 4),
    ]

    def run() -> list:
        catalog = load_catalog(att)
        indices = [match_attachment(r, catalog) for r in refs]
        return [catalog[idx].name for idx in indices]

    first = run()
    assert first == run()
    assert first == ["k.gif", "a.dat", "m.png", "z.png"]
    assert len(set(first)) == len(first)
