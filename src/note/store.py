"""Read and write the manifest document and the flat note files.

NoteStore is the public API:
    store = NoteStore("~/.local/share/note")
    manifest = store.load_manifest()
    manifest = manifest.insert("/", slug, "Books")
    store.save_manifest(manifest)

State directory layout:
    <state_dir>/
        manifest.json          # {"items": [...]}, rewritten whole on save
        note.lock              # present only while a save is in progress
        note-20240131-0.md     # one markdown file per note
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from note.errors import DecodeError
from note.lock import lockfile, locked
from note.manifest import Manifest
from note.models import Note
from note.slug import Slug

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "manifest.json"


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        msg = f"not valid UTF-8: {path}"
        raise DecodeError(msg) from exc


def load_or_init(path: Path | str) -> Manifest:
    """Load the manifest at *path*, writing an empty one first if missing."""
    path = Path(path)
    if path.exists():
        return Manifest.loads(_read_text(path))
    manifest = Manifest.empty()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(manifest.dumps(), encoding="utf-8")
    logger.info("initialised empty manifest: %s", path)
    return manifest


def save(path: Path | str, manifest: Manifest) -> None:
    """Replace the document at *path* while holding the sibling lock.

    Raises LockAcquisitionError if another writer holds the lock; the
    document is left untouched in that case.
    """
    path = Path(path)
    with locked(lockfile(path)):
        # Write to tmp then rename so the document is replaced in one step
        tmp = path.with_suffix(".json.tmp")
        try:
            tmp.write_text(manifest.dumps(), encoding="utf-8")
            tmp.replace(path)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise
    logger.info("saved manifest with %d items: %s", len(manifest.items), path)


class NoteStore:
    """Markdown notes plus their manifest, rooted at one state directory."""

    def __init__(self, state_dir: Path | str) -> None:
        self.state_dir = Path(state_dir)
        self.state_dir.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Manifest
    # ------------------------------------------------------------------

    @property
    def manifest_path(self) -> Path:
        return self.state_dir / MANIFEST_FILENAME

    def load_manifest(self) -> Manifest:
        return load_or_init(self.manifest_path)

    def save_manifest(self, manifest: Manifest) -> None:
        save(self.manifest_path, manifest)

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------

    def slugs(self) -> list[Slug]:
        return Slug.load(self.state_dir)

    def next_slug(self) -> Slug:
        return Slug.next(self.slugs())

    def path_for(self, slug: Slug | str) -> Path:
        return self.state_dir / f"{slug}.md"

    def read(self, slug: Slug | str) -> Note:
        return Note.from_string(_read_text(self.path_for(slug)))

    def iter_notes(self) -> Iterator[tuple[Note, Path]]:
        """Yield ``(note, path)`` for every note file, oldest first."""
        for slug in self.slugs():
            path = self.path_for(slug)
            yield Note.from_string(_read_text(path)), path

    def delete(self, path: Path) -> None:
        """Remove a note file.

        The manifest item that points at the note is kept; ``note tree``
        keeps listing it until the manifest is edited by hand.
        """
        path.unlink()
        logger.info("deleted note: %s", path)
