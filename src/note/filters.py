"""Select notes by title/tag keywords, tag subsets, or manifest paths."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from note.errors import AmbiguousMatchError

if TYPE_CHECKING:
    from pathlib import Path

    from note.manifest import Manifest
    from note.models import Note


class FilterKind(str, Enum):
    KEYS = "keys"       # any term equals the title or one of the tags
    SUBSET = "subset"   # every term is one of the tags
    PATH = "path"       # manifest path resolves to an item with the note's slug


def _matches(kind: FilterKind, terms: list[str], note: Note, slug: str, manifest: Manifest | None) -> bool:
    if not terms:
        return True
    tags = {t.lower() for t in note.tags}
    if kind is FilterKind.KEYS:
        keys = tags | {note.title.lower()}
        return any(t.lower() in keys for t in terms)
    if kind is FilterKind.SUBSET:
        return all(t.lower() in tags for t in terms)
    if manifest is None:
        return False
    for term in terms:
        item = manifest.find(term)
        if item is not None and item.slug == slug:
            return True
    return False


def find_many(
    kind: FilterKind,
    terms: list[str],
    notes: list[tuple[Note, Path]],
    manifest: Manifest | None = None,
) -> list[tuple[Note, Path]]:
    return [(n, p) for n, p in notes if _matches(kind, terms, n, p.stem, manifest)]


def find_one(
    kind: FilterKind,
    terms: list[str],
    notes: list[tuple[Note, Path]],
    manifest: Manifest | None = None,
) -> tuple[Note, Path] | None:
    """Return the single matching note, None if there is none.

    Raises AmbiguousMatchError when several notes match.
    """
    found = find_many(kind, terms, notes, manifest)
    if len(found) > 1:
        titles = ", ".join(n.title for n, _ in found)
        msg = f"{len(found)} notes match ({titles}); narrow the filter"
        raise AmbiguousMatchError(msg)
    return found[0] if found else None
