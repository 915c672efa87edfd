"""Manifest: hierarchical index of items over the flat note directory.

Items reference their parent by slug only; an item's path is never stored,
it is derived by walking parent slugs up to a root item:

    {"parent": null,  "slug": "a", "title": "Books"}     -> /Books
    {"parent": "a",   "slug": "b", "title": "Fiction"}   -> /Books/Fiction

A Manifest is an immutable snapshot. ``insert`` returns a new Manifest and
leaves the receiver untouched, so a failed insert never leaves partial state.
"""

from __future__ import annotations

import json
import posixpath
from dataclasses import dataclass
from typing import Any

from note.errors import (
    DecodeError,
    DuplicatePathError,
    NoSuchParentError,
    ParentCycleError,
    UnknownParentError,
)
from note.models import Item

ROOT = "/"


def _join(base: str, segment: str) -> str:
    # Titles are literal segments: "/A" + "/B" gives "/A//B", never "/B".
    if base.endswith("/"):
        return base + segment
    return f"{base}/{segment}"


@dataclass(frozen=True)
class Manifest:
    """Ordered collection of items; most recently inserted first."""

    items: tuple[Item, ...] = ()

    @classmethod
    def empty(cls) -> Manifest:
        return cls()

    # ------------------------------------------------------------------
    # Path resolution
    # ------------------------------------------------------------------

    def _parent_of(self, item: Item) -> Item:
        for other in self.items:
            if other.slug == item.parent:
                return other
        msg = f"unknown parent {item.parent!r} for item {item.slug!r}"
        raise UnknownParentError(msg)

    def _resolve(self, item: Item, seen: frozenset[str]) -> str:
        if item.parent is None:
            return _join(ROOT, item.title)
        if item.parent in seen:
            msg = f"parent cycle through {item.parent!r} while resolving {item.slug!r}"
            raise ParentCycleError(msg)
        parent = self._parent_of(item)
        base = self._resolve(parent, seen | {item.parent})
        return _join(base, item.title)

    def resolve_path(self, item: Item) -> str:
        """Return the ``/``-joined titles from the root down to *item*."""
        return self._resolve(item, frozenset({item.slug}))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def exists(self, path: str) -> bool:
        return any(self.resolve_path(item) == path for item in self.items)

    def find(self, path: str) -> Item | None:
        """First item, in collection order, whose path equals *path*."""
        for item in self.items:
            if self.resolve_path(item) == path:
                return item
        return None

    def list_children(self, path: str) -> list[Item]:
        """Items exactly one level below *path* (not *path*, not deeper)."""
        return [item for item in self.items if posixpath.dirname(self.resolve_path(item)) == path]

    def paths(self) -> list[tuple[str, Item]]:
        return [(self.resolve_path(item), item) for item in self.items]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def insert(
        self,
        path: str,
        slug: str,
        title: str,
        description: str = "",
        tags: list[str] | tuple[str, ...] = (),
    ) -> Manifest:
        """Return a new manifest with an item added below *path*.

        An empty *path* or ``/`` inserts a root item. Raises
        NoSuchParentError if *path* names no item and DuplicatePathError if
        the new item's path is already taken.
        """
        if path in ("", ROOT):
            parent = None
        else:
            found = self.find(path)
            if found is None:
                msg = f"no parent at path: {path}"
                raise NoSuchParentError(msg)
            parent = found.slug

        item = Item.make(parent, slug, title, description, tags)
        item_path = self.resolve_path(item)
        if self.exists(item_path):
            msg = f"duplicate item: {item_path}"
            raise DuplicatePathError(msg)
        return Manifest(items=(item, *self.items))

    # ------------------------------------------------------------------
    # (De)serialisation
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, d: Any) -> Manifest:
        if not isinstance(d, dict) or "items" not in d:
            msg = "manifest document must be an object with an 'items' list"
            raise DecodeError(msg)
        raw = d["items"]
        if not isinstance(raw, list):
            msg = "manifest 'items' must be a list"
            raise DecodeError(msg)
        return cls(items=tuple(Item.from_dict(obj) for obj in raw))

    def to_dict(self) -> dict[str, Any]:
        return {"items": [item.to_dict() for item in self.items]}

    @classmethod
    def loads(cls, text: str) -> Manifest:
        try:
            doc = json.loads(text)
        except (json.JSONDecodeError, RecursionError) as exc:
            msg = f"manifest is not valid JSON: {exc}"
            raise DecodeError(msg) from exc
        return cls.from_dict(doc)

    def dumps(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    list = list_children
