"""Data models: manifest items and markdown notes."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

import yaml

from note.errors import DecodeError

# YAML front-matter block
_FRONTMATTER_RE = re.compile(r"^---[ \t]*\n(.*?)\n---[ \t]*\n?", re.DOTALL)


def _require_str(doc: dict[str, Any], key: str) -> str:
    if key not in doc:
        msg = f"item is missing required field: {key}"
        raise DecodeError(msg)
    value = doc[key]
    if not isinstance(value, str):
        msg = f"item field {key!r} must be a string, got {type(value).__name__}"
        raise DecodeError(msg)
    return value


@dataclass(frozen=True)
class Item:
    """One manifest entry; a node in the virtual tree of notes."""

    slug: str
    title: str                          # path segment name
    description: str = ""
    tags: tuple[str, ...] = ()
    parent: str | None = None           # slug of the parent item, None for root entries

    @classmethod
    def make(
        cls,
        parent: str | None,
        slug: str,
        title: str,
        description: str,
        tags: list[str] | tuple[str, ...],
    ) -> Item:
        return cls(slug=slug, title=title, description=description, tags=tuple(tags), parent=parent)

    @classmethod
    def from_dict(cls, d: Any) -> Item:
        if not isinstance(d, dict):
            msg = f"item must be an object, got {type(d).__name__}"
            raise DecodeError(msg)
        slug = _require_str(d, "slug")
        title = _require_str(d, "title")
        description = _require_str(d, "description")
        if "tags" not in d:
            msg = "item is missing required field: tags"
            raise DecodeError(msg)
        tags = d["tags"]
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            msg = f"item {slug!r}: tags must be a list of strings"
            raise DecodeError(msg)
        parent = d.get("parent")
        if parent is not None and not isinstance(parent, str):
            msg = f"item {slug!r}: parent must be a string or null"
            raise DecodeError(msg)
        return cls(slug=slug, title=title, description=description, tags=tuple(tags), parent=parent)

    def to_dict(self) -> dict[str, Any]:
        return {
            "parent": self.parent,
            "slug": self.slug,
            "title": self.title,
            "description": self.description,
            "tags": list(self.tags),
        }


@dataclass
class Note:
    """A markdown note: YAML front-matter header followed by free text."""

    title: str
    description: str = ""
    tags: list[str] = field(default_factory=list)
    content: str = ""

    @classmethod
    def build(cls, title: str, tags: list[str] | None = None, content: str = "", description: str = "") -> Note:
        return cls(title=title, description=description, tags=list(tags or []), content=content)

    @classmethod
    def from_string(cls, text: str) -> Note:
        """Parse a note file.

        Files without a front-matter block are accepted; the first line then
        serves as the title.
        """
        match = _FRONTMATTER_RE.match(text)
        if not match:
            first, _, rest = text.partition("\n")
            return cls(title=first.lstrip("# ").strip(), content=rest)
        try:
            meta = yaml.safe_load(match.group(1)) or {}
        except yaml.YAMLError as exc:
            msg = f"invalid note front-matter: {exc}"
            raise DecodeError(msg) from exc
        if not isinstance(meta, dict):
            msg = "note front-matter must be a mapping"
            raise DecodeError(msg)
        tags = meta.get("tags") or []
        if isinstance(tags, str):
            tags = [t.strip() for t in tags.split(",") if t.strip()]
        return cls(
            title=str(meta.get("title") or ""),
            description=str(meta.get("description") or ""),
            tags=[str(t) for t in tags],
            content=text[match.end():],
        )

    def to_string(self) -> str:
        header = yaml.safe_dump(
            {"title": self.title, "description": self.description, "tags": self.tags},
            sort_keys=False,
            allow_unicode=True,
        )
        return f"---\n{header}---\n{self.content}"

    @property
    def word_count(self) -> int:
        return len(self.content.split())

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "tags": self.tags,
            "content": self.content,
        }
