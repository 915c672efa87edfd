"""Flat note filenames: ``note-YYYYMMDD-N`` with a per-day counter."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from pathlib import Path

_SLUG_RE = re.compile(r"^note-(\d{8})-(\d+)$")


@dataclass(frozen=True, order=True)
class Slug:
    date: date
    index: int

    @classmethod
    def of_string(cls, text: str) -> Slug | None:
        """Parse ``note-20240131-2``; None for anything else."""
        m = _SLUG_RE.match(text)
        if not m:
            return None
        try:
            day = date(int(m.group(1)[:4]), int(m.group(1)[4:6]), int(m.group(1)[6:]))
        except ValueError:
            return None
        return cls(date=day, index=int(m.group(2)))

    def __str__(self) -> str:
        return f"note-{self.date:%Y%m%d}-{self.index}"

    @property
    def filename(self) -> str:
        return f"{self}.md"

    @classmethod
    def load(cls, state_dir: Path | str) -> list[Slug]:
        """Slugs of every note file in *state_dir*, oldest first."""
        state_dir = Path(state_dir)
        if not state_dir.is_dir():
            return []
        slugs = [cls.of_string(p.stem) for p in state_dir.glob("*.md")]
        return sorted(s for s in slugs if s is not None)

    @classmethod
    def next(cls, slugs: list[Slug], today: date | None = None) -> Slug:
        """First unused slug for *today* (defaults to the current date)."""
        today = today or date.today()
        indices = [s.index for s in slugs if s.date == today]
        return cls(date=today, index=max(indices) + 1 if indices else 0)
