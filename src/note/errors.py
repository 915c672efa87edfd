"""Exceptions raised by the manifest, lock, store, and config layers."""

from __future__ import annotations


class NoteError(Exception):
    """Base class for every failure the CLI reports to the user."""


class DecodeError(NoteError):
    """A persisted document is malformed or missing required fields."""


class UnknownParentError(NoteError):
    """An item's parent slug does not resolve to any item in the manifest."""


class ParentCycleError(UnknownParentError):
    """Walking an item's parent chain revisits a slug."""


class NoSuchParentError(NoteError):
    """An insertion path does not resolve to an existing item."""


class DuplicatePathError(NoteError):
    """An inserted item would resolve to a path that already exists."""


class LockAcquisitionError(NoteError):
    """Another writer holds the manifest lock."""


class AmbiguousMatchError(NoteError):
    """A filter that must select one note selected several."""


class ConfigError(NoteError):
    """The configuration file holds an unsupported key or value."""
