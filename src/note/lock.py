"""Sentinel-file lock guarding manifest writes.

The lock is a file named ``note.lock`` next to the manifest. Its presence
means a save is in progress; its content is irrelevant. There is no timeout,
retry, or ownership: a writer that crashes while holding the lock leaves it
behind and the file has to be removed by hand.
"""

from __future__ import annotations

import contextlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from note.errors import LockAcquisitionError

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

LOCK_FILENAME = "note.lock"
LOCK_CONTENT = "<locked>"


def lockfile(path: Path | str) -> Path:
    """Lock path for the document at *path*: a sibling in the same directory."""
    return Path(path).parent / LOCK_FILENAME


def lock(path: Path | str) -> None:
    """Create the lock file at *path*, failing if it already exists."""
    path = Path(path)
    try:
        # "x" makes the existence check and the create a single step
        with path.open("x") as f:
            f.write(LOCK_CONTENT)
    except FileExistsError as exc:
        msg = f"unable to acquire lock: {path}"
        raise LockAcquisitionError(msg) from exc
    logger.debug("lock acquired: %s", path)


def unlock(path: Path | str) -> None:
    """Remove the lock file at *path*; no-op when it is absent."""
    Path(path).unlink(missing_ok=True)
    logger.debug("lock released: %s", path)


@contextlib.contextmanager
def locked(path: Path | str) -> Iterator[None]:
    """Hold the lock at *path* for the duration of the block."""
    lock(path)
    try:
        yield
    finally:
        unlock(path)
