"""Write notes and hand them to the user's editor.

Callbacks (``on_modification`` in the config) are shell commands run after a
note is written or changed; a non-zero exit raises CalledProcessError.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def _run_callback(callback: str | None) -> None:
    if callback:
        logger.debug("running callback: %s", callback)
        subprocess.run(callback, shell=True, check=True)  # noqa: S602


def _run_editor(editor: str, path: Path) -> None:
    subprocess.run([*shlex.split(editor), str(path)], check=True)


def create(dest: Path, content: str, callback: str | None = None) -> None:
    """Write *content* to *dest* and run the callback."""
    dest.write_text(content, encoding="utf-8")
    logger.info("wrote note: %s", dest)
    _run_callback(callback)


def create_on_change(content: str, dest: Path, editor: str, callback: str | None = None) -> bool:
    """Open *content* in the editor; save to *dest* only if it was changed.

    Returns True when *dest* was written.
    """
    with tempfile.TemporaryDirectory(prefix="note-") as tmp_dir:
        tmp = Path(tmp_dir) / "note.md"
        tmp.write_text(content, encoding="utf-8")
        _run_editor(editor, tmp)
        new_content = tmp.read_text(encoding="utf-8")
    if new_content == content:
        logger.info("note unchanged, nothing written")
        return False
    create(dest, new_content, callback)
    return True


def edit(path: Path, editor: str, callback: str | None = None) -> bool:
    """Edit *path* in place; run the callback if the content changed."""
    before = path.read_text(encoding="utf-8")
    _run_editor(editor, path)
    if path.read_text(encoding="utf-8") == before:
        return False
    logger.info("note modified: %s", path)
    _run_callback(callback)
    return True
