"""Note store: flat markdown files plus a hierarchical JSON manifest.

Layout:
    <state_dir>/
        note-YYYYMMDD-N.md   # one note per file: YAML front-matter + body
        manifest.json        # {"items": [{"parent", "slug", "title", "description", "tags"}]}
        note.lock            # sentinel, present only while manifest.json is being saved

Manifest items form a tree through parent slugs; an item's path
(``/Books/Fiction``) is derived from its ancestors' titles, never stored.

Concurrent writes: a save fails immediately with LockAcquisitionError while
note.lock exists. Readers are not locked out.
"""

from note.config import NoteConfig, init_config, load_config
from note.manifest import Manifest
from note.models import Item, Note
from note.store import NoteStore, load_or_init, save

__all__ = [
    "Item",
    "Manifest",
    "Note",
    "NoteConfig",
    "NoteStore",
    "init_config",
    "load_config",
    "load_or_init",
    "save",
]
