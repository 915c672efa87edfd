"""note CLI: markdown notes in a flat directory plus a hierarchical manifest.

Commands:
    note init                       write config.toml, create state dir + manifest
    note config [--get KEY]         show configuration
    note create TITLE [TAGS...]     create a note (in $EDITOR, or from --stdin)
    note ls [TERMS...]              list notes matching a filter
    note tree [PATH]                list manifest entries directly below PATH
    note cat [TERMS...]             print matching notes
    note edit [TERMS...]            open the single matching note in $EDITOR
    note delete [TERMS...]          remove the single matching note file
"""

from __future__ import annotations

import contextlib
import json
import logging
import subprocess
from typing import TYPE_CHECKING

import click
import yaml

from note import editor
from note.config import Column, Encoding, ListStyle, NoteConfig, init_config, load_config
from note.errors import NoteError
from note.filters import FilterKind, find_many, find_one
from note.manifest import ROOT
from note.models import Note
from note.store import NoteStore

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@contextlib.contextmanager
def _user_errors() -> Iterator[None]:
    """Report domain and subprocess failures as CLI errors (exit 1)."""
    try:
        yield
    except NoteError as exc:
        raise click.ClickException(str(exc)) from exc
    except subprocess.CalledProcessError as exc:
        raise click.ClickException(f"command failed ({exc.returncode}): {exc.cmd}") from exc


def _load_cfg() -> NoteConfig:
    with _user_errors():
        cfg = load_config()
    cfg.ensure_dirs()
    return cfg


def _encode(data: dict, note: Note | None, encoding: Encoding) -> str:
    if encoding is Encoding.JSON:
        return json.dumps(data, ensure_ascii=False)
    if encoding is Encoding.YAML:
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True).rstrip("\n")
    if note is not None:
        return note.to_string()
    return "\n".join(f"{k}: {v}" for k, v in data.items())


_FIXED_WIDTHS = {
    Column.TITLE: 32,
    Column.DESCRIPTION: 40,
    Column.TAGS: 24,
    Column.WORDS: 6,
    Column.SLUG: 20,
}


def _cell(column: Column, note: Note, path: Path) -> str:
    if column is Column.TITLE:
        return note.title
    if column is Column.DESCRIPTION:
        return note.description
    if column is Column.TAGS:
        return ",".join(note.tags)
    if column is Column.WORDS:
        return str(note.word_count)
    return path.stem


def _format_row(cfg: NoteConfig, note: Note, path: Path) -> str:
    if cfg.list_style is ListStyle.SIMPLE:
        return note.title
    cells = [_cell(c, note, path) for c in cfg.column_list]
    if cfg.list_style is ListStyle.WIDE:
        return "  ".join(cells)
    parts = []
    for column, cell in zip(cfg.column_list, cells, strict=True):
        width = _FIXED_WIDTHS[column]
        if len(cell) > width:
            cell = cell[: width - 1] + "…"
        parts.append(cell.ljust(width))
    return "  ".join(parts).rstrip()


def _select(store: NoteStore, kind: FilterKind, terms: tuple[str, ...]) -> tuple[Note, Path]:
    """The one note matching *terms*; ClickException for none or many."""
    manifest = store.load_manifest() if kind is FilterKind.PATH else None
    found = find_one(kind, list(terms), list(store.iter_notes()), manifest)
    if found is None:
        raise click.ClickException("not found")
    return found


_kind_option = click.option(
    "--kind",
    "kind",
    type=click.Choice([k.value for k in FilterKind]),
    default=FilterKind.KEYS.value,
    show_default=True,
    callback=lambda _ctx, _param, value: FilterKind(value),
    help="How TERMS select notes",
)

_encoding_choice = click.Choice([e.value for e in Encoding])


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="note")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
def cli(verbose: bool) -> None:
    """note — simple CLI note taking."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


# ---------------------------------------------------------------------------
# note init / note config
# ---------------------------------------------------------------------------


@cli.command()
def init() -> None:
    """Write a default config.toml and initialise the state directory."""
    try:
        config_path = init_config()
        click.echo(f"Created {config_path}")
    except FileExistsError:
        click.echo("config already exists — skipping")

    cfg = _load_cfg()
    store = NoteStore(cfg.state_dir)
    with _user_errors():
        manifest = store.load_manifest()
    click.echo(f"State dir : {cfg.state_dir}")
    click.echo(f"Manifest  : {store.manifest_path} ({len(manifest.items)} items)")


@cli.command("config")
@click.option("--get", "key", default=None, help="Print a single config value")
@click.option("--encoding", type=_encoding_choice, default=Encoding.JSON.value, show_default=True)
def show_config(key: str | None, encoding: str) -> None:
    """Display the configuration, or one value of it.

    \b
    note config
    note config --get state_dir
    """
    cfg = _load_cfg()
    if key is not None:
        with _user_errors():
            click.echo(cfg.get(key))
        return
    click.echo(_encode(cfg.to_dict(), None, Encoding(encoding)))


# ---------------------------------------------------------------------------
# note create
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("title")
@click.argument("tags", nargs=-1)
@click.option("--stdin", "from_stdin", is_flag=True, help="Read the note body from stdin instead of $EDITOR")
@click.option("--path", "parent_path", default=ROOT, show_default=True, help="Manifest path to file the note under")
@click.option("--description", "-d", default="", help="One-line description")
def create(title: str, tags: tuple[str, ...], from_stdin: bool, parent_path: str, description: str) -> None:
    """Create a new note and add it to the manifest.

    \b
    note create "Vim Commands" programming linux
    cat some_file.txt | note create --stdin "Some File" baz
    note create --path /Books "Dune" scifi
    """
    if not title.strip():
        raise click.BadParameter("title must not be empty", param_hint="TITLE")

    cfg = _load_cfg()
    store = NoteStore(cfg.state_dir)
    slug = store.next_slug()
    dest = store.path_for(slug)

    with _user_errors():
        # Insert first so a duplicate or missing parent aborts before the note is written
        manifest = store.load_manifest()
        updated = manifest.insert(parent_path, str(slug), title, description, list(tags))

        if from_stdin:
            content = click.get_text_stream("stdin").read()
            note = Note.build(title, list(tags), content, description)
            editor.create(dest, note.to_string(), cfg.on_modification)
            written = True
        else:
            note = Note.build(title, list(tags), "", description)
            written = editor.create_on_change(note.to_string(), dest, cfg.editor, cfg.on_modification)

        if not written:
            click.echo("Note unchanged — not saved")
            return
        store.save_manifest(updated)

    click.echo(f"Created {updated.resolve_path(updated.items[0])}  [{slug}]")


# ---------------------------------------------------------------------------
# note ls / note tree
# ---------------------------------------------------------------------------


@cli.command("ls")
@click.argument("terms", nargs=-1)
@_kind_option
def list_notes(terms: tuple[str, ...], kind: FilterKind) -> None:
    """List notes, optionally filtered.

    \b
    note ls                       # all notes
    note ls fuu bar               # title or tag is fuu or bar
    note ls --kind subset a b     # tagged with both a and b
    """
    cfg = _load_cfg()
    store = NoteStore(cfg.state_dir)
    with _user_errors():
        manifest = store.load_manifest() if kind is FilterKind.PATH else None
        notes = find_many(kind, list(terms), list(store.iter_notes()), manifest)
    if not notes:
        click.echo("(no notes)")
        return
    for note, path in notes:
        click.echo(_format_row(cfg, note, path))


@cli.command()
@click.argument("path", default=ROOT)
@click.option("--recursive", "-r", is_flag=True, help="Show every entry below PATH")
def tree(path: str, recursive: bool) -> None:
    """List manifest entries directly below PATH (default: /)."""
    cfg = _load_cfg()
    store = NoteStore(cfg.state_dir)
    with _user_errors():
        manifest = store.load_manifest()
        if recursive:
            prefix = path.rstrip("/") + "/"
            entries = sorted(((p, i) for p, i in manifest.paths() if p.startswith(prefix)), key=lambda e: e[0])
        else:
            entries = sorted(((manifest.resolve_path(i), i) for i in manifest.list(path)), key=lambda e: e[0])
    if not entries:
        click.echo("(empty)")
        return
    for item_path, item in entries:
        desc = f"  {item.description}" if item.description else ""
        click.echo(f"{item_path}  [{item.slug}]{desc}")


# ---------------------------------------------------------------------------
# note cat / note edit / note delete
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("terms", nargs=-1)
@_kind_option
@click.option("--encoding", type=_encoding_choice, default=None, help="Output format (default: config encoding)")
def cat(terms: tuple[str, ...], kind: FilterKind, encoding: str | None) -> None:
    """Write matching notes to stdout."""
    cfg = _load_cfg()
    store = NoteStore(cfg.state_dir)
    enc = Encoding(encoding) if encoding else cfg.encoding
    with _user_errors():
        manifest = store.load_manifest() if kind is FilterKind.PATH else None
        notes = find_many(kind, list(terms), list(store.iter_notes()), manifest)
    for note, _path in notes:
        click.echo(_encode(note.to_dict(), note, enc))


@cli.command()
@click.argument("terms", nargs=-1)
@_kind_option
def edit(terms: tuple[str, ...], kind: FilterKind) -> None:
    """Open the single matching note in $EDITOR."""
    cfg = _load_cfg()
    store = NoteStore(cfg.state_dir)
    with _user_errors():
        _note, path = _select(store, kind, terms)
        changed = editor.edit(path, cfg.editor, cfg.on_modification)
    if changed:
        click.echo(f"Updated {path.stem}")


@cli.command()
@click.argument("terms", nargs=-1)
@_kind_option
@click.confirmation_option(prompt="Delete the matching note?")
def delete(terms: tuple[str, ...], kind: FilterKind) -> None:
    """Delete the single matching note file.

    The note's manifest entry is left in place.
    """
    cfg = _load_cfg()
    store = NoteStore(cfg.state_dir)
    with _user_errors():
        note, path = _select(store, kind, terms)
    store.delete(path)
    click.echo(f"Deleted {note.title}  [{path.stem}]")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    cli(standalone_mode=True)


if __name__ == "__main__":
    main()
