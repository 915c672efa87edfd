"""Tests for manifest persistence and the flat note store."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from note.errors import DecodeError, LockAcquisitionError
from note.lock import lock
from note.manifest import Manifest
from note.models import Note
from note.slug import Slug
from note.store import NoteStore, load_or_init, save


@pytest.fixture
def store(tmp_path: Path) -> NoteStore:
    return NoteStore(tmp_path / "state")


class TestLoadOrInit:
    def test_creates_empty_document(self, tmp_path: Path):
        path = tmp_path / "manifest.json"
        manifest = load_or_init(path)
        assert manifest == Manifest.empty()
        assert json.loads(path.read_text()) == {"items": []}

    def test_creates_parent_dirs(self, tmp_path: Path):
        path = tmp_path / "deep" / "dir" / "manifest.json"
        load_or_init(path)
        assert path.exists()

    def test_reads_existing(self, tmp_path: Path):
        path = tmp_path / "manifest.json"
        path.write_text(json.dumps({"items": [
            {"parent": None, "slug": "a", "title": "A", "description": "", "tags": []},
        ]}))
        manifest = load_or_init(path)
        assert manifest.exists("/A")

    def test_malformed_document(self, tmp_path: Path):
        path = tmp_path / "manifest.json"
        path.write_text('{"items": [{"title": "no slug"}]}')
        with pytest.raises(DecodeError):
            load_or_init(path)
        assert path.read_text() == '{"items": [{"title": "no slug"}]}'

    def test_undecodable_bytes(self, tmp_path: Path):
        path = tmp_path / "manifest.json"
        path.write_bytes(b'{"items": [{"slug": "\xff"}]}')
        with pytest.raises(DecodeError, match="UTF-8"):
            load_or_init(path)

    def test_not_json(self, tmp_path: Path):
        path = tmp_path / "manifest.json"
        path.write_text("items: []\n")
        with pytest.raises(DecodeError, match="JSON"):
            load_or_init(path)

    def test_deeply_nested_json(self, tmp_path: Path):
        path = tmp_path / "manifest.json"
        path.write_text("[" * 100_000)
        with pytest.raises(DecodeError):
            load_or_init(path)


class TestSave:
    def test_round_trip_through_disk(self, tmp_path: Path):
        path = tmp_path / "manifest.json"
        manifest = Manifest.empty().insert("", "a", "A").insert("/A", "b", "B", "desc", ["t"])
        save(path, manifest)
        assert load_or_init(path) == manifest

    def test_releases_lock(self, tmp_path: Path):
        path = tmp_path / "manifest.json"
        save(path, Manifest.empty())
        assert not (tmp_path / "note.lock").exists()
        assert not (tmp_path / "manifest.json.tmp").exists()

    def test_refuses_when_locked(self, tmp_path: Path):
        path = tmp_path / "manifest.json"
        load_or_init(path)
        lock(tmp_path / "note.lock")
        with pytest.raises(LockAcquisitionError):
            save(path, Manifest.empty().insert("", "a", "A"))
        assert json.loads(path.read_text()) == {"items": []}
        assert (tmp_path / "note.lock").exists()

    def test_whole_document_rewrite(self, tmp_path: Path):
        path = tmp_path / "manifest.json"
        save(path, Manifest.empty().insert("", "a", "A"))
        save(path, Manifest.empty().insert("", "b", "B"))
        doc = json.loads(path.read_text())
        assert [i["slug"] for i in doc["items"]] == ["b"]

    def test_failed_write_cleans_up(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "manifest.json"
        save(path, Manifest.empty().insert("", "a", "A"))

        def fail(self, target):
            raise OSError("disk full")

        monkeypatch.setattr(Path, "replace", fail)
        with pytest.raises(OSError, match="disk full"):
            save(path, Manifest.empty().insert("", "b", "B"))

        assert not (tmp_path / "manifest.json.tmp").exists()
        assert not (tmp_path / "note.lock").exists()
        assert [i["slug"] for i in json.loads(path.read_text())["items"]] == ["a"]


class TestNoteStore:
    def test_manifest_lives_in_state_dir(self, store: NoteStore):
        manifest = store.load_manifest()
        assert store.manifest_path == store.state_dir / "manifest.json"
        assert store.manifest_path.exists()
        store.save_manifest(manifest.insert("", "a", "A"))
        assert store.load_manifest().exists("/A")

    def test_next_slug_counts_existing_notes(self, store: NoteStore):
        first = store.next_slug()
        store.path_for(first).write_text(Note.build("One").to_string())
        second = store.next_slug()
        assert second.date == first.date
        assert second.index == first.index + 1

    def test_iter_notes(self, store: NoteStore):
        older = Slug(date(2024, 1, 1), 0)
        newer = Slug(date(2024, 1, 2), 0)
        store.path_for(newer).write_text(Note.build("Newer").to_string())
        store.path_for(older).write_text(Note.build("Older").to_string())
        (store.state_dir / "README.md").write_text("not a note")
        titles = [n.title for n, _ in store.iter_notes()]
        assert titles == ["Older", "Newer"]

    def test_read(self, store: NoteStore):
        slug = Slug(date(2024, 1, 1), 3)
        store.path_for(slug).write_text(Note.build("Hello", ["x"]).to_string())
        assert store.read(slug).tags == ["x"]
        assert store.read("note-20240101-3").title == "Hello"

    def test_undecodable_note(self, store: NoteStore):
        slug = Slug(date(2024, 1, 1), 0)
        store.path_for(slug).write_bytes(b"---\ntitle: \xff\n---\n")
        with pytest.raises(DecodeError, match="UTF-8"):
            store.read(slug)
        with pytest.raises(DecodeError):
            list(store.iter_notes())

    def test_delete_keeps_manifest_entry(self, store: NoteStore):
        slug = store.next_slug()
        path = store.path_for(slug)
        path.write_text(Note.build("Gone").to_string())
        store.save_manifest(store.load_manifest().insert("", str(slug), "Gone"))

        store.delete(path)

        assert not path.exists()
        assert store.load_manifest().find("/Gone").slug == str(slug)
