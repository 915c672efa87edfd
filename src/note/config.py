"""NoteConfig: user config for the note CLI.

Location: $NOTE_CONFIG, else ~/.config/note/config.toml.

config.toml example:

    state_dir = "~/.local/share/note"
    editor = "nvim"
    on_modification = "git -C ~/.local/share/note commit -am update"
    list_style = "fixed"          # fixed | wide | simple
    encoding = "raw"              # json | yaml | raw
    column_list = ["title", "tags", "words", "slug"]

Environment: NOTE_STATE_DIR overrides state_dir; EDITOR is the fallback
editor when the file sets none.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from note.errors import ConfigError

_CONFIG_ENV = "NOTE_CONFIG"
_STATE_DIR_ENV = "NOTE_STATE_DIR"
_DEFAULT_EDITOR = "vi"


class ListStyle(str, Enum):
    FIXED = "fixed"
    WIDE = "wide"
    SIMPLE = "simple"


class Encoding(str, Enum):
    JSON = "json"
    YAML = "yaml"
    RAW = "raw"


class Column(str, Enum):
    TITLE = "title"
    DESCRIPTION = "description"
    TAGS = "tags"
    WORDS = "words"
    SLUG = "slug"


_DEFAULT_COLUMNS = [Column.TITLE, Column.TAGS, Column.WORDS, Column.SLUG]


def default_config_path() -> Path:
    env = os.environ.get(_CONFIG_ENV)
    if env:
        return Path(env).expanduser()
    return Path.home() / ".config" / "note" / "config.toml"


def default_state_dir() -> Path:
    return Path.home() / ".local" / "share" / "note"


def _enum(cls: type[Enum], key: str, value: Any) -> Any:
    try:
        return cls(value)
    except ValueError as exc:
        allowed = ", ".join(m.value for m in cls)  # type: ignore[attr-defined]
        msg = f"unsupported {key}: {value!r} (expected one of {allowed})"
        raise ConfigError(msg) from exc


def _str(raw: dict[str, Any], key: str) -> str | None:
    value = raw.get(key)
    if value is not None and not isinstance(value, str):
        msg = f"{key} must be a string, got {value!r}"
        raise ConfigError(msg)
    return value


@dataclass
class NoteConfig:
    """Resolved configuration."""

    state_dir: Path = field(default_factory=default_state_dir)
    editor: str = _DEFAULT_EDITOR
    on_modification: str | None = None
    list_style: ListStyle = ListStyle.FIXED
    encoding: Encoding = Encoding.RAW
    column_list: list[Column] = field(default_factory=lambda: list(_DEFAULT_COLUMNS))

    def ensure_dirs(self) -> None:
        self.state_dir.mkdir(parents=True, exist_ok=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "state_dir": str(self.state_dir),
            "editor": self.editor,
            "on_modification": self.on_modification,
            "list_style": self.list_style.value,
            "encoding": self.encoding.value,
            "column_list": [c.value for c in self.column_list],
        }

    def get(self, key: str) -> str:
        """Display value of *key*; unset optional keys read as ``null``."""
        d = self.to_dict()
        if key not in d:
            msg = f"bad configuration key: {key}"
            raise ConfigError(msg)
        value = d[key]
        if value is None:
            return "null"
        if isinstance(value, list):
            return " ".join(value)
        return str(value)


def load_config(path: Path | str | None = None) -> NoteConfig:
    """Load config.toml; missing file means all defaults.

    Priority: environment variables > config file > defaults.
    """
    config_path = Path(path) if path else default_config_path()

    raw: dict[str, Any] = {}
    if config_path.exists():
        try:
            with config_path.open("rb") as f:
                raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            msg = f"invalid config file {config_path}: {exc}"
            raise ConfigError(msg) from exc

    state_dir = _str(raw, "state_dir")
    state_dir = os.environ.get(_STATE_DIR_ENV) or state_dir
    editor = _str(raw, "editor")
    on_modification = _str(raw, "on_modification")
    columns = raw.get("column_list")
    if columns is not None and not isinstance(columns, list):
        msg = "column_list must be a list of column names"
        raise ConfigError(msg)

    return NoteConfig(
        state_dir=Path(state_dir).expanduser() if state_dir else default_state_dir(),
        editor=editor or os.environ.get("EDITOR") or _DEFAULT_EDITOR,
        on_modification=on_modification or None,
        list_style=_enum(ListStyle, "list_style", raw.get("list_style", ListStyle.FIXED.value)),
        encoding=_enum(Encoding, "encoding", raw.get("encoding", Encoding.RAW.value)),
        column_list=(
            [_enum(Column, "column", c) for c in columns] if columns is not None else list(_DEFAULT_COLUMNS)
        ),
    )


def init_config(path: Path | str | None = None) -> Path:
    """Write a default config.toml. Raises if it already exists."""
    config_path = Path(path) if path else default_config_path()
    if config_path.exists():
        msg = f"config already exists at {config_path}"
        raise FileExistsError(msg)

    config_path.parent.mkdir(parents=True, exist_ok=True)
    content = f"""\
state_dir = "{default_state_dir()}"
# editor = "vi"                  # default: $EDITOR
# on_modification = ""           # shell command run after a note changes
# list_style = "fixed"           # fixed | wide | simple
# encoding = "raw"               # json | yaml | raw
# column_list = ["title", "tags", "words", "slug"]
"""
    config_path.write_text(content)
    return config_path
