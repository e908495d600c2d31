# manifest_db.py
# -*- coding: utf-8 -*-
"""
Bundled save-location database.

The database is a YAML document (Ludusavi manifest layout) mapping game
names to records:

    Stardew Valley:
      files:
        <home>/.config/StardewValley/Saves:
          tags:
            - save
          when:
            - os: linux
              store: steam
      steam:
        id: 413150

Records are re-keyed by their steam.id; records without one are dropped.
The bundled copy is read once per process, on first use.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional

import yaml

import config
from utils import resource_path


class ManifestDatabaseError(ValueError):
    """The manifest document is missing or malformed."""


@dataclass(frozen=True)
class Condition:
    os: Optional[str] = None
    store: Optional[str] = None


@dataclass(frozen=True)
class FileEntry:
    tags: Optional[List[str]] = None
    when: Optional[List[Condition]] = None


@dataclass(frozen=True)
class SteamInfo:
    id: int


@dataclass(frozen=True)
class GameData:
    files: Optional[Dict[str, FileEntry]] = None
    steam: Optional[SteamInfo] = None


# --- Validation helpers ---

def _expect_mapping(value, where: str) -> dict:
    if not isinstance(value, dict):
        raise ManifestDatabaseError(f"{where}: expected a mapping, got {type(value).__name__}")
    return value


def _expect_list(value, where: str) -> list:
    if not isinstance(value, list):
        raise ManifestDatabaseError(f"{where}: expected a list, got {type(value).__name__}")
    return value


def _expect_str(value, where: str) -> str:
    if not isinstance(value, str):
        raise ManifestDatabaseError(f"{where}: expected a string, got {type(value).__name__}")
    return value


def _optional_str(value, where: str) -> Optional[str]:
    if value is None:
        return None
    return _expect_str(value, where)


def _parse_condition(raw, where: str) -> Condition:
    raw = _expect_mapping(raw, where)
    return Condition(
        os=_optional_str(raw.get("os"), f"{where}.os"),
        store=_optional_str(raw.get("store"), f"{where}.store"),
    )


def _parse_file_entry(raw, where: str) -> FileEntry:
    if raw is None:
        return FileEntry()
    raw = _expect_mapping(raw, where)

    tags = None
    if raw.get("tags") is not None:
        tags = [_expect_str(tag, f"{where}.tags") for tag in _expect_list(raw["tags"], f"{where}.tags")]

    when = None
    if raw.get("when") is not None:
        when = [
            _parse_condition(item, f"{where}.when[{index}]")
            for index, item in enumerate(_expect_list(raw["when"], f"{where}.when"))
        ]

    return FileEntry(tags=tags, when=when)


def _parse_steam_info(raw, where: str) -> Optional[SteamInfo]:
    raw = _expect_mapping(raw, where)
    steam_id = raw.get("id")
    if steam_id is None:
        return None
    if isinstance(steam_id, bool) or not isinstance(steam_id, int) or not 0 <= steam_id < 2 ** 64:
        raise ManifestDatabaseError(f"{where}.id: expected an unsigned 64-bit integer, got {steam_id!r}")
    return SteamInfo(id=steam_id)


def parse_game_data(raw, name: str) -> GameData:
    """
    Build a GameData record from one entry of the YAML document.

    Unknown fields are ignored. A null record is treated as empty.

    Raises:
        ManifestDatabaseError: If a known field has the wrong shape
    """
    if raw is None:
        return GameData()
    raw = _expect_mapping(raw, name)

    files = None
    if raw.get("files") is not None:
        files = {
            str(path): _parse_file_entry(entry, f"{name}.files[{path}]")
            for path, entry in _expect_mapping(raw["files"], f"{name}.files").items()
        }

    steam = None
    if raw.get("steam") is not None:
        steam = _parse_steam_info(raw["steam"], f"{name}.steam")

    return GameData(files=files, steam=steam)


class ManifestDatabase:
    """Read-only lookup table of GameData by Steam AppID."""

    def __init__(self, entries: Optional[Dict[int, GameData]] = None):
        self._entries = dict(entries or {})

    @classmethod
    def from_yaml(cls, data) -> "ManifestDatabase":
        """
        Build the table from a YAML document (bytes or str).

        When two records share a steam.id, the later one wins.

        Raises:
            ManifestDatabaseError: If the document is not valid YAML or not a
                mapping of game names to records
        """
        try:
            document = yaml.safe_load(data)
        except yaml.YAMLError as e:
            raise ManifestDatabaseError(f"Manifest database is not valid YAML: {e}") from e

        if document is None:
            document = {}
        document = _expect_mapping(document, "manifest")

        entries = {}
        dropped = 0
        for name, raw in document.items():
            game = parse_game_data(raw, str(name))
            if game.steam is None:
                dropped += 1
                continue
            if game.steam.id in entries:
                logging.debug(f"Duplicate Steam AppID {game.steam.id} ('{name}'), replacing previous record.")
            entries[game.steam.id] = game

        logging.debug(f"Manifest database built: {len(entries)} Steam games, {dropped} records without AppID.")
        return cls(entries)

    @classmethod
    def from_file(cls, file_path) -> "ManifestDatabase":
        try:
            with open(file_path, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise ManifestDatabaseError(f"Cannot read manifest database '{file_path}': {e}") from e
        return cls.from_yaml(data)

    def get(self, appid: int) -> Optional[GameData]:
        return self._entries.get(appid)

    def appids(self) -> list:
        return list(self._entries)

    def __contains__(self, appid) -> bool:
        return appid in self._entries

    def __len__(self) -> int:
        return len(self._entries)


# --- Process-wide bundled database ---

_manifest_database = None
_manifest_lock = threading.Lock()


def load_bundled_database() -> ManifestDatabase:
    """Read the manifest shipped with the application."""
    return ManifestDatabase.from_file(resource_path(config.MANIFEST_RESOURCE))


def get_manifest_database() -> ManifestDatabase:
    """
    Return the bundled database, reading it on first call.

    The document is read at most once per process, even with concurrent
    first callers.

    Raises:
        ManifestDatabaseError: If the bundled document is missing or malformed
    """
    global _manifest_database

    if _manifest_database is None:
        with _manifest_lock:
            if _manifest_database is None:
                _manifest_database = load_bundled_database()
                logging.info(f"Manifest database loaded ({len(_manifest_database)} Steam games).")
    return _manifest_database


def clear_manifest_cache():
    """Forget the loaded database so the next call reads it again."""
    global _manifest_database

    with _manifest_lock:
        _manifest_database = None
