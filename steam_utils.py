# steam_utils.py
# -*- coding: utf-8 -*-
"""
Steam detection and library scanning utilities.

This module provides functions to:
- Find the main Steam installation folder (registry on Windows, well-known home folders elsewhere)
- Discover additional Steam library folders from libraryfolders.vdf
- List installed Steam games from the appmanifest_*.acf files of every library
"""

import logging
import os
import platform
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

import config
import vdf_parser
from vdf_parser import VdfParseError, VdfTable, VdfValue

# AppIDs are unsigned 64-bit integers, library indexes unsigned 32-bit
MAX_APPID = 2 ** 64 - 1
MAX_LIBRARY_INDEX = 2 ** 32 - 1

_UNSIGNED_RE = re.compile(r'\+?[0-9]+')


class SteamNotFoundError(FileNotFoundError):
    """No Steam installation folder could be resolved."""


class InvalidAppIdError(ValueError):
    """An appmanifest file holds an appid that is not an unsigned 64-bit integer."""

    def __init__(self, appid: str, manifest_path=None):
        where = f" in '{manifest_path}'" if manifest_path else ""
        super().__init__(f"Invalid AppID '{appid}'{where}")
        self.appid = appid
        self.manifest_path = manifest_path


@dataclass(frozen=True)
class InstalledApp:
    """A game found in a Steam library."""
    appid: int
    name: str
    install_dir: Path


# --- Main installation folder ---

class SteamLocator(ABC):
    """Finds the main Steam installation folder."""

    @abstractmethod
    def locate_primary(self) -> Path:
        """
        Returns:
            Path of the Steam installation

        Raises:
            SteamNotFoundError: If Steam cannot be found
        """
        pass


class RegistrySteamLocator(SteamLocator):
    """Windows: reads SteamPath from HKEY_CURRENT_USER\\Software\\Valve\\Steam."""

    def __init__(self, key_path: str = config.STEAM_REGISTRY_KEY,
                 value_name: str = config.STEAM_REGISTRY_VALUE):
        self.key_path = key_path
        self.value_name = value_name

    def locate_primary(self) -> Path:
        try:
            import winreg
        except ImportError as e:
            raise SteamNotFoundError("winreg module not available, cannot search Steam in registry") from e

        try:
            with winreg.OpenKey(winreg.HKEY_CURRENT_USER, self.key_path) as hkey:
                path_value, _ = winreg.QueryValueEx(hkey, self.value_name)
        except OSError as e:
            raise SteamNotFoundError(
                f"Failed to read {self.value_name} from HKCU\\{self.key_path}: {e}") from e

        found_path = Path(str(path_value).replace('/', '\\'))
        logging.info(f"Found Steam installation via registry: {found_path}")
        return found_path


class HomeDirSteamLocator(SteamLocator):
    """Linux/macOS: returns the first existing candidate folder under the user's home."""

    def __init__(self, home=None, candidates=None):
        self.home = home
        self.candidates = list(candidates if candidates is not None else config.STEAM_HOME_CANDIDATES)

    def _home(self) -> Path:
        if self.home is not None:
            return Path(self.home)
        try:
            return Path.home()
        except RuntimeError as e:
            raise SteamNotFoundError("Could not find home directory") from e

    def locate_primary(self) -> Path:
        home = self._home()
        for candidate in self.candidates:
            path_to_check = home / candidate
            if path_to_check.exists():
                logging.info(f"Found Steam installation at: {path_to_check}")
                return path_to_check
            logging.debug(f"Path does not exist: {path_to_check}")
        raise SteamNotFoundError(f"Could not find Steam installation under '{home}'")


def default_locator() -> SteamLocator:
    """Pick the locator for the running OS."""
    if platform.system() == "Windows":
        return RegistrySteamLocator()
    return HomeDirSteamLocator()


def locate_steam(override=None, locator: SteamLocator = None) -> Path:
    """
    Resolve the main Steam installation folder.

    Args:
        override: Folder given by the user; skips detection but must exist
        locator: Detection strategy, defaults to the one for the running OS

    Raises:
        SteamNotFoundError: If no installation can be resolved
    """
    if override:
        override_path = Path(override)
        if not override_path.exists():
            raise SteamNotFoundError(f"Steam folder '{override_path}' does not exist")
        logging.info(f"Using Steam folder from command line: {override_path}")
        return override_path

    if locator is None:
        locator = default_locator()
    return locator.locate_primary()


# --- Library folders ---

def _is_library_index(key: str) -> bool:
    return bool(_UNSIGNED_RE.fullmatch(key)) and int(key) <= MAX_LIBRARY_INDEX


def list_libraries(primary) -> list:
    """
    Find all Steam library folders.

    The main installation always comes first. Additional libraries are read
    from steamapps/libraryfolders.vdf; a missing or unreadable file only
    leaves the main library in the list.

    Args:
        primary: Main Steam installation folder

    Returns:
        List of library root paths
    """
    primary = Path(primary)
    libraries = [primary]
    library_file = primary / config.STEAMAPPS_DIR / config.LIBRARY_FOLDERS_FILE

    try:
        root = vdf_parser.load(library_file)
    except FileNotFoundError:
        logging.debug(f"No '{config.LIBRARY_FOLDERS_FILE}' found in '{library_file.parent}'.")
        return libraries
    except (OSError, VdfParseError) as e:
        logging.warning(f"Could not read '{library_file}': {e}. Using only the main library.")
        return libraries

    folders = root.get(config.LIBRARY_FOLDERS_KEY)
    if not isinstance(folders, VdfTable):
        logging.debug(f"'{config.LIBRARY_FOLDERS_KEY}' table not found in '{library_file}'.")
        return libraries

    for key, entry in folders.items():
        if not _is_library_index(key):
            continue
        path_node = vdf_parser.lookup(entry, "path")
        if isinstance(path_node, VdfValue):
            libraries.append(Path(path_node.value))

    logging.info(f"Found {len(libraries)} Steam libraries ({len(libraries) - 1} from VDF).")
    return libraries


# --- Installed games ---

def parse_appid(appid: str, manifest_path=None) -> int:
    """
    Convert an appid string to an integer.

    Raises:
        InvalidAppIdError: If it is not an unsigned 64-bit integer
    """
    if _UNSIGNED_RE.fullmatch(appid):
        value = int(appid)
        if value <= MAX_APPID:
            return value
    raise InvalidAppIdError(appid, manifest_path)


def _is_app_manifest(filename: str) -> bool:
    return filename.endswith(config.APPMANIFEST_EXTENSION) and filename.startswith(config.APPMANIFEST_PREFIX)


def _read_app_manifest(manifest_path: Path, steamapps_path: Path):
    """
    Read a single appmanifest file.

    Returns:
        InstalledApp, or None if the file cannot be parsed or has no AppState
    """
    try:
        data = vdf_parser.load(manifest_path)
    except (OSError, VdfParseError) as e:
        logging.debug(f"  Skipping '{manifest_path.name}': {e}")
        return None

    app_state = data.get(config.APP_STATE_KEY)
    if not isinstance(app_state, VdfTable):
        logging.debug(f"  Skipping '{manifest_path.name}': no {config.APP_STATE_KEY} table.")
        return None

    appid = vdf_parser.get_str(app_state, "appid")
    name = vdf_parser.get_str(app_state, "name")
    installdir = vdf_parser.get_str(app_state, "installdir")

    return InstalledApp(
        appid=parse_appid(appid, manifest_path),
        name=name,
        install_dir=steamapps_path / config.COMMON_DIR / installdir,
    )


def scan_installed_apps(libraries) -> list:
    """
    Find all installed Steam games.

    Args:
        libraries: Library root paths, as returned by list_libraries()

    Returns:
        List of InstalledApp, in library order then directory listing order

    Raises:
        OSError: If a steamapps folder exists but cannot be listed
        InvalidAppIdError: If a manifest holds a non-numeric appid
    """
    games = []
    logging.info("Scanning libraries for installed Steam games...")

    for lib_path in libraries:
        steamapps_path = Path(lib_path) / config.STEAMAPPS_DIR
        if not steamapps_path.exists():
            logging.debug(f"No '{config.STEAMAPPS_DIR}' folder in '{lib_path}', skipping.")
            continue

        for filename in os.listdir(steamapps_path):
            if not _is_app_manifest(filename):
                continue
            game = _read_app_manifest(steamapps_path / filename, steamapps_path)
            if game is not None:
                games.append(game)
                logging.debug(f"  Added game: {game.name} (AppID: {game.appid})")

    logging.info(f"Found {len(games)} installed Steam games.")
    return games
