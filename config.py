# config.py
# -*- coding: utf-8 -*-
import os


# --- Application ---
APP_NAME = "SaveLocator"
APP_VERSION = "1.0.0"

# --- Steam detection ---
# Windows: HKEY_CURRENT_USER\Software\Valve\Steam -> SteamPath
STEAM_REGISTRY_KEY = r"Software\Valve\Steam"
STEAM_REGISTRY_VALUE = "SteamPath"

# Other systems: checked in this order, relative to the user's home folder
STEAM_HOME_CANDIDATES = [
    os.path.join(".steam", "steam"),
    os.path.join(".local", "share", "Steam"),
    os.path.join(".steam", "root"),
    os.path.join(".var", "app", "com.valvesoftware.Steam", "data", "Steam"),  # Flatpak
    os.path.join("Library", "Application Support", "Steam"),  # macOS
]

# --- Library layout ---
STEAMAPPS_DIR = "steamapps"
COMMON_DIR = "common"
LIBRARY_FOLDERS_FILE = "libraryfolders.vdf"
LIBRARY_FOLDERS_KEY = "libraryfolders"
APPMANIFEST_PREFIX = "appmanifest"
APPMANIFEST_EXTENSION = ".acf"
APP_STATE_KEY = "AppState"

# --- Manifest database ---
MANIFEST_RESOURCE = os.path.join("manifest_data", "manifest.yaml")

# --- Report ---
SAVE_TAG = "save"
STEAM_STORE = "steam"
DEFAULT_OS_LABEL = "ALL"

# --- Logging ---
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
LOG_DATEFMT = '%H:%M:%S'
