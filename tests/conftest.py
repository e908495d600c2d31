import logging
from pathlib import Path

import pytest

import manifest_db

APP_MANIFEST_TEMPLATE = '''"AppState"
{{
\t"appid"\t\t"{appid}"
\t"Universe"\t\t"1"
\t"name"\t\t"{name}"
\t"StateFlags"\t\t"4"
\t"installdir"\t\t"{installdir}"
\t"InstalledDepots"
\t{{
\t\t"{depot}"
\t\t{{
\t\t\t"manifest"\t\t"5437683212377416521"
\t\t\t"size"\t\t"1200554496"
\t\t}}
\t}}
}}
'''


def write_app_manifest(library: Path, appid, name, installdir, filename=None) -> Path:
    steamapps = library / "steamapps"
    steamapps.mkdir(parents=True, exist_ok=True)
    manifest_path = steamapps / (filename or f"appmanifest_{appid}.acf")
    manifest_path.write_text(
        APP_MANIFEST_TEMPLATE.format(appid=appid, name=name, installdir=installdir, depot=f"{appid}1"),
        encoding="utf-8",
    )
    return manifest_path


def write_library_folders(steam_root: Path, entries) -> Path:
    """entries: list of (key, path or None); None writes an entry without a path field."""
    lines = ['"libraryfolders"', '{']
    for key, path in entries:
        lines.append(f'\t"{key}"')
        lines.append('\t{')
        if path is not None:
            escaped = str(path).replace('\\', '\\\\')
            lines.append(f'\t\t"path"\t\t"{escaped}"')
        lines.append('\t\t"label"\t\t""')
        lines.append('\t\t"apps"')
        lines.append('\t\t{')
        lines.append('\t\t}')
        lines.append('\t}')
    lines.append('}')
    steamapps = steam_root / "steamapps"
    steamapps.mkdir(parents=True, exist_ok=True)
    library_file = steamapps / "libraryfolders.vdf"
    library_file.write_text('\n'.join(lines) + '\n', encoding="utf-8")
    return library_file


@pytest.fixture
def steam_root(tmp_path):
    root = tmp_path / "Steam"
    (root / "steamapps").mkdir(parents=True)
    return root


@pytest.fixture
def make_manifest():
    return write_app_manifest


@pytest.fixture
def make_library_folders():
    return write_library_folders


@pytest.fixture(autouse=True)
def fresh_manifest_cache():
    manifest_db.clear_manifest_cache()
    yield
    manifest_db.clear_manifest_cache()


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    saved_handlers = root_logger.handlers[:]
    saved_level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        if handler not in saved_handlers:
            root_logger.removeHandler(handler)
            handler.close()
    for handler in saved_handlers:
        if handler not in root_logger.handlers:
            root_logger.addHandler(handler)
    root_logger.setLevel(saved_level)
