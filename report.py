# report.py
# -*- coding: utf-8 -*-
"""Text report of installed games and their save locations."""

import config


def save_locations(game_data) -> list:
    """
    Save paths relevant to a Steam install.

    A file entry is listed when it is tagged "save" and has at least one
    condition. Only the first condition is considered: a store other than
    Steam hides the entry, and a missing OS is shown as "ALL".

    Args:
        game_data: GameData from the manifest database, or None

    Returns:
        List of (path, os_label) tuples, in manifest order
    """
    locations = []
    if game_data is None or not game_data.files:
        return locations

    for path, entry in game_data.files.items():
        if not entry.tags or config.SAVE_TAG not in entry.tags:
            continue
        # Entries without conditions are not listed
        if not entry.when:
            continue
        condition = entry.when[0]
        if condition.store is not None and condition.store != config.STEAM_STORE:
            continue
        os_label = condition.os if condition.os is not None else config.DEFAULT_OS_LABEL
        locations.append((path, os_label))

    return locations


def format_save_location(path: str, os_label: str) -> str:
    return f"\tSave Locations: {path} OS: {os_label}"


def format_app_details(app) -> list:
    """AppID and install folder lines shown under the game name."""
    return [
        f"\tAppID: {app.appid}",
        f"\tInstall Location: {app.install_dir}",
    ]


def render_app(app, database) -> list:
    """Report lines for one installed game."""
    lines = [app.name]
    lines.extend(format_app_details(app))
    for path, os_label in save_locations(database.get(app.appid)):
        lines.append(format_save_location(path, os_label))
    return lines


def render_report(apps, database) -> list:
    """Report lines for every installed game, in the given order."""
    lines = []
    for app in apps:
        lines.extend(render_app(app, database))
    return lines
