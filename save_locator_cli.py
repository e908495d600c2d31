# save_locator_cli.py
# -*- coding: utf-8 -*-
"""Command line entry point: lists installed Steam games and their save locations."""

import argparse
import logging
import sys

import colorama
from colorama import Fore, Style

import config
import manifest_db
import report
import steam_utils


# --- Colored output helpers ---

def print_info(text):
    """Prints standard information (white/default)."""
    print(text)

def print_game(text):
    """Prints a game name in bright white."""
    print(f"{Style.BRIGHT}{Fore.WHITE}{text}")

def print_success(text):
    """Prints a save location in green."""
    print(f"{Fore.GREEN}{text}")

def print_error(text):
    """Prints an error message in bright red on stderr."""
    print(f"{Style.BRIGHT}{Fore.RED}ERROR: {text}", file=sys.stderr)


def setup_logging(debug=False):
    """Configure the root logger with a single console handler (stderr)."""
    log_level = logging.DEBUG if debug else logging.WARNING
    log_formatter = logging.Formatter(config.LOG_FORMAT, config.LOG_DATEFMT)
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(log_formatter)
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)

    logging.debug("Logging configured.")


def build_arg_parser():
    parser = argparse.ArgumentParser(
        prog="save-locator",
        description="List installed Steam games and where they keep their save files.")
    parser.add_argument("--steam-path", help="Steam installation folder (skips automatic detection).")
    parser.add_argument("--debug", action="store_true", help="Verbose logging on stderr.")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output.")
    parser.add_argument("--version", action="version", version=f"{config.APP_NAME} {config.APP_VERSION}")
    return parser


def print_report(apps, database):
    for app in apps:
        print_game(app.name)
        for line in report.format_app_details(app):
            print_info(line)
        for path, os_label in report.save_locations(database.get(app.appid)):
            print_success(report.format_save_location(path, os_label))


def run(args) -> int:
    """Run the scan and print the report. Returns the process exit code."""
    try:
        steam_path = steam_utils.locate_steam(args.steam_path)
        print_info(f"Found Steam installation at: {steam_path}")

        libraries = steam_utils.list_libraries(steam_path)
        apps = steam_utils.scan_installed_apps(libraries)
        database = manifest_db.get_manifest_database()
    except steam_utils.SteamNotFoundError as e:
        logging.debug("Steam detection failed", exc_info=True)
        print_error(str(e))
        return 1
    except (steam_utils.InvalidAppIdError, manifest_db.ManifestDatabaseError) as e:
        logging.debug("Scan aborted", exc_info=True)
        print_error(str(e))
        return 1
    except OSError as e:
        logging.debug("Error reading Steam library", exc_info=True)
        print_error(f"Cannot read Steam library: {e}")
        return 1

    print_report(apps, database)
    return 0


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.debug)
    colorama.init(autoreset=True, strip=True if args.no_color else None)
    logging.info(f"Starting {config.APP_NAME} v{config.APP_VERSION}")

    try:
        return run(args)
    except Exception as e:
        logging.critical(f"Unexpected error: {e}", exc_info=True)
        print_error(f"Unexpected error: {e}")
        return 1
    finally:
        colorama.deinit()


if __name__ == "__main__":
    sys.exit(main())
