# utils.py
import os
import sys
import logging


def resource_path(relative_path):
    """ Get absolute path to a bundled resource, works for dev, installs and PyInstaller """
    try:
        # PyInstaller creates a temp folder and stores path in _MEIPASS
        base_path = sys._MEIPASS
    except AttributeError:
        # Not running in a PyInstaller bundle: resources live next to this module
        base_path = os.path.dirname(os.path.abspath(__file__))
    except Exception as e: # Catch any other exception during _MEIPASS access
        logging.error(f"Error accessing sys._MEIPASS: {e}. Falling back to the module folder")
        base_path = os.path.dirname(os.path.abspath(__file__))
    return os.path.join(base_path, relative_path)
