"""
servitor_qt/paths.py -- Path resolution for frozen and development modes.

Handles sys._MEIPASS detection for PyInstaller bundles and uses
platformdirs for the per-profile user data directory that holds the
recents file.
"""

from __future__ import annotations

import os
import sys

from platformdirs import user_data_dir

_APP_NAME = "Servitor"
_APP_AUTHOR = "Servitor"

RECENTS_FILENAME = "recents.json"
DATA_DIR_ENV = "SERVITOR_DATA_DIR"


def is_frozen() -> bool:
    """Return True if running from a PyInstaller bundle."""
    return getattr(sys, "frozen", False) and hasattr(sys, "_MEIPASS")


def get_bundle_dir() -> str:
    """Return the bundle directory (PyInstaller _MEIPASS or project root)."""
    if is_frozen():
        return sys._MEIPASS  # type: ignore[attr-defined]
    return os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def get_user_data_dir() -> str:
    """Return the platform-appropriate user data directory."""
    path = user_data_dir(_APP_NAME, _APP_AUTHOR)
    os.makedirs(path, exist_ok=True)
    return path


def get_recents_path() -> str:
    """Return the JSON file used as the device-scoped recents store."""
    return os.path.join(get_user_data_dir(), RECENTS_FILENAME)


def get_reference_data_dir(override: str | None = None) -> str:
    """Return the folder holding ``factions.json`` and ``factions/<id>.json``.

    Resolution order: explicit *override*, the ``SERVITOR_DATA_DIR``
    environment variable, then ``data/`` inside the bundle directory.
    """
    if override:
        return os.path.abspath(override)
    env = os.environ.get(DATA_DIR_ENV)
    if env:
        return os.path.abspath(env)
    return os.path.join(get_bundle_dir(), "data")
