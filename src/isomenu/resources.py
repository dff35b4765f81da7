"""Discovery of bundled data files.

Locates the reference menu and icon set shipped inside the isomenu package.
"""

from importlib.resources import files
from pathlib import Path

MENU_FILENAME = "menu.toml"
ICONS_FILENAME = "icons.json"


def get_data_dir() -> Path:
    """Return path to bundled data files.

    Raises:
        FileNotFoundError: If the data directory is missing from the install.
    """
    data = files("isomenu").joinpath("data")
    if not data.is_dir():
        msg = "Bundled data files not found. Reinstall isomenu with 'pip install -e .'."
        raise FileNotFoundError(msg)
    return Path(str(data))


def default_menu_path() -> Path:
    """Return path to the bundled reference menu."""
    return get_data_dir() / MENU_FILENAME


def default_icons_path() -> Path:
    """Return path to the bundled icon set."""
    return get_data_dir() / ICONS_FILENAME
