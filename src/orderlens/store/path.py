"""Path utilities for locating order store directories."""

import os
from pathlib import Path


def get_store_directory_path(store_root: Path) -> Path:
    """Return the .orderlens directory of a store root (e.g. /path/to/shop/.orderlens)."""
    return store_root / '.orderlens'


def find_store_for_path(target_path: Path) -> Path | None:
    """Find the nearest directory at or above target_path that contains a .orderlens directory.

    Args:
        target_path: Directory to start searching from

    Returns:
        The store root (the directory holding .orderlens), or None if no ancestor has one
    """
    # normpath removes . and .. without following symlinks
    target_path = target_path if target_path.is_absolute() else Path.cwd() / target_path
    current = Path(os.path.normpath(str(target_path)))

    while True:
        store_dir = get_store_directory_path(current)
        if store_dir.is_dir():
            return current

        parent = current.parent
        if parent == current:
            return None

        current = parent
