from pathlib import Path

from planifia.utilities.config import DATA_DIR

# File names of the JSON collections inside a data directory
MEALS_FILENAME = 'meals.json'
ITEMS_FILENAME = 'shopping_items.json'
USER_FILENAME = 'user.json'


def data_files(data_dir: Path = DATA_DIR) -> dict:
    """Return the collection file paths for a data directory."""
    data_dir = Path(data_dir)
    return {
        'meals': data_dir / MEALS_FILENAME,
        'items': data_dir / ITEMS_FILENAME,
        'user': data_dir / USER_FILENAME,
    }

__all__ = ['DATA_DIR', 'MEALS_FILENAME', 'ITEMS_FILENAME', 'USER_FILENAME', 'data_files']
