"""Persistence of the converted cable collection.

One process-wide slot (``underground-cable-data``) is stored as a JSON
file in the data directory (``KML_CABLES_DATA_DIR``, default
``~/.cache/kml-cables``). Only collections that pass
``validate_feature_collection`` are written, and a stored value that no
longer validates is treated as missing and removed.
"""

import json
from pathlib import Path
from typing import Optional

from .config import get_data_dir
from .constants import STORAGE_SLOT
from .exceptions import StorageError
from .logger import logger
from .types import CableFeatureCollection
from .validation import validate_feature_collection

__all__ = [
    'get_slot_path',
    'save_collection',
    'load_collection',
    'delete_collection',
]


def get_slot_path(slot: str = STORAGE_SLOT) -> Path:
    """Path of the JSON file backing a storage slot."""
    return get_data_dir() / f"{slot}.json"


def save_collection(collection: CableFeatureCollection, slot: str = STORAGE_SLOT) -> Path:
    """
    Store a validated collection in the slot, replacing any previous value.

    Args:
        collection: CableFeatureCollection to store
        slot: Storage slot name

    Returns:
        Path of the written file

    Raises:
        StorageError: If the collection is invalid or cannot be written
    """
    is_valid, error = validate_feature_collection(collection)
    if not is_valid:
        raise StorageError(f"Refusing to store invalid collection: {error}", slot=slot)

    slot_path = get_slot_path(slot)
    tmp_path = slot_path.with_suffix('.json.tmp')
    try:
        slot_path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(collection, f, ensure_ascii=False)
        tmp_path.replace(slot_path)
    except OSError as e:
        raise StorageError(f"Failed to write collection: {e}", slot=slot) from e

    logger.debug(f"Stored {len(collection['features'])} feature(s) in {slot_path}")
    return slot_path


def _discard(slot_path: Path) -> None:
    try:
        slot_path.unlink()
    except OSError as e:
        logger.debug(f"Failed to remove {slot_path}: {e}")


def load_collection(slot: str = STORAGE_SLOT) -> Optional[CableFeatureCollection]:
    """
    Load the collection stored in the slot.

    Args:
        slot: Storage slot name

    Returns:
        The stored collection, or None if the slot is empty, unreadable or
        holds data that fails validation (such data is removed)
    """
    slot_path = get_slot_path(slot)
    if not slot_path.exists():
        return None

    try:
        with open(slot_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
        logger.warning(f"Discarding unreadable stored data in {slot_path}: {e}")
        _discard(slot_path)
        return None

    is_valid, error = validate_feature_collection(data)
    if not is_valid:
        logger.warning(f"Discarding invalid stored data in {slot_path}: {error}")
        _discard(slot_path)
        return None

    return data


def delete_collection(slot: str = STORAGE_SLOT) -> bool:
    """
    Remove the slot.

    Returns:
        True if a stored value was removed, False if the slot was empty
    """
    slot_path = get_slot_path(slot)
    if not slot_path.exists():
        return False
    try:
        slot_path.unlink()
    except OSError as e:
        raise StorageError(f"Failed to delete collection: {e}", slot=slot) from e
    return True
