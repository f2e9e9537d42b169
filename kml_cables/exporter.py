"""GeoJSON export of converted cable collections."""

import json
import os
from typing import Any

from .exceptions import DataExportError
from .logger import logger

__all__ = ['write_geojson']


def write_geojson(data: Any, output_path: str, indent: int = 2) -> str:
    """
    Write a collection as pretty-printed UTF-8 JSON.

    Args:
        data: GeoJSON object
        output_path: Destination file path
        indent: JSON indentation

    Returns:
        The output path

    Raises:
        DataExportError: If the file cannot be written
    """
    try:
        parent = os.path.dirname(output_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
            f.write('\n')
    except OSError as e:
        raise DataExportError(f"Failed to write GeoJSON: {e}", output_path=output_path) from e

    size_kb = os.path.getsize(output_path) / 1024
    logger.debug(f"Wrote {output_path} ({size_kb:.1f} KB)")
    return output_path
