"""Tests for exporter module."""

import json

import pytest

from kml_cables.exceptions import DataExportError
from kml_cables.exporter import write_geojson


class TestWriteGeojson:
    """Tests for write_geojson function."""

    def test_pretty_utf8(self, tmp_path):
        """Test output is indented UTF-8 with non-ASCII kept."""
        path = tmp_path / "out.json"
        data = {"type": "FeatureCollection", "features": [], "name": "Jalur Café"}

        assert write_geojson(data, str(path)) == str(path)

        text = path.read_text(encoding="utf-8")
        assert "Jalur Café" in text
        assert '\n  "features": []' in text
        assert json.loads(text) == data

    def test_creates_parent_directory(self, tmp_path):
        """Test missing parent directories are created."""
        path = tmp_path / "nested" / "dir" / "out.json"
        write_geojson({"a": 1}, str(path))
        assert path.exists()

    def test_write_failure(self, tmp_path):
        """Test write errors become DataExportError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("x")

        with pytest.raises(DataExportError) as exc_info:
            write_geojson({"a": 1}, str(blocker / "out.json"))
        assert exc_info.value.output_path == str(blocker / "out.json")
