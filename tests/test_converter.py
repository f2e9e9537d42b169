"""Tests for converter module."""

import http.client
import re
from unittest.mock import MagicMock, patch

import pytest

from kml_cables.converter import (
    convert_kml_file,
    convert_kml_files,
    convert_kml_to_geojson,
    is_url,
    read_kml_source,
)
from kml_cables.exceptions import ConfigurationError, KMLParseError
from kml_cables.validation import validate_feature_collection


class TestConvertKmlToGeojson:
    """Tests for convert_kml_to_geojson function."""

    def test_unstyled_route(self, simple_kml):
        """Test a single unstyled LineString gets the defaults."""
        collection = convert_kml_to_geojson(simple_kml, install_date="2024-01-15")

        assert collection["type"] == "FeatureCollection"
        assert len(collection["features"]) == 1
        feature = collection["features"][0]
        properties = feature["properties"]

        assert feature["geometry"]["type"] == "LineString"
        assert feature["geometry"]["coordinates"] == [[106.8, -6.2], [106.801, -6.201]]
        assert properties["id"] == "cable-001"
        assert properties["name"] == "Route A"
        assert properties["soilType"] == "Tanah Liat"
        assert properties["depth"] == 2.0
        assert properties["installDate"] == "2024-01-15"
        assert "style" not in properties
        assert "metadata" not in properties
        assert len(properties["segments"]) == 1
        assert properties["totalDistance"] == pytest.approx(
            properties["segments"][0]["distance"]
        )
        assert properties["totalDistance"] == pytest.approx(156.9, abs=1.0)

    def test_unnamed_unstyled_route(self):
        """Test an unnamed, unstyled route gets the default soil type and id."""
        kml = """<kml><Document><Placemark>
          <LineString><coordinates>106.827,-6.175 106.828,-6.176</coordinates></LineString>
        </Placemark></Document></kml>"""
        features = convert_kml_to_geojson(kml)["features"]

        assert len(features) == 1
        properties = features[0]["properties"]
        assert properties["soilType"] == "Tanah Liat"
        assert properties["depth"] == 2.0
        assert properties["id"] == "cable-001"
        assert properties["name"] == "Cable Route 1"

    def test_color_only_classification(self):
        """Test a keyword-free name falls through to the line color."""
        kml = """<kml><Document>
          <Style id="s1"><LineStyle><color>ff2dc0fb</color></LineStyle></Style>
          <Placemark><name>Jalur A</name><styleUrl>#s1</styleUrl>
            <LineString><coordinates>106.827,-6.175 106.828,-6.176</coordinates></LineString>
          </Placemark>
        </Document></kml>"""
        properties = convert_kml_to_geojson(kml)["features"][0]["properties"]
        assert properties["soilType"] == "Pasir"
        assert properties["depth"] == 1.5

    def test_install_date_defaults_to_today(self, simple_kml):
        """Test installDate is an ISO date when not given."""
        collection = convert_kml_to_geojson(simple_kml)
        assert re.match(r"^\d{4}-\d{2}-\d{2}$", collection["features"][0]["properties"]["installDate"])

    def test_styled_routes(self, styled_kml):
        """Test color classification, name priority and StyleMap aliases."""
        features = convert_kml_to_geojson(styled_kml)["features"]

        first, second, third = (f["properties"] for f in features)
        assert first["soilType"] == "Pasir"
        assert first["depth"] == 1.5
        assert first["style"]["lineColor"] == "rgba(251, 192, 45, 1.00)"
        assert first["style"]["lineWidth"] == 4.0

        # Name keyword beats the gray line color
        assert second["soilType"] == "Pasir"
        assert second["style"]["lineColor"] == "rgba(117, 117, 117, 1.00)"

        assert third["style"] == first["style"]
        assert third["soilType"] == "Pasir"

    def test_skipped_placemarks_keep_ids_contiguous(self, mixed_kml):
        """Test short LineStrings and Points are skipped without gaps."""
        features = convert_kml_to_geojson(mixed_kml)["features"]

        assert [f["properties"]["id"] for f in features] == ["cable-001", "cable-002"]
        assert features[0]["properties"]["name"] == "Good One"
        assert features[1]["properties"]["name"] == "Cable Route 2"

    def test_include_points(self, mixed_kml):
        """Test Point placemarks are converted when requested."""
        features = convert_kml_to_geojson(mixed_kml, include_points=True)["features"]

        assert [f["geometry"]["type"] for f in features] == ["LineString", "Point", "LineString"]
        point = features[1]
        assert point["geometry"]["coordinates"] == [106.8, -6.2]
        assert point["properties"]["id"] == "cable-002"
        assert point["properties"]["segments"] == []
        assert point["properties"]["totalDistance"] == 0.0
        assert features[2]["properties"]["name"] == "Cable Route 3"

    def test_ids_unique(self):
        """Test every feature gets a distinct id."""
        placemark = "<Placemark><LineString><coordinates>0,0 1,1</coordinates></LineString></Placemark>"
        kml = "<kml><Document>" + placemark * 25 + "</Document></kml>"
        features = convert_kml_to_geojson(kml)["features"]

        ids = [f["properties"]["id"] for f in features]
        assert len(ids) == 25
        assert len(set(ids)) == 25
        assert ids[-1] == "cable-025"

    def test_nested_folders(self):
        """Test Placemarks inside Folders are found in document order."""
        kml = """<kml><Document>
          <Folder><name>Zone A</name>
            <Placemark><name>A1</name><LineString><coordinates>0,0 1,1</coordinates></LineString></Placemark>
            <Folder>
              <Placemark><name>A2</name><LineString><coordinates>0,0 1,1</coordinates></LineString></Placemark>
            </Folder>
          </Folder>
          <Placemark><name>B1</name><LineString><coordinates>0,0 1,1</coordinates></LineString></Placemark>
        </Document></kml>"""
        names = [f["properties"]["name"] for f in convert_kml_to_geojson(kml)["features"]]
        assert names == ["A1", "A2", "B1"]

    def test_description_classifies(self):
        """Test description keywords are used when the name has none."""
        kml = """<kml><Placemark><name>Jalur 9</name>
          <description>Melewati area batuan</description>
          <LineString><coordinates>0,0 1,1</coordinates></LineString>
        </Placemark></kml>"""
        properties = convert_kml_to_geojson(kml)["features"][0]["properties"]
        assert properties["soilType"] == "Batuan"
        assert properties["metadata"]["description"] == "Melewati area batuan"

    def test_unknown_style_reference(self):
        """Test a dangling styleUrl falls back to no style."""
        kml = """<kml><Placemark><name>Jalur</name><styleUrl>#ghost</styleUrl>
          <LineString><coordinates>0,0 1,1</coordinates></LineString>
        </Placemark></kml>"""
        properties = convert_kml_to_geojson(kml)["features"][0]["properties"]
        assert "style" not in properties
        assert properties["soilType"] == "Tanah Liat"

    def test_no_placemarks(self):
        """Test an empty but valid document."""
        assert convert_kml_to_geojson("<kml><Document/></kml>") == {
            "type": "FeatureCollection",
            "features": [],
        }

    def test_output_validates(self, styled_kml, mixed_kml):
        """Test converter output always passes the collection validator."""
        for kml in (styled_kml, mixed_kml):
            for include_points in (False, True):
                collection = convert_kml_to_geojson(kml, include_points=include_points)
                assert validate_feature_collection(collection) == (True, None)

    def test_malformed_xml(self):
        """Test malformed XML raises KMLParseError."""
        with pytest.raises(KMLParseError):
            convert_kml_to_geojson("<kml><Placemark><name>x</kml>")

    def test_empty_input(self):
        """Test empty input raises KMLParseError."""
        with pytest.raises(KMLParseError):
            convert_kml_to_geojson("")

    def test_repeatable(self, styled_kml):
        """Test converting twice gives identical results."""
        first = convert_kml_to_geojson(styled_kml, install_date="2024-01-15")
        second = convert_kml_to_geojson(styled_kml, install_date="2024-01-15")
        assert first == second


class TestReadKmlSource:
    """Tests for read_kml_source and is_url."""

    def test_is_url(self):
        """Test URL detection."""
        assert is_url("https://example.com/a.kml")
        assert is_url("HTTP://example.com/a.kml")
        assert not is_url("/tmp/a.kml")

    def test_read_file(self, kml_file, simple_kml):
        """Test reading a local file returns bytes."""
        assert read_kml_source(str(kml_file)) == simple_kml.encode("utf-8")

    def test_missing_file(self, tmp_path):
        """Test a missing file raises OSError."""
        with pytest.raises(OSError):
            read_kml_source(str(tmp_path / "missing.kml"))

    def test_read_url(self, simple_kml):
        """Test URLs are fetched with the configured timeout."""
        response = MagicMock()
        response.read.return_value = simple_kml.encode("utf-8")
        response.__enter__.return_value = response

        with patch("kml_cables.converter.urllib.request.urlopen", return_value=response) as mock_open:
            data = read_kml_source("https://example.com/route.kml")

        assert data == simple_kml.encode("utf-8")
        mock_open.assert_called_once_with("https://example.com/route.kml", timeout=30.0)

    def test_url_timeout_override(self, simple_kml, monkeypatch):
        """Test KML_CABLES_HTTP_TIMEOUT is honored."""
        monkeypatch.setenv("KML_CABLES_HTTP_TIMEOUT", "5")
        response = MagicMock()
        response.read.return_value = b"<kml/>"
        response.__enter__.return_value = response

        with patch("kml_cables.converter.urllib.request.urlopen", return_value=response) as mock_open:
            read_kml_source("http://example.com/route.kml")

        assert mock_open.call_args.kwargs["timeout"] == 5.0

    def test_url_bad_timeout(self, monkeypatch):
        """Test an invalid timeout override raises before fetching."""
        monkeypatch.setenv("KML_CABLES_HTTP_TIMEOUT", "soon")
        with patch("kml_cables.converter.urllib.request.urlopen") as mock_open:
            with pytest.raises(ConfigurationError):
                read_kml_source("http://example.com/route.kml")
        mock_open.assert_not_called()


class TestConvertKmlFiles:
    """Tests for convert_kml_file and convert_kml_files."""

    def test_convert_file(self, kml_file):
        """Test converting a file on disk."""
        collection = convert_kml_file(str(kml_file))
        assert collection["features"][0]["properties"]["name"] == "Route A"

    def test_convert_file_malformed(self, tmp_path):
        """Test parse errors name the file."""
        path = tmp_path / "bad.kml"
        path.write_text("<kml><oops></kml>", encoding="utf-8")

        with pytest.raises(KMLParseError) as exc_info:
            convert_kml_file(str(path))
        assert exc_info.value.file_path == str(path)

    def test_parallel_conversion(self, tmp_path, simple_kml, styled_kml):
        """Test several files convert independently and in sorted order."""
        b = tmp_path / "b.kml"
        a = tmp_path / "a.kml"
        bad = tmp_path / "c.kml"
        b.write_text(styled_kml, encoding="utf-8")
        a.write_text(simple_kml, encoding="utf-8")
        bad.write_text("<kml>", encoding="utf-8")
        missing = tmp_path / "d.kml"

        results = convert_kml_files([str(b), str(a), str(bad), str(missing)], install_date="2024-01-15")

        assert list(results) == [str(a), str(b)]
        assert len(results[str(a)]["features"]) == 1
        assert len(results[str(b)]["features"]) == 3
        # Each document has its own id sequence
        assert results[str(a)]["features"][0]["properties"]["id"] == "cable-001"
        assert results[str(b)]["features"][0]["properties"]["id"] == "cable-001"

    def test_duplicate_sources(self, kml_file):
        """Test duplicate sources are converted once."""
        results = convert_kml_files([str(kml_file), str(kml_file)])
        assert list(results) == [str(kml_file)]

    def test_no_sources(self):
        """Test empty input."""
        assert convert_kml_files([]) == {}

    def test_broken_url_fetches_are_skipped(self, kml_file):
        """Test a truncated response or a malformed URL does not abort the batch."""
        failures = {
            "https://example.com/cut.kml": http.client.IncompleteRead(b"<kml"),
            "https://example.com/odd.kml": ValueError("unknown url type"),
        }

        def fake_urlopen(url, timeout):
            raise failures[url]

        with patch("kml_cables.converter.urllib.request.urlopen", side_effect=fake_urlopen):
            results = convert_kml_files([*failures, str(kml_file)])

        assert list(results) == [str(kml_file)]
