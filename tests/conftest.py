"""Pytest configuration and shared fixtures for kml-cables tests."""

import os
import shutil
import tempfile
from pathlib import Path

import pytest


# Session-level data directory so no test writes to the real user cache
_TEST_DATA_DIR = None


def pytest_configure(config):
    """Point the persistence store at a temporary directory.

    This sets KML_CABLES_DATA_DIR before any test runs; tests that need
    their own store override it again with monkeypatch.
    """
    global _TEST_DATA_DIR
    _TEST_DATA_DIR = Path(tempfile.mkdtemp(prefix="kml_cables_test_"))
    os.environ["KML_CABLES_DATA_DIR"] = str(_TEST_DATA_DIR)


def pytest_unconfigure(config):
    """Clean up the temporary data directory after all tests complete."""
    global _TEST_DATA_DIR
    if _TEST_DATA_DIR and _TEST_DATA_DIR.exists():
        shutil.rmtree(_TEST_DATA_DIR, ignore_errors=True)
    if "KML_CABLES_DATA_DIR" in os.environ:
        del os.environ["KML_CABLES_DATA_DIR"]


@pytest.fixture(autouse=True)
def reset_debug_mode():
    """Restore INFO logging after tests that enable debug mode."""
    from kml_cables.logger import set_debug_mode

    yield

    set_debug_mode(False)


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Isolated persistence directory for one test."""
    directory = tmp_path / "data"
    monkeypatch.setenv("KML_CABLES_DATA_DIR", str(directory))
    return directory


SIMPLE_KML = """<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2">
  <Document>
    <Placemark>
      <name>Route A</name>
      <LineString>
        <coordinates>106.8,-6.2,0 106.801,-6.201,0</coordinates>
      </LineString>
    </Placemark>
  </Document>
</kml>
"""

STYLED_KML = """<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2">
  <Document>
    <Style id="s1">
      <LineStyle>
        <color>ff2dc0fb</color>
        <width>4</width>
      </LineStyle>
    </Style>
    <Style id="gray">
      <LineStyle>
        <color>ff757575</color>
      </LineStyle>
    </Style>
    <StyleMap id="m1">
      <Pair><key>normal</key><styleUrl>#s1</styleUrl></Pair>
      <Pair><key>highlight</key><styleUrl>#gray</styleUrl></Pair>
    </StyleMap>
    <Placemark>
      <name>Jalur 1</name>
      <styleUrl>#s1</styleUrl>
      <LineString>
        <coordinates>106.8,-6.2 106.801,-6.201</coordinates>
      </LineString>
    </Placemark>
    <Placemark>
      <name>Pasir Jalur B</name>
      <styleUrl>#gray</styleUrl>
      <LineString>
        <coordinates>106.8,-6.2 106.801,-6.201</coordinates>
      </LineString>
    </Placemark>
    <Placemark>
      <name>Jalur 3</name>
      <styleUrl>#m1</styleUrl>
      <LineString>
        <coordinates>106.8,-6.2 106.801,-6.201</coordinates>
      </LineString>
    </Placemark>
  </Document>
</kml>
"""

MIXED_KML = """<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2">
  <Document>
    <Placemark>
      <name>Good One</name>
      <LineString><coordinates>0,0 0.001,0</coordinates></LineString>
    </Placemark>
    <Placemark>
      <name>Too Short</name>
      <LineString><coordinates>0,0</coordinates></LineString>
    </Placemark>
    <Placemark>
      <name>Marker</name>
      <Point><coordinates>106.8,-6.2,0</coordinates></Point>
    </Placemark>
    <Placemark>
      <LineString><coordinates>0,0 0,0.001</coordinates></LineString>
    </Placemark>
  </Document>
</kml>
"""


@pytest.fixture
def simple_kml():
    """Single unstyled LineString placemark."""
    return SIMPLE_KML


@pytest.fixture
def styled_kml():
    """Placemarks referencing a Style, a gray Style and a StyleMap."""
    return STYLED_KML


@pytest.fixture
def mixed_kml():
    """Valid, too-short, Point and unnamed placemarks."""
    return MIXED_KML


@pytest.fixture
def kml_file(tmp_path, simple_kml):
    """SIMPLE_KML written to a .kml file."""
    path = tmp_path / "route.kml"
    path.write_text(simple_kml, encoding="utf-8")
    return path


@pytest.fixture
def sample_collection():
    """Small converted collection with one cable per soil type."""
    from kml_cables.converter import convert_kml_to_geojson

    kml = """<kml>
      <Placemark><name>Pasir 1</name>
        <LineString><coordinates>0,0 0.001,0 0.002,0</coordinates></LineString></Placemark>
      <Placemark><name>Batuan 2</name>
        <LineString><coordinates>1,1 1.001,1</coordinates></LineString></Placemark>
      <Placemark><name>Plain 3</name>
        <LineString><coordinates>2,2 2,2.001</coordinates></LineString></Placemark>
    </kml>"""
    return convert_kml_to_geojson(kml, install_date="2024-01-15")
