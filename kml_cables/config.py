"""Runtime configuration from environment variables.

Values are read on every call so that tests and long-running hosts can
change them without re-importing the package.

- ``KML_CABLES_DATA_DIR``: directory of the persistence store
  (default ``~/.cache/kml-cables``)
- ``KML_CABLES_HTTP_TIMEOUT``: seconds allowed for fetching a KML URL
  (default 30)
"""

import os
from pathlib import Path

from .constants import DATA_DIR_ENV, DEFAULT_HTTP_TIMEOUT_S, HTTP_TIMEOUT_ENV
from .exceptions import ConfigurationError

__all__ = ["DEFAULT_DATA_DIR", "get_data_dir", "get_http_timeout"]

DEFAULT_DATA_DIR = Path.home() / ".cache" / "kml-cables"


def get_data_dir() -> Path:
    """Directory holding the persistence store."""
    override = os.environ.get(DATA_DIR_ENV, "").strip()
    return Path(override).expanduser() if override else DEFAULT_DATA_DIR


def get_http_timeout() -> float:
    """
    Timeout in seconds for URL fetches.

    Raises:
        ConfigurationError: If the override is not a positive number
    """
    raw = os.environ.get(HTTP_TIMEOUT_ENV, "").strip()
    if not raw:
        return DEFAULT_HTTP_TIMEOUT_S
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigurationError(f"Timeout must be a number, got {raw!r}", config_key=HTTP_TIMEOUT_ENV) from None
    if timeout <= 0:
        raise ConfigurationError(f"Timeout must be positive, got {raw!r}", config_key=HTTP_TIMEOUT_ENV)
    return timeout
