"""Custom exceptions for the KML cable route converter."""

__all__ = [
    "KMLCablesError",
    "KMLParseError",
    "InvalidCoordinateError",
    "DataExportError",
    "StorageError",
    "ConfigurationError",
]


class KMLCablesError(Exception):
    """Base exception for all kml-cables errors."""

    pass


class KMLParseError(KMLCablesError):
    """Raised when a KML document is empty or not well-formed XML.

    This is the only error that aborts a whole conversion.
    """

    def __init__(self, message: str, file_path: str = None, line_number: int = None):
        self.file_path = file_path
        self.line_number = line_number
        super().__init__(self._format_message(message))

    def _format_message(self, message: str) -> str:
        """Format error message with file and line information."""
        parts = [message]
        if self.file_path:
            parts.append(f"File: {self.file_path}")
        if self.line_number:
            parts.append(f"Line: {self.line_number}")
        return " | ".join(parts)


class InvalidCoordinateError(KMLCablesError):
    """Raised when coordinate data is invalid."""

    def __init__(self, message: str, latitude: float = None, longitude: float = None):
        self.latitude = latitude
        self.longitude = longitude
        super().__init__(self._format_message(message))

    def _format_message(self, message: str) -> str:
        """Format error message with coordinate information."""
        if self.latitude is not None and self.longitude is not None:
            return f"{message} (lat: {self.latitude}, lon: {self.longitude})"
        return message


class DataExportError(KMLCablesError):
    """Raised when writing an output file fails."""

    def __init__(self, message: str, output_path: str = None):
        self.output_path = output_path
        if output_path:
            message = f"{message} (Output: {output_path})"
        super().__init__(message)


class StorageError(KMLCablesError):
    """Raised when a collection cannot be stored."""

    def __init__(self, message: str, slot: str = None):
        self.slot = slot
        if slot:
            message = f"{message} (Slot: {slot})"
        super().__init__(message)


class ConfigurationError(KMLCablesError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, config_key: str = None):
        self.config_key = config_key
        if config_key:
            message = f"{message} (Key: {config_key})"
        super().__init__(message)
