"""Custom exception hierarchy for tapmap."""

from __future__ import annotations


class TapMapError(Exception):
    """Base class for all custom errors raised by tapmap."""


class ConfigurationError(TapMapError):
    """Raised when a map configuration fails validation against the schema."""


class GeoJSONLoadError(TapMapError):
    """Raised when a GeoJSON document cannot be read from disk."""


__all__ = ["ConfigurationError", "GeoJSONLoadError", "TapMapError"]
