"""Map display and interaction settings."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, FrozenSet, Optional

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from . import config
from .errors import ConfigurationError
from .models import Coordinate, GeoRegion


@dataclass(frozen=True)
class PointOfInterestFilter:
    """Decide which annotation categories are shown.

    ``include`` restricts the map to the listed categories; ``exclude`` hides
    the listed categories.  ``exclude_all`` hides every categorised
    annotation.  Annotations without a category are always shown.
    """

    include: Optional[FrozenSet[str]] = None
    exclude: FrozenSet[str] = frozenset()
    exclude_all: bool = False

    @classmethod
    def including(cls, *categories: str) -> "PointOfInterestFilter":
        return cls(include=frozenset(categories))

    @classmethod
    def excluding(cls, *categories: str) -> "PointOfInterestFilter":
        return cls(exclude=frozenset(categories))

    @classmethod
    def excluding_all(cls) -> "PointOfInterestFilter":
        return cls(exclude_all=True)

    def allows(self, category: Optional[str]) -> bool:
        if category is None:
            return True
        if self.exclude_all:
            return False
        if self.include is not None and category not in self.include:
            return False
        return category not in self.exclude


@dataclass(frozen=True)
class MapConfiguration:
    """Appearance and behaviour of a :class:`~tapmap.map_widget.TappableMapWidget`.

    ``region`` fixes the viewport; when it is ``None`` the map fits itself to
    all polygon groups after every update.
    """

    region: Optional[GeoRegion] = None
    display_mode: str = config.DEFAULT_DISPLAY_MODE
    allow_scroll: bool = True
    allow_zoom: bool = True
    allow_rotate: bool = True
    show_user_location: bool = False
    point_of_interest_filter: PointOfInterestFilter = field(
        default_factory=PointOfInterestFilter.excluding_all
    )

    def __post_init__(self) -> None:
        if self.display_mode not in config.DISPLAY_MODE_PALETTES:
            raise ConfigurationError(f"Unknown display mode '{self.display_mode}'")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "MapConfiguration":
        """Validate a JSON-style mapping and build a configuration from it."""

        payload = dict(data or {})
        try:
            _validator.validate(payload)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid map configuration: {exc.message}") from exc

        region = None
        raw_region = payload.get("region")
        if raw_region is not None:
            region = GeoRegion(
                center=Coordinate(
                    latitude=float(raw_region["center"]["latitude"]),
                    longitude=float(raw_region["center"]["longitude"]),
                ),
                latitude_delta=float(raw_region["latitude_delta"]),
                longitude_delta=float(raw_region["longitude_delta"]),
            )

        return cls(
            region=region,
            display_mode=payload.get("display_mode", config.DEFAULT_DISPLAY_MODE),
            allow_scroll=payload.get("allow_scroll", True),
            allow_zoom=payload.get("allow_zoom", True),
            allow_rotate=payload.get("allow_rotate", True),
            show_user_location=payload.get("show_user_location", False),
            point_of_interest_filter=_filter_from_mapping(payload.get("point_of_interest_filter")),
        )


def _filter_from_mapping(data: Mapping[str, Any] | None) -> PointOfInterestFilter:
    if data is None:
        return PointOfInterestFilter.excluding_all()
    mode = data["mode"]
    categories = data.get("categories", [])
    if mode == "include":
        return PointOfInterestFilter.including(*categories)
    if mode == "exclude":
        return PointOfInterestFilter.excluding(*categories)
    if mode == "exclude_all":
        return PointOfInterestFilter.excluding_all()
    return PointOfInterestFilter()


CONFIGURATION_SCHEMA: dict[str, Any] = {
    "$id": "tapmap/configuration.schema.json",
    "type": "object",
    "properties": {
        "region": {
            "type": ["object", "null"],
            "required": ["center", "latitude_delta", "longitude_delta"],
            "properties": {
                "center": {
                    "type": "object",
                    "required": ["latitude", "longitude"],
                    "properties": {
                        "latitude": {"type": "number", "minimum": -90, "maximum": 90},
                        "longitude": {"type": "number", "minimum": -180, "maximum": 180},
                    },
                },
                "latitude_delta": {"type": "number", "exclusiveMinimum": 0, "maximum": 180},
                "longitude_delta": {"type": "number", "exclusiveMinimum": 0, "maximum": 360},
            },
        },
        "display_mode": {
            "type": "string",
            "enum": sorted(config.DISPLAY_MODE_PALETTES),
        },
        "allow_scroll": {"type": "boolean"},
        "allow_zoom": {"type": "boolean"},
        "allow_rotate": {"type": "boolean"},
        "show_user_location": {"type": "boolean"},
        "point_of_interest_filter": {
            "type": ["object", "null"],
            "required": ["mode"],
            "properties": {
                "mode": {"type": "string", "enum": ["include", "exclude", "exclude_all", "all"]},
                "categories": {"type": "array", "items": {"type": "string"}},
            },
        },
    },
    "additionalProperties": False,
}

_validator = Draft202012Validator(CONFIGURATION_SCHEMA)


__all__ = ["CONFIGURATION_SCHEMA", "MapConfiguration", "PointOfInterestFilter"]
