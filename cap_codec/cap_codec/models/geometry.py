from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..schema.validation import ClosedRing, CollectionValidity, Length, Numericality, Presence, Validity
from ..utils.cap_types import format_number
from .base import Entity


MIN_LATITUDE, MAX_LATITUDE = -90.0, 90.0
MIN_LONGITUDE, MAX_LONGITUDE = -180.0, 180.0

# A closed ring needs three distinct corners plus the repeated first point.
MIN_POLYGON_POINTS = 4


@dataclass
class Point(Entity):
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    VALIDATION_RULES = (
        Presence("latitude"),
        Presence("longitude"),
        Numericality("latitude", minimum=MIN_LATITUDE, maximum=MAX_LATITUDE),
        Numericality("longitude", minimum=MIN_LONGITUDE, maximum=MAX_LONGITUDE),
    )

    def __str__(self) -> str:
        return f"{format_number(self.latitude)},{format_number(self.longitude)}"


@dataclass
class Circle(Entity):
    """A point and a radius in kilometres."""

    point: Optional[Point] = None
    radius: Optional[float] = None

    VALIDATION_RULES = (
        Presence("point"),
        Presence("radius"),
        Numericality("radius", minimum=0),
        Validity("point"),
    )

    @classmethod
    def at(cls, latitude: float, longitude: float, radius: float) -> "Circle":
        return cls(point=Point(latitude, longitude), radius=radius)

    def __str__(self) -> str:
        return f"{self.point} {format_number(self.radius)}"


@dataclass
class Polygon(Entity):
    """A closed ring of points; the first and last point are the same."""

    points: List[Point] = field(default_factory=list)

    VALIDATION_RULES = (
        Length("points", MIN_POLYGON_POINTS),
        ClosedRing("points"),
        CollectionValidity("points"),
    )

    def add_point(self, latitude: float, longitude: float) -> Point:
        point = Point(latitude, longitude)
        self.points.append(point)
        return point

    def __str__(self) -> str:
        return " ".join(str(point) for point in self.points)
