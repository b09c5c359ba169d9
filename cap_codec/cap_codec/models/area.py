from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from ..schema.validation import CollectionValidity, Dependency, Numericality, Presence
from .base import Builder, Entity, add_child
from .geometry import Circle, Point, Polygon
from .pairs import Geocode


@dataclass
class Area(Entity):
    """Geographic area an Info block applies to.

    ``altitude`` and ``ceiling`` are expressed in feet above sea level; a
    ceiling is only meaningful together with an altitude.
    """

    area_desc: Optional[str] = None
    altitude: Optional[float] = None
    ceiling: Optional[float] = None
    circles: List[Circle] = field(default_factory=list)
    geocodes: List[Geocode] = field(default_factory=list)
    polygons: List[Polygon] = field(default_factory=list)

    VALIDATION_RULES = (
        Presence("area_desc"),
        Numericality("altitude"),
        Numericality("ceiling"),
        Dependency("ceiling", on="altitude"),
        CollectionValidity("polygons"),
        CollectionValidity("circles"),
        CollectionValidity("geocodes"),
    )

    def add_polygon(self, builder: Optional[Builder] = None, **attributes: Any) -> Polygon:
        return add_child(self.polygons, Polygon, builder, attributes)

    def add_circle(self, builder: Optional[Builder] = None, **attributes: Any) -> Circle:
        if "point" in attributes and isinstance(attributes["point"], tuple):
            attributes["point"] = Point(*attributes["point"])
        return add_child(self.circles, Circle, builder, attributes)

    def add_geocode(self, builder: Optional[Builder] = None, **attributes: Any) -> Geocode:
        return add_child(self.geocodes, Geocode, builder, attributes)

    def __str__(self) -> str:
        return self.area_desc or ""
