"""CAP entity classes.

Entities are plain dataclasses: equality is structural and no entity knows
its parent or its CAP version (except Alert.cap_version at the root).
"""

from .base import Entity
from .pairs import EventCode, Geocode, NameValuePair, Parameter
from .geometry import Circle, Point, Polygon
from .resource import Resource
from .area import Area
from .info import Info
from .alert import Alert

__all__ = [
    "Entity",
    "NameValuePair",
    "Parameter",
    "EventCode",
    "Geocode",
    "Point",
    "Circle",
    "Polygon",
    "Resource",
    "Area",
    "Info",
    "Alert",
]
