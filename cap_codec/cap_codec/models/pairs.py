"""Name/value entities: Parameter, EventCode and Geocode.

The three share a shape but are distinct types, so a Parameter never compares
equal to an EventCode holding the same name and value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..schema.validation import Presence
from .base import Entity


@dataclass
class NameValuePair(Entity):
    name: Optional[str] = None
    value: Optional[str] = None

    VALIDATION_RULES = (
        Presence("name"),
        Presence("value"),
    )

    def __str__(self) -> str:
        return f"{self.name}: {self.value}"


@dataclass
class Parameter(NameValuePair):
    """System-specific additional parameter of an Info block."""


@dataclass
class EventCode(NameValuePair):
    """System-specific code identifying the event type of an Info block."""


@dataclass
class Geocode(NameValuePair):
    """Geographic code delineating an Area."""
