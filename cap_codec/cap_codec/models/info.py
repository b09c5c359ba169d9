from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional

from ..schema.validation import CollectionValidity, Inclusion, InclusionOfMembers, Presence
from .area import Area
from .base import Builder, Entity, add_child
from .pairs import EventCode, Parameter
from .resource import Resource


CATEGORY_GEO = "Geo"
CATEGORY_MET = "Met"
CATEGORY_SAFETY = "Safety"
CATEGORY_SECURITY = "Security"
CATEGORY_RESCUE = "Rescue"
CATEGORY_FIRE = "Fire"
CATEGORY_HEALTH = "Health"
CATEGORY_ENV = "Env"
CATEGORY_TRANSPORT = "Transport"
CATEGORY_INFRA = "Infra"
CATEGORY_CBRNE = "CBRNE"
CATEGORY_OTHER = "Other"
VALID_CATEGORIES = (
    CATEGORY_GEO, CATEGORY_MET, CATEGORY_SAFETY, CATEGORY_SECURITY, CATEGORY_RESCUE, CATEGORY_FIRE,
    CATEGORY_HEALTH, CATEGORY_ENV, CATEGORY_TRANSPORT, CATEGORY_INFRA, CATEGORY_CBRNE, CATEGORY_OTHER,
)

URGENCY_IMMEDIATE = "Immediate"
URGENCY_EXPECTED = "Expected"
URGENCY_FUTURE = "Future"
URGENCY_PAST = "Past"
URGENCY_UNKNOWN = "Unknown"
VALID_URGENCIES = (URGENCY_IMMEDIATE, URGENCY_EXPECTED, URGENCY_FUTURE, URGENCY_PAST, URGENCY_UNKNOWN)

SEVERITY_EXTREME = "Extreme"
SEVERITY_SEVERE = "Severe"
SEVERITY_MODERATE = "Moderate"
SEVERITY_MINOR = "Minor"
SEVERITY_UNKNOWN = "Unknown"
VALID_SEVERITIES = (SEVERITY_EXTREME, SEVERITY_SEVERE, SEVERITY_MODERATE, SEVERITY_MINOR, SEVERITY_UNKNOWN)

CERTAINTY_VERY_LIKELY = "Very Likely"
CERTAINTY_LIKELY = "Likely"
CERTAINTY_POSSIBLE = "Possible"
CERTAINTY_UNLIKELY = "Unlikely"
CERTAINTY_UNKNOWN = "Unknown"
VALID_CERTAINTIES = (
    CERTAINTY_VERY_LIKELY, CERTAINTY_LIKELY, CERTAINTY_POSSIBLE, CERTAINTY_UNLIKELY, CERTAINTY_UNKNOWN,
)

# responseType appeared in CAP 1.1; 1.2 added AllClear and Avoid.
RESPONSE_TYPE_SHELTER = "Shelter"
RESPONSE_TYPE_EVACUATE = "Evacuate"
RESPONSE_TYPE_PREPARE = "Prepare"
RESPONSE_TYPE_EXECUTE = "Execute"
RESPONSE_TYPE_AVOID = "Avoid"
RESPONSE_TYPE_MONITOR = "Monitor"
RESPONSE_TYPE_ASSESS = "Assess"
RESPONSE_TYPE_ALL_CLEAR = "AllClear"
RESPONSE_TYPE_NONE = "None"
VALID_RESPONSE_TYPES_1_1 = (
    RESPONSE_TYPE_SHELTER, RESPONSE_TYPE_EVACUATE, RESPONSE_TYPE_PREPARE, RESPONSE_TYPE_EXECUTE,
    RESPONSE_TYPE_MONITOR, RESPONSE_TYPE_ASSESS, RESPONSE_TYPE_NONE,
)
VALID_RESPONSE_TYPES_1_2 = VALID_RESPONSE_TYPES_1_1 + (RESPONSE_TYPE_AVOID, RESPONSE_TYPE_ALL_CLEAR)

DEFAULT_LANGUAGE = "en-US"


@dataclass
class Info(Entity):
    language: Optional[str] = DEFAULT_LANGUAGE
    categories: List[str] = field(default_factory=list)
    event: Optional[str] = None
    response_types: List[str] = field(default_factory=list)
    urgency: Optional[str] = None
    severity: Optional[str] = None
    certainty: Optional[str] = None
    audience: Optional[str] = None
    event_codes: List[EventCode] = field(default_factory=list)
    effective: Optional[datetime] = None
    onset: Optional[datetime] = None
    expires: Optional[datetime] = None
    sender_name: Optional[str] = None
    headline: Optional[str] = None
    description: Optional[str] = None
    instruction: Optional[str] = None
    web: Optional[str] = None
    contact: Optional[str] = None
    parameters: List[Parameter] = field(default_factory=list)
    resources: List[Resource] = field(default_factory=list)
    areas: List[Area] = field(default_factory=list)

    TIMESTAMP_ATTRIBUTES = ("effective", "onset", "expires")

    VALIDATION_RULES = (
        Presence("event"),
        Presence("urgency"),
        Presence("severity"),
        Presence("certainty"),
        Inclusion("urgency", VALID_URGENCIES),
        Inclusion("severity", VALID_SEVERITIES),
        Inclusion("certainty", VALID_CERTAINTIES),
        InclusionOfMembers("categories", VALID_CATEGORIES),
        InclusionOfMembers("response_types", VALID_RESPONSE_TYPES_1_1, versions=("1.1",)),
        InclusionOfMembers("response_types", VALID_RESPONSE_TYPES_1_2, versions=("1.2",)),
        CollectionValidity("event_codes"),
        CollectionValidity("parameters"),
        CollectionValidity("resources"),
        CollectionValidity("areas"),
    )

    def add_event_code(self, builder: Optional[Builder] = None, **attributes: Any) -> EventCode:
        return add_child(self.event_codes, EventCode, builder, attributes)

    def add_parameter(self, builder: Optional[Builder] = None, **attributes: Any) -> Parameter:
        return add_child(self.parameters, Parameter, builder, attributes)

    def add_resource(self, builder: Optional[Builder] = None, **attributes: Any) -> Resource:
        return add_child(self.resources, Resource, builder, attributes)

    def add_area(self, builder: Optional[Builder] = None, **attributes: Any) -> Area:
        return add_child(self.areas, Area, builder, attributes)

    def __str__(self) -> str:
        return f"{self.event}({self.urgency}/{self.severity}/{self.certainty})"
