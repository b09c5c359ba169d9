"""Concrete classes the codecs build for each entity kind named in the version table."""

from dataclasses import fields
from typing import Any, Dict, Iterator, Type

from ..exceptions import UnrepresentableFieldError
from ..models import Alert, Area, EventCode, Geocode, Info, Parameter, Resource
from ..schema.validation import is_blank
from ..schema.versions import ALERT, AREA, EVENT_CODE, GEOCODE, INFO, PARAMETER, RESOURCE, SchemaVersion


ENTITY_TYPES: Dict[str, Type[Any]] = {
    ALERT: Alert,
    INFO: Info,
    AREA: Area,
    RESOURCE: Resource,
}

PAIR_TYPES: Dict[str, Type[Any]] = {
    PARAMETER: Parameter,
    EVENT_CODE: EventCode,
    GEOCODE: Geocode,
}

# Attributes that are not carried by any element of the entity itself.
_OUT_OF_BAND = {ALERT: ("cap_version",)}


def _unsupported_attributes(schema_version: SchemaVersion, kind: str) -> Iterator[str]:
    known = {f.attribute for f in schema_version.fields_for(kind)}
    known.update(_OUT_OF_BAND.get(kind, ()))
    for f in fields(ENTITY_TYPES[kind]):
        if f.name not in known:
            yield f.name


def ensure_representable(
    schema_version: SchemaVersion, kind: str, entity: Any, path: str, separator: str = "."
) -> None:
    """Raise when *entity* holds a value the CAP version has no place for.

    E.g. ``response_types`` or ``deref_uri`` on a CAP 1.0 alert.
    """
    for attribute in _unsupported_attributes(schema_version, kind):
        if not is_blank(getattr(entity, attribute, None)):
            raise UnrepresentableFieldError(
                f"'{attribute}' cannot be represented in CAP {schema_version.version}",
                f"{path}{separator}{attribute}" if path else attribute,
            )

