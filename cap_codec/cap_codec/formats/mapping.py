# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Mapping and JSON codec.

The mapping form uses the entity attribute names as keys::

    {
        "cap_version": "1.2",
        "identifier": "...",
        "infos": [{"event": "...", "parameters": {"name": "value"}, ...}],
    }

``None`` values and empty collections are left out. Parameters and event
codes collapse to ``{name: value}`` (a repeated name keeps the last value);
geocodes do so from CAP 1.2 and are a list of single-entry mappings before.
Circles are ``[latitude, longitude, radius]`` and polygons
``{"points": [[latitude, longitude], ...]}``.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from ..config import EMPTY_NUMERIC_NONE, EMPTY_NUMERIC_ZERO, CodecConfig, resolve_config
from ..exceptions import DecodeError, EncodeError, UnsupportedVersionError
from ..models import Alert, Circle, Point, Polygon
from ..schema.mapping_schema import check_mapping_structure
from ..schema.versions import (
    ALERT,
    CAP_LIST,
    CIRCLE,
    DECIMAL,
    ENTITIES,
    GEOCODE,
    GEOMETRY,
    INTEGER,
    PAIRS,
    TEXT_LIST,
    TIMESTAMP,
    WORD_LIST,
    ElementField,
    SchemaVersion,
    get_schema_version,
)
from ..utils.cap_types import coerce_number, format_timestamp, parse_timestamp
from .entity_types import ENTITY_TYPES, PAIR_TYPES, ensure_representable

logger = logging.getLogger(__name__)

CAP_VERSION_KEY = "cap_version"
POINTS_KEY = "points"

_LIST_KINDS = (TEXT_LIST, WORD_LIST, CAP_LIST)


def _pointer(path: str, token: Any) -> str:
    return f"{path}/{token}"


def _pairs_as_mapping(schema_version: SchemaVersion, kind: str) -> bool:
    return kind != GEOCODE or schema_version.geocodes_as_mapping


# ---- encoding -----------------------------------------------------------------


class MappingEncoder:
    """Turns an Alert into plain dicts and lists for one CAP version."""

    def __init__(self, schema_version: SchemaVersion):
        self.schema_version = schema_version

    def encode(self, alert: Alert) -> Dict[str, Any]:
        mapping = {CAP_VERSION_KEY: self.schema_version.version}
        mapping.update(self._encode_entity(ALERT, alert, ""))
        return mapping

    def _encode_entity(self, kind: str, entity: Any, path: str) -> Dict[str, Any]:
        ensure_representable(self.schema_version, kind, entity, path, separator="/")
        mapping = {}
        for field in self.schema_version.fields_for(kind):
            value = getattr(entity, field.attribute, None)
            if value is None or (isinstance(value, list) and not value):
                continue
            mapping[field.attribute] = self._encode_field(field, value, _pointer(path, field.attribute))
        return mapping

    def _encode_field(self, field: ElementField, value: Any, path: str) -> Any:
        if field.kind == ENTITIES:
            return [
                self._encode_entity(field.entity, member, _pointer(path, index))
                for index, member in enumerate(value)
            ]
        if field.kind == PAIRS:
            return self._encode_pairs(field, value, path)
        if field.kind == GEOMETRY:
            return [_encode_geometry(field.entity, member, _pointer(path, index)) for index, member in enumerate(value)]
        if field.kind in _LIST_KINDS:
            return [str(member) for member in value]
        if field.kind == TIMESTAMP:
            return format_timestamp(value)
        if field.kind in (INTEGER, DECIMAL):
            return value
        return str(value)

    def _encode_pairs(self, field: ElementField, pairs: List[Any], path: str) -> Any:
        for index, pair in enumerate(pairs):
            if pair.name is None:
                raise EncodeError(f"{field.attribute} entry has no name", _pointer(path, index))

        if _pairs_as_mapping(self.schema_version, field.entity):
            # Repeated names keep the last value.
            return {pair.name: pair.value for pair in pairs}
        return [{pair.name: pair.value} for pair in pairs]


def _encode_geometry(kind: str, geometry: Any, path: str) -> Any:
    if kind == CIRCLE:
        point = geometry.point
        if point is None:
            raise EncodeError("Circle has no centre point", path)
        return [point.latitude, point.longitude, geometry.radius]
    return {POINTS_KEY: [[point.latitude, point.longitude] for point in geometry.points]}


def encode_mapping(alert: Alert) -> Dict[str, Any]:
    """Encode *alert* as a plain mapping in its own ``cap_version``."""
    try:
        schema_version = get_schema_version(alert.cap_version)
    except UnsupportedVersionError as e:
        raise EncodeError(e.message, _pointer("", CAP_VERSION_KEY)) from e
    return MappingEncoder(schema_version).encode(alert)


def encode_json(alert: Alert, pretty: Optional[bool] = None, config: Optional[CodecConfig] = None) -> str:
    """Encode *alert* as JSON text of its mapping form."""
    config = resolve_config(config)
    if pretty is None:
        pretty = config.pretty_print
    return json.dumps(encode_mapping(alert), indent=2 if pretty else None, ensure_ascii=False)


# ---- decoding -----------------------------------------------------------------


class MappingDecoder:
    """Builds entities from a structurally checked mapping."""

    def __init__(self, schema_version: SchemaVersion, config: CodecConfig):
        self.schema_version = schema_version
        self.config = config

    def decode(self, mapping: Dict[str, Any]) -> Alert:
        attributes = self._decode_attributes(ALERT, mapping, "", ignore=(CAP_VERSION_KEY,))
        attributes["cap_version"] = self.schema_version.version
        return Alert(**attributes)

    def _decode_attributes(self, kind: str, mapping: Dict[str, Any], path: str, ignore=()) -> Dict[str, Any]:
        fields = self.schema_version.fields_for(kind)
        known = {field.attribute for field in fields}
        for key in mapping:
            if key not in known and key not in ignore:
                logger.debug(f"Ignoring key '{key}' at '{path or '/'}': not part of CAP {self.schema_version.version}")

        attributes = {}
        for field in fields:
            value = mapping.get(field.attribute)
            attributes[field.attribute] = self._decode_field(field, value, _pointer(path, field.attribute))
        return attributes

    def _decode_field(self, field: ElementField, value: Any, path: str) -> Any:
        kind = field.kind
        if kind == ENTITIES:
            entity_type = ENTITY_TYPES[field.entity]
            return [
                entity_type(**self._decode_attributes(field.entity, member, _pointer(path, index)))
                for index, member in enumerate(value or [])
            ]
        if kind == PAIRS:
            return self._decode_pairs(field, value)
        if kind == GEOMETRY:
            return [_decode_geometry(field.entity, member) for member in value or []]
        if kind in _LIST_KINDS:
            return list(value or [])

        if value is None:
            return None
        if kind == TIMESTAMP:
            try:
                return parse_timestamp(value)
            except ValueError as e:
                raise DecodeError(f"Invalid timestamp {value!r}: {e}", path) from e
        if kind == INTEGER:
            return self._decode_integer(value, path)
        if kind == DECIMAL:
            try:
                return coerce_number(value)
            except ValueError as e:
                raise DecodeError(f"Invalid number {value!r}: {e}", path) from e
        return value

    def _decode_integer(self, value: Any, path: str) -> Optional[int]:
        if isinstance(value, str) and not value.strip():
            policy = self.config.empty_numeric
            if policy == EMPTY_NUMERIC_ZERO:
                return 0
            if policy == EMPTY_NUMERIC_NONE:
                return None
            raise DecodeError("Empty numeric value", path)
        try:
            return coerce_number(value, integer=True)
        except ValueError as e:
            raise DecodeError(f"Invalid integer {value!r}: {e}", path) from e

    def _decode_pairs(self, field: ElementField, value: Any) -> List[Any]:
        pair_type = PAIR_TYPES[field.entity]
        if not value:
            return []
        if isinstance(value, dict):
            return [pair_type(name=name, value=pair_value) for name, pair_value in value.items()]
        pairs = []
        for entry in value:
            for name, pair_value in entry.items():
                pairs.append(pair_type(name=name, value=pair_value))
        return pairs


def _decode_geometry(kind: str, value: Any) -> Any:
    # Shape and coordinate types are guaranteed by the mapping schema.
    if kind == CIRCLE:
        latitude, longitude, radius = value
        return Circle(point=Point(float(latitude), float(longitude)), radius=float(radius))
    return Polygon(points=[Point(float(lat), float(lon)) for lat, lon in value.get(POINTS_KEY, [])])


def _resolve_version(mapping: Any, version: Any, config: CodecConfig) -> SchemaVersion:
    if version is None and isinstance(mapping, dict):
        version = mapping.get(CAP_VERSION_KEY)
    if version is None:
        version = config.default_version
    return get_schema_version(version)


def decode_mapping(
    mapping: Dict[str, Any], version: Any = None, config: Optional[CodecConfig] = None
) -> Alert:
    """Decode a mapping produced by :func:`encode_mapping` (or JSON/YAML input).

    The CAP version is taken from *version*, then the ``cap_version`` key,
    then the configured default.

    Raises:
        DecodeError: With a JSON-pointer path for the first structural problem.
        UnsupportedVersionError: If the version is not one of 1.0, 1.1, 1.2.
    """
    config = resolve_config(config)
    if not isinstance(mapping, dict):
        raise DecodeError(f"Alert mapping must be an object, got {type(mapping).__name__}", "")

    schema_version = _resolve_version(mapping, version, config)
    logger.debug(f"Decoding CAP {schema_version.version} alert mapping")
    check_mapping_structure(mapping, schema_version)
    return MappingDecoder(schema_version, config).decode(mapping)


def decode_json(text: Any, version: Any = None, config: Optional[CodecConfig] = None) -> Alert:
    """Decode JSON text into an :class:`Alert`."""
    try:
        mapping = json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Malformed JSON: {e.msg} at line {e.lineno} column {e.colno}", "") from e
    return decode_mapping(mapping, version=version, config=config)
