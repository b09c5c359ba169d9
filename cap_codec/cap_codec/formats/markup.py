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

"""CAP XML codec.

The encoder and decoder walk the element table of a :class:`SchemaVersion`
row, so element order, names, namespace and pair encoding are all decided by
the version table rather than by code in this module.

Decode error paths name elements, e.g. ``alert/info[0]/area[1]/circle[0]``.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional, Union

from ..config import EMPTY_NUMERIC_NONE, EMPTY_NUMERIC_ZERO, CodecConfig, resolve_config
from ..exceptions import DecodeError, EncodeError, UnsupportedVersionError
from ..models import Alert, Circle, Point, Polygon
from ..schema.versions import (
    ALERT,
    CAP_LIST,
    CIRCLE,
    DECIMAL,
    ENTITIES,
    GEOMETRY,
    INTEGER,
    PAIR_AS_TEXT,
    PAIRS,
    TEXT_LIST,
    TIMESTAMP,
    VALUE_NAME_TAG,
    VALUE_TAG,
    WORD_LIST,
    ElementField,
    SchemaVersion,
    get_schema_version,
    schema_version_for_namespace,
)
from ..utils.cap_types import (
    coerce_number,
    format_number,
    format_timestamp,
    pack_cap_list,
    parse_timestamp,
    split_words,
    unpack_cap_list,
)
from .entity_types import ENTITY_TYPES, PAIR_TYPES, ensure_representable

logger = logging.getLogger(__name__)

PAIR_SEPARATOR = "="


def _split_tag(tag: str):
    """Split ``{namespace}local`` into its parts."""
    if tag.startswith("{"):
        namespace, _, local = tag[1:].partition("}")
        return namespace, local
    return None, tag


# ---- encoding -----------------------------------------------------------------


class MarkupEncoder:
    """Builds an ElementTree for an Alert in one CAP version."""

    def __init__(self, schema_version: SchemaVersion):
        self.schema_version = schema_version

    def _sub(self, parent: ET.Element, tag: str, text: Optional[str] = None) -> ET.Element:
        element = ET.SubElement(parent, self.schema_version.qualify(tag))
        if text is not None:
            element.text = text
        return element

    def encode(self, alert: Alert) -> ET.Element:
        root = ET.Element(self.schema_version.qualify(self.schema_version.root_tag))
        self._write_entity(root, ALERT, alert, "alert")
        return root

    def _write_entity(self, element: ET.Element, kind: str, entity: Any, path: str) -> None:
        ensure_representable(self.schema_version, kind, entity, path)
        for field in self.schema_version.fields_for(kind):
            value = getattr(entity, field.attribute, None)
            self._write_field(element, field, value, path)

    def _write_field(self, element: ET.Element, field: ElementField, value: Any, path: str) -> None:
        kind = field.kind
        if kind in (ENTITIES, PAIRS, GEOMETRY, TEXT_LIST):
            members = value or []
            for index, member in enumerate(members):
                member_path = f"{path}/{field.tag}[{index}]"
                if kind == ENTITIES:
                    self._write_entity(self._sub(element, field.tag), field.entity, member, member_path)
                elif kind == PAIRS:
                    self._write_pair(element, field, member, member_path)
                elif kind == GEOMETRY:
                    self._sub(element, field.tag, _geometry_text(field.entity, member, member_path))
                else:
                    self._sub(element, field.tag, str(member))
            return

        if kind in (WORD_LIST, CAP_LIST):
            if value:
                text = " ".join(str(v) for v in value) if kind == WORD_LIST else pack_cap_list(value)
                self._sub(element, field.tag, text)
            return

        if value is None:
            return
        if kind == TIMESTAMP:
            self._sub(element, field.tag, format_timestamp(value))
        elif kind in (INTEGER, DECIMAL):
            self._sub(element, field.tag, format_number(value))
        else:
            self._sub(element, field.tag, str(value))

    def _write_pair(self, element: ET.Element, field: ElementField, pair: Any, path: str) -> None:
        if self.schema_version.pair_encoding(field.entity) == PAIR_AS_TEXT:
            if pair.name is None or pair.value is None:
                raise EncodeError(
                    f"{field.tag} needs both a name and a value in CAP {self.schema_version.version}", path
                )
            if PAIR_SEPARATOR in pair.name:
                raise EncodeError(f"{field.tag} name {pair.name!r} contains '{PAIR_SEPARATOR}'", path)
            self._sub(element, field.tag, f"{pair.name}{PAIR_SEPARATOR}{pair.value}")
            return

        pair_element = self._sub(element, field.tag)
        if pair.name is not None:
            self._sub(pair_element, VALUE_NAME_TAG, str(pair.name))
        if pair.value is not None:
            self._sub(pair_element, VALUE_TAG, str(pair.value))


def _geometry_text(kind: str, geometry: Any, path: str) -> str:
    if kind == CIRCLE:
        point = geometry.point
        if point is None or geometry.radius is None or point.latitude is None or point.longitude is None:
            raise EncodeError("Circle needs a centre point and a radius", path)
        return str(geometry)
    for point in geometry.points:
        if point.latitude is None or point.longitude is None:
            raise EncodeError("Polygon point needs a latitude and a longitude", path)
    return str(geometry)


def _encoding_schema_version(alert: Alert) -> SchemaVersion:
    try:
        return get_schema_version(alert.cap_version)
    except UnsupportedVersionError as e:
        raise EncodeError(e.message, "alert.cap_version") from e


def encode_element(alert: Alert) -> ET.Element:
    """Encode *alert* as an ElementTree element in its own ``cap_version``."""
    schema_version = _encoding_schema_version(alert)
    logger.debug(f"Encoding alert '{alert.identifier}' as CAP {schema_version.version}")
    return MarkupEncoder(schema_version).encode(alert)


def encode_markup(alert: Alert, pretty: Optional[bool] = None, config: Optional[CodecConfig] = None) -> str:
    """Encode *alert* as a CAP XML document.

    The document carries an XML declaration and declares the version's
    namespace as the default namespace. ``pretty`` falls back to the
    configured ``pretty_print``.
    """
    config = resolve_config(config)
    if pretty is None:
        pretty = config.pretty_print

    root = encode_element(alert)
    if pretty:
        ET.indent(root)
    namespace = _encoding_schema_version(alert).namespace
    data = ET.tostring(root, encoding="utf-8", xml_declaration=True, default_namespace=namespace)
    return data.decode("utf-8")


# ---- decoding -----------------------------------------------------------------


class MarkupDecoder:
    """Builds entities from an ElementTree in one CAP version."""

    def __init__(self, schema_version: SchemaVersion, config: CodecConfig):
        self.schema_version = schema_version
        self.config = config

    def decode(self, root: ET.Element) -> Alert:
        attributes = self._read_entity(root, ALERT, "alert")
        attributes["cap_version"] = self.schema_version.version
        return Alert(**attributes)

    def _read_entity(self, element: ET.Element, kind: str, path: str) -> Dict[str, Any]:
        fields = self.schema_version.fields_for(kind)
        known_tags = {self.schema_version.qualify(field.tag) for field in fields}
        for child in element:
            if child.tag not in known_tags:
                _, local = _split_tag(child.tag)
                logger.debug(f"Ignoring element '{local}' under {path}: not part of CAP {self.schema_version.version}")

        return {field.attribute: self._read_field(element, field, path) for field in fields}

    def _read_field(self, element: ET.Element, field: ElementField, path: str) -> Any:
        tag = self.schema_version.qualify(field.tag)
        kind = field.kind

        if kind in (ENTITIES, PAIRS, GEOMETRY, TEXT_LIST):
            members = []
            for index, child in enumerate(element.findall(tag)):
                member_path = f"{path}/{field.tag}[{index}]"
                if kind == ENTITIES:
                    entity_type = ENTITY_TYPES[field.entity]
                    members.append(entity_type(**self._read_entity(child, field.entity, member_path)))
                elif kind == PAIRS:
                    members.append(self._read_pair(child, field, member_path))
                elif kind == GEOMETRY:
                    members.append(_parse_geometry(field.entity, child.text, member_path))
                else:
                    members.append(child.text or "")
            return members

        child = element.find(tag)
        child_path = f"{path}/{field.tag}"
        if kind == WORD_LIST:
            return split_words(child.text) if child is not None else []
        if kind == CAP_LIST:
            if child is None:
                return []
            try:
                return unpack_cap_list(child.text)
            except ValueError as e:
                raise DecodeError(str(e), child_path) from e

        if child is None:
            return None
        text = child.text or ""
        if kind == TIMESTAMP:
            try:
                return parse_timestamp(text)
            except ValueError as e:
                raise DecodeError(f"Invalid timestamp {text!r}: {e}", child_path) from e
        if kind == INTEGER:
            return self._read_integer(text, child_path)
        if kind == DECIMAL:
            try:
                return coerce_number(text)
            except ValueError as e:
                raise DecodeError(f"Invalid {field.tag} {text!r}: {e}", child_path) from e
        return text

    def _read_integer(self, text: str, path: str) -> Optional[int]:
        if not text.strip():
            policy = self.config.empty_numeric
            if policy == EMPTY_NUMERIC_ZERO:
                return 0
            if policy == EMPTY_NUMERIC_NONE:
                return None
            raise DecodeError("Empty numeric element", path)
        try:
            return coerce_number(text, integer=True)
        except ValueError as e:
            raise DecodeError(f"Invalid integer {text!r}: {e}", path) from e

    def _read_pair(self, element: ET.Element, field: ElementField, path: str) -> Any:
        pair_type = PAIR_TYPES[field.entity]
        if self.schema_version.pair_encoding(field.entity) == PAIR_AS_TEXT:
            text = element.text or ""
            if PAIR_SEPARATOR not in text:
                raise DecodeError(f"{field.tag} {text!r} is not of the form name{PAIR_SEPARATOR}value", path)
            name, _, value = text.partition(PAIR_SEPARATOR)
            return pair_type(name=name, value=value)

        name_element = element.find(self.schema_version.qualify(VALUE_NAME_TAG))
        value_element = element.find(self.schema_version.qualify(VALUE_TAG))
        return pair_type(
            name=(name_element.text or "") if name_element is not None else None,
            value=(value_element.text or "") if value_element is not None else None,
        )


def _parse_point(text: str, path: str) -> Point:
    latitude, sep, longitude = text.partition(",")
    if not sep:
        raise DecodeError(f"Point {text!r} is not of the form latitude,longitude", path)
    try:
        return Point(coerce_number(latitude), coerce_number(longitude))
    except ValueError as e:
        raise DecodeError(f"Invalid point {text!r}: {e}", path) from e


def _parse_geometry(kind: str, text: Optional[str], path: str) -> Union[Circle, Polygon]:
    tokens = (text or "").split()
    if kind == CIRCLE:
        if len(tokens) != 2:
            raise DecodeError(f"Circle {text!r} is not of the form 'latitude,longitude radius'", path)
        try:
            radius = coerce_number(tokens[1])
        except ValueError as e:
            raise DecodeError(f"Invalid circle radius {tokens[1]!r}: {e}", path) from e
        return Circle(point=_parse_point(tokens[0], path), radius=radius)

    points: List[Point] = [_parse_point(token, path) for token in tokens]
    return Polygon(points=points)


def _detect_schema_version(root: ET.Element, version: Any) -> SchemaVersion:
    namespace, local = _split_tag(root.tag)
    if version is not None:
        schema_version = get_schema_version(version)
        if namespace != schema_version.namespace:
            raise DecodeError(
                f"Document namespace '{namespace}' does not match CAP {schema_version.version}", "alert"
            )
    else:
        schema_version = schema_version_for_namespace(namespace)

    if local != schema_version.root_tag:
        raise DecodeError(f"Root element is '{local}', expected '{schema_version.root_tag}'", local)
    return schema_version


def decode_element(element: ET.Element, version: Any = None, config: Optional[CodecConfig] = None) -> Alert:
    """Decode an ``<alert>`` element.

    The CAP version is taken from *version* when given, otherwise from the
    element's namespace. Elements the version does not define are ignored.
    """
    config = resolve_config(config)
    schema_version = _detect_schema_version(element, version)
    logger.debug(f"Decoding CAP {schema_version.version} alert")
    return MarkupDecoder(schema_version, config).decode(element)


def decode_markup(
    source: Union[str, bytes], version: Any = None, config: Optional[CodecConfig] = None
) -> Alert:
    """Decode a CAP XML document into an :class:`Alert`.

    Raises:
        DecodeError: For malformed XML or content that cannot be read.
        UnsupportedVersionError: If the namespace or *version* is not a known CAP version.
    """
    try:
        root = ET.fromstring(source)
    except ET.ParseError as e:
        raise DecodeError(f"Malformed CAP document: {e}", "") from e
    return decode_element(root, version=version, config=config)
