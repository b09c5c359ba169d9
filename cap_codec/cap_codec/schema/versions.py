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

"""Per-version description of the CAP schema.

Everything that differs between CAP 1.0, 1.1 and 1.2 lives in the table at the
bottom of this module: namespace, element names and order, the way
name/value pairs are written and which optional fields exist. Codecs read the
rows; entity classes never look at versions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..exceptions import UnsupportedVersionError
from ..utils.format_version import normalize_cap_version


# ---- element kinds ------------------------------------------------------------

TEXT = "text"
TIMESTAMP = "timestamp"
INTEGER = "integer"
DECIMAL = "decimal"
TEXT_LIST = "text_list"        # one element per member
WORD_LIST = "word_list"        # single element, members joined by a space
CAP_LIST = "cap_list"          # single element, quoted CAP list
ENTITIES = "entities"          # one child entity element per member
PAIRS = "pairs"                # one name/value element per member
GEOMETRY = "geometry"          # one circle/polygon text element per member

# ---- pair encodings -----------------------------------------------------------

PAIR_AS_TEXT = "name=value"            # <parameter>name=value</parameter>
PAIR_AS_VALUE_NAME = "valueName/value"  # <parameter><valueName/><value/></parameter>

VALUE_NAME_TAG = "valueName"
VALUE_TAG = "value"

# ---- entity kinds -------------------------------------------------------------

ALERT = "alert"
INFO = "info"
AREA = "area"
RESOURCE = "resource"
PARAMETER = "parameter"
EVENT_CODE = "event_code"
GEOCODE = "geocode"
CIRCLE = "circle"
POLYGON = "polygon"


@dataclass(frozen=True)
class ElementField:
    """One child element of an entity element.

    ``entity`` names the child entity kind for ENTITIES, PAIRS and GEOMETRY.
    """

    attribute: str
    tag: str
    kind: str = TEXT
    entity: Optional[str] = None


@dataclass(frozen=True)
class SchemaVersion:
    version: str
    namespace: str
    root_tag: str
    alert_fields: Tuple[ElementField, ...]
    info_fields: Tuple[ElementField, ...]
    area_fields: Tuple[ElementField, ...]
    resource_fields: Tuple[ElementField, ...]
    parameter_encoding: str
    event_code_encoding: str
    geocode_encoding: str
    geocodes_as_mapping: bool

    def fields_for(self, entity_kind: str) -> Tuple[ElementField, ...]:
        try:
            return {
                ALERT: self.alert_fields,
                INFO: self.info_fields,
                AREA: self.area_fields,
                RESOURCE: self.resource_fields,
            }[entity_kind]
        except KeyError:
            raise ValueError(f"Unknown entity kind: {entity_kind}") from None

    def pair_encoding(self, entity_kind: str) -> str:
        try:
            return {
                PARAMETER: self.parameter_encoding,
                EVENT_CODE: self.event_code_encoding,
                GEOCODE: self.geocode_encoding,
            }[entity_kind]
        except KeyError:
            raise ValueError(f"Unknown pair kind: {entity_kind}") from None

    def supports(self, entity_kind: str, attribute: str) -> bool:
        """Whether *attribute* of *entity_kind* exists in this version."""
        return any(f.attribute == attribute for f in self.fields_for(entity_kind))

    @property
    def supports_response_types(self) -> bool:
        return self.supports(INFO, "response_types")

    @property
    def supports_deref_uri(self) -> bool:
        return self.supports(RESOURCE, "deref_uri")

    def qualify(self, tag: str) -> str:
        """Return ``{namespace}tag`` for ElementTree lookups."""
        return f"{{{self.namespace}}}{tag}"

    def __str__(self) -> str:
        return self.version


# ---- element tables -----------------------------------------------------------

_ALERT_FIELDS = (
    ElementField("identifier", "identifier"),
    ElementField("sender", "sender"),
    ElementField("sent", "sent", TIMESTAMP),
    ElementField("status", "status"),
    ElementField("msg_type", "msgType"),
    ElementField("password", "password"),
    ElementField("source", "source"),
    ElementField("scope", "scope"),
    ElementField("restriction", "restriction"),
    ElementField("addresses", "addresses", CAP_LIST),
    ElementField("codes", "code", TEXT_LIST),
    ElementField("note", "note"),
    ElementField("references", "references", WORD_LIST),
    ElementField("incidents", "incidents", WORD_LIST),
    ElementField("infos", "info", ENTITIES, INFO),
)


def _info_fields(*, response_types: bool) -> Tuple[ElementField, ...]:
    fields = [
        ElementField("language", "language"),
        ElementField("categories", "category", TEXT_LIST),
        ElementField("event", "event"),
    ]
    if response_types:
        fields.append(ElementField("response_types", "responseType", TEXT_LIST))
    fields.extend(
        [
            ElementField("urgency", "urgency"),
            ElementField("severity", "severity"),
            ElementField("certainty", "certainty"),
            ElementField("audience", "audience"),
            ElementField("event_codes", "eventCode", PAIRS, EVENT_CODE),
            ElementField("effective", "effective", TIMESTAMP),
            ElementField("onset", "onset", TIMESTAMP),
            ElementField("expires", "expires", TIMESTAMP),
            ElementField("sender_name", "senderName"),
            ElementField("headline", "headline"),
            ElementField("description", "description"),
            ElementField("instruction", "instruction"),
            ElementField("web", "web"),
            ElementField("contact", "contact"),
            ElementField("parameters", "parameter", PAIRS, PARAMETER),
            ElementField("resources", "resource", ENTITIES, RESOURCE),
            ElementField("areas", "area", ENTITIES, AREA),
        ]
    )
    return tuple(fields)


_AREA_FIELDS = (
    ElementField("area_desc", "areaDesc"),
    ElementField("polygons", "polygon", GEOMETRY, POLYGON),
    ElementField("circles", "circle", GEOMETRY, CIRCLE),
    ElementField("geocodes", "geocode", PAIRS, GEOCODE),
    ElementField("altitude", "altitude", DECIMAL),
    ElementField("ceiling", "ceiling", DECIMAL),
)


def _resource_fields(*, deref_uri: bool) -> Tuple[ElementField, ...]:
    fields = [
        ElementField("resource_desc", "resourceDesc"),
        ElementField("mime_type", "mimeType"),
        ElementField("size", "size", INTEGER),
        ElementField("uri", "uri"),
    ]
    if deref_uri:
        fields.append(ElementField("deref_uri", "derefUri"))
    fields.append(ElementField("digest", "digest"))
    return tuple(fields)


CAP_1_0 = SchemaVersion(
    version="1.0",
    namespace="http://www.incident.com/cap/1.0",
    root_tag="alert",
    alert_fields=_ALERT_FIELDS,
    info_fields=_info_fields(response_types=False),
    area_fields=_AREA_FIELDS,
    resource_fields=_resource_fields(deref_uri=False),
    parameter_encoding=PAIR_AS_TEXT,
    event_code_encoding=PAIR_AS_TEXT,
    geocode_encoding=PAIR_AS_TEXT,
    geocodes_as_mapping=False,
)

CAP_1_1 = SchemaVersion(
    version="1.1",
    namespace="urn:oasis:names:tc:emergency:cap:1.1",
    root_tag="alert",
    alert_fields=_ALERT_FIELDS,
    info_fields=_info_fields(response_types=True),
    area_fields=_AREA_FIELDS,
    resource_fields=_resource_fields(deref_uri=True),
    parameter_encoding=PAIR_AS_VALUE_NAME,
    event_code_encoding=PAIR_AS_VALUE_NAME,
    geocode_encoding=PAIR_AS_VALUE_NAME,
    geocodes_as_mapping=False,
)

CAP_1_2 = SchemaVersion(
    version="1.2",
    namespace="urn:oasis:names:tc:emergency:cap:1.2",
    root_tag="alert",
    alert_fields=_ALERT_FIELDS,
    info_fields=_info_fields(response_types=True),
    area_fields=_AREA_FIELDS,
    resource_fields=_resource_fields(deref_uri=True),
    parameter_encoding=PAIR_AS_VALUE_NAME,
    event_code_encoding=PAIR_AS_VALUE_NAME,
    geocode_encoding=PAIR_AS_VALUE_NAME,
    geocodes_as_mapping=True,
)

SCHEMA_VERSIONS: Dict[str, SchemaVersion] = {v.version: v for v in (CAP_1_0, CAP_1_1, CAP_1_2)}
CAP_VERSIONS: Tuple[str, ...] = tuple(SCHEMA_VERSIONS)
LATEST_CAP_VERSION = CAP_1_2.version

_BY_NAMESPACE: Dict[str, SchemaVersion] = {v.namespace: v for v in SCHEMA_VERSIONS.values()}


def get_schema_version(version: Any) -> SchemaVersion:
    """Return the descriptor row for *version*.

    Accepts a :class:`SchemaVersion` or anything :func:`normalize_cap_version`
    understands (``"1.2"``, ``"v1.1"``, ``"CAP 1.0"``, ``1.2``).

    Raises:
        UnsupportedVersionError: If the version is not one of 1.0, 1.1, 1.2.
    """
    if isinstance(version, SchemaVersion):
        return version
    normalized = normalize_cap_version(version)
    try:
        return SCHEMA_VERSIONS[normalized]
    except KeyError:
        raise UnsupportedVersionError(
            f"Unsupported CAP version '{normalized}'. Supported versions: {', '.join(CAP_VERSIONS)}"
        ) from None


def schema_version_for_namespace(namespace: Optional[str]) -> SchemaVersion:
    """Return the descriptor row declared by an XML namespace URI."""
    try:
        return _BY_NAMESPACE[(namespace or "").strip()]
    except KeyError:
        raise UnsupportedVersionError(
            f"Unsupported CAP namespace '{namespace}'. "
            f"Known namespaces: {', '.join(sorted(_BY_NAMESPACE))}"
        ) from None
