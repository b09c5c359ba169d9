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

"""JSON Schema for the mapping form of an alert.

Mappings reach the codec from JSON text, YAML text or straight from callers,
so their shape is checked with jsonschema before any entity is built. Only
structure is checked here (types, nesting); CAP semantics are left to
:mod:`cap_codec.schema.validation`.
"""

from typing import Any, Dict

import jsonschema
from jsonschema.exceptions import best_match

from ..exceptions import DecodeError
from .versions import SchemaVersion, get_schema_version


# Schema cache to avoid rebuilding per decode
_SCHEMA_CACHE: Dict[str, dict] = {}

_STRING = {"type": "string"}
_NUMBER = {"type": ["number", "string"]}
_INTEGER = {"type": ["integer", "string"]}
_STRING_LIST = {"type": "array", "items": _STRING}
_PAIR_VALUE = {"type": ["string", "null"]}
_NAME_VALUE_MAP = {"type": "object", "additionalProperties": _PAIR_VALUE}
_SINGLE_ENTRY_LIST = {
    "type": "array",
    "items": {"type": "object", "additionalProperties": _PAIR_VALUE, "minProperties": 1, "maxProperties": 1},
}
_COORDINATE = {"type": "number"}


def _object(properties: Dict[str, Any]) -> dict:
    # Unknown keys are tolerated and ignored by the decoder.
    return {"type": "object", "properties": properties, "additionalProperties": True}


def _resource_schema(schema_version: SchemaVersion) -> dict:
    properties = {
        "resource_desc": _STRING,
        "mime_type": _STRING,
        "size": _INTEGER,
        "uri": _STRING,
        "digest": _STRING,
    }
    if schema_version.supports_deref_uri:
        properties["deref_uri"] = _STRING
    return _object(properties)


def _area_schema(schema_version: SchemaVersion) -> dict:
    circle = {"type": "array", "items": _COORDINATE, "minItems": 3, "maxItems": 3}
    point = {"type": "array", "items": _COORDINATE, "minItems": 2, "maxItems": 2}
    polygon = _object({"points": {"type": "array", "items": point}})
    return _object(
        {
            "area_desc": _STRING,
            "altitude": _NUMBER,
            "ceiling": _NUMBER,
            "circles": {"type": "array", "items": circle},
            "geocodes": _NAME_VALUE_MAP if schema_version.geocodes_as_mapping else _SINGLE_ENTRY_LIST,
            "polygons": {"type": "array", "items": polygon},
        }
    )


def _info_schema(schema_version: SchemaVersion) -> dict:
    properties = {
        "language": _STRING,
        "categories": _STRING_LIST,
        "event": _STRING,
        "urgency": _STRING,
        "severity": _STRING,
        "certainty": _STRING,
        "audience": _STRING,
        "effective": _STRING,
        "onset": _STRING,
        "expires": _STRING,
        "sender_name": _STRING,
        "headline": _STRING,
        "description": _STRING,
        "instruction": _STRING,
        "web": _STRING,
        "contact": _STRING,
        "event_codes": _NAME_VALUE_MAP,
        "parameters": _NAME_VALUE_MAP,
        "resources": {"type": "array", "items": _resource_schema(schema_version)},
        "areas": {"type": "array", "items": _area_schema(schema_version)},
    }
    if schema_version.supports_response_types:
        properties["response_types"] = _STRING_LIST
    return _object(properties)


def build_alert_schema(schema_version: SchemaVersion) -> dict:
    """Build the JSON Schema describing an alert mapping for one CAP version."""
    schema = _object(
        {
            "cap_version": {"type": ["string", "number"]},
            "identifier": _STRING,
            "sender": _STRING,
            "sent": _STRING,
            "status": _STRING,
            "msg_type": _STRING,
            "password": _STRING,
            "source": _STRING,
            "scope": _STRING,
            "restriction": _STRING,
            "addresses": _STRING_LIST,
            "codes": _STRING_LIST,
            "note": _STRING,
            "references": _STRING_LIST,
            "incidents": _STRING_LIST,
            "infos": {"type": "array", "items": _info_schema(schema_version)},
        }
    )
    schema["$schema"] = "http://json-schema.org/draft-07/schema#"
    schema["title"] = f"CAP {schema_version.version} alert mapping"
    return schema


def load_schema(version: Any) -> dict:
    """Return the (cached) alert mapping schema for *version*."""
    schema_version = get_schema_version(version)
    cache_key = f"alert-v{schema_version.version}"
    if cache_key not in _SCHEMA_CACHE:
        _SCHEMA_CACHE[cache_key] = build_alert_schema(schema_version)
    return _SCHEMA_CACHE[cache_key]


def check_mapping_structure(data: Any, version: Any) -> None:
    """Raise DecodeError for the most relevant structural problem in *data*.

    The error path is a JSON pointer such as ``/infos/0/areas/1/circles/0``.
    """
    if not isinstance(data, dict):
        raise DecodeError(f"Alert mapping must be an object, got {type(data).__name__}", "")

    validator = jsonschema.Draft7Validator(load_schema(version))
    error = best_match(validator.iter_errors(data))
    if error is not None:
        path = "/" + "/".join(str(p) for p in error.absolute_path) if error.absolute_path else ""
        raise DecodeError(f"Invalid alert mapping: {error.message}", path)


def clear_cache() -> None:
    """Clear the schema cache. Useful for testing."""
    _SCHEMA_CACHE.clear()
