"""Structured-text (YAML) codec.

The document is the mapping form of :mod:`cap_codec.formats.mapping` with
each key replaced by a human-readable label, e.g.::

    CAP Version: '1.2'
    Identifier: 2a6c...
    Message Type: Alert
    Information:
    - Event: Flood
      Areas:
      - Area Description: River bank
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

import yaml

from ..config import CodecConfig
from ..exceptions import DecodeError
from ..models import Alert
from ..schema.versions import ALERT, AREA, INFO, POLYGON, RESOURCE
from ..utils.cap_types import format_timestamp
from .mapping import CAP_VERSION_KEY, POINTS_KEY, decode_mapping, encode_mapping

logger = logging.getLogger(__name__)


ALERT_LABELS = {
    CAP_VERSION_KEY: "CAP Version",
    "identifier": "Identifier",
    "sender": "Sender",
    "sent": "Sent",
    "status": "Status",
    "msg_type": "Message Type",
    "password": "Password",
    "source": "Source",
    "scope": "Scope",
    "restriction": "Restriction",
    "addresses": "Addresses",
    "codes": "Codes",
    "note": "Note",
    "references": "References",
    "incidents": "Incidents",
    "infos": "Information",
}

INFO_LABELS = {
    "language": "Language",
    "categories": "Categories",
    "event": "Event",
    "response_types": "Response Types",
    "urgency": "Urgency",
    "severity": "Severity",
    "certainty": "Certainty",
    "audience": "Audience",
    "effective": "Effective",
    "onset": "Onset",
    "expires": "Expires",
    "sender_name": "Sender Name",
    "headline": "Headline",
    "description": "Description",
    "instruction": "Instruction",
    "web": "Web",
    "contact": "Contact",
    "event_codes": "Event Codes",
    "parameters": "Parameters",
    "resources": "Resources",
    "areas": "Areas",
}

AREA_LABELS = {
    "area_desc": "Area Description",
    "altitude": "Altitude",
    "ceiling": "Ceiling",
    "circles": "Circles",
    "geocodes": "Geocodes",
    "polygons": "Polygons",
}

# "Derefrenced" is kept as spelled by existing rcap YAML documents.
RESOURCE_LABELS = {
    "resource_desc": "Resource Description",
    "uri": "URI",
    "mime_type": "Mime Type",
    "deref_uri": "Derefrenced URI Data",
    "size": "Size",
    "digest": "Digest",
}

POLYGON_LABELS = {POINTS_KEY: "Points"}

LABELS = {
    ALERT: ALERT_LABELS,
    INFO: INFO_LABELS,
    AREA: AREA_LABELS,
    RESOURCE: RESOURCE_LABELS,
    POLYGON: POLYGON_LABELS,
}

# (parent kind, key) -> kind of each member of that list
CHILD_KINDS = {
    (ALERT, "infos"): INFO,
    (INFO, "resources"): RESOURCE,
    (INFO, "areas"): AREA,
    (AREA, "polygons"): POLYGON,
}


def _relabel(kind: str, mapping: Dict[str, Any], to_labels: bool) -> Dict[str, Any]:
    labels = LABELS[kind]
    renames = labels if to_labels else {label: key for key, label in labels.items()}

    result = {}
    for key, value in mapping.items():
        new_key = renames.get(key, key)
        attribute = key if to_labels else new_key
        child_kind = CHILD_KINDS.get((kind, attribute))
        if child_kind is not None and isinstance(value, list):
            value = [_relabel(child_kind, member, to_labels) if isinstance(member, dict) else member for member in value]
        result[new_key] = value
    return result


def _plain_scalars(value: Any) -> Any:
    """Turn YAML-native timestamps back into CAP timestamp text."""
    if isinstance(value, dict):
        return {k: _plain_scalars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain_scalars(v) for v in value]
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, date):
        return format_timestamp(datetime(value.year, value.month, value.day, tzinfo=timezone.utc))
    return value


def encode_structured_text(alert: Alert) -> str:
    """Encode *alert* as a labelled YAML document."""
    document = _relabel(ALERT, encode_mapping(alert), to_labels=True)
    return yaml.safe_dump(document, sort_keys=False, allow_unicode=True, default_flow_style=False)


def decode_structured_text(text: Any, version: Any = None, config: Optional[CodecConfig] = None) -> Alert:
    """Decode a document produced by :func:`encode_structured_text`.

    Raises:
        DecodeError: For malformed YAML or a document that is not an alert.
    """
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DecodeError(f"Malformed structured text: {e}", "") from e

    if not isinstance(document, dict):
        raise DecodeError(f"Structured text must hold a mapping, got {type(document).__name__}", "")

    mapping = _relabel(ALERT, _plain_scalars(document), to_labels=False)
    return decode_mapping(mapping, version=version, config=config)
