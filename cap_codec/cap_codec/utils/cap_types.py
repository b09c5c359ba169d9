"""Value helpers shared by every CAP representation.

Timestamps, CAP-list strings, numbers and identifiers are rendered the same
way in markup, mappings and structured text, so the codecs all go through
the functions below.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional

from dateutil import parser as date_parser


# ---- identifiers -------------------------------------------------------------


def generate_identifier() -> str:
    """Return a fresh alert identifier.

    UUID4 values need no shared counter, so concurrent callers never collide.
    """
    return str(uuid.uuid4())


# ---- timestamps --------------------------------------------------------------


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Render *value* as ``YYYY-MM-DDThh:mm:ss+hh:mm``.

    Naive datetimes are taken to be UTC. The offset is always numeric, UTC is
    written ``+00:00`` and never ``Z``. Sub-second precision is dropped.
    """
    if value is None:
        return None
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat(timespec="seconds")


def normalize_timestamp(value: Any) -> Any:
    """Bring a datetime to the precision CAP timestamps carry.

    Naive datetimes are taken to be UTC and sub-second parts are dropped, so a
    normalised value comes back unchanged from every codec. Anything that is
    not a datetime is returned as is and left to validation.
    """
    if not isinstance(value, datetime):
        return value
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        value = value.replace(tzinfo=timezone.utc)
    if value.microsecond:
        value = value.replace(microsecond=0)
    return value


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse CAP timestamp text back into an aware datetime.

    Raises ValueError for text that is not an ISO-8601 date-time.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Empty timestamp")
        parsed = date_parser.isoparse(text)
    else:
        raise ValueError(f"Invalid timestamp value {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ---- CAP lists ---------------------------------------------------------------


def _needs_quoting(element: str) -> bool:
    return any(ch.isspace() for ch in element) or '"' in element


def pack_cap_list(elements: Iterable[Any]) -> str:
    """Join *elements* into a CAP list.

    Elements holding whitespace or a double quote are wrapped in double quotes
    with embedded quotes doubled, e.g. ``['a b', 'c']`` -> ``'"a b" c'``.
    """
    packed = []
    for element in elements:
        text = str(element)
        if _needs_quoting(text) or text == "":
            text = '"' + text.replace('"', '""') + '"'
        packed.append(text)
    return " ".join(packed)


def unpack_cap_list(text: Optional[str]) -> List[str]:
    """Split a CAP list produced by :func:`pack_cap_list`.

    Raises ValueError on an unterminated quoted element.
    """
    if not text:
        return []

    elements: List[str] = []
    i = 0
    length = len(text)
    while i < length:
        if text[i].isspace():
            i += 1
            continue
        if text[i] == '"':
            i += 1
            buf = []
            while True:
                if i >= length:
                    raise ValueError(f"Unterminated quoted element in CAP list: {text!r}")
                ch = text[i]
                if ch == '"':
                    if i + 1 < length and text[i + 1] == '"':
                        buf.append('"')
                        i += 2
                        continue
                    i += 1
                    break
                buf.append(ch)
                i += 1
            elements.append("".join(buf))
        else:
            start = i
            while i < length and not text[i].isspace():
                i += 1
            elements.append(text[start:i])
    return elements


def split_words(text: Optional[str]) -> List[str]:
    """Split space-delimited lists (references, incidents)."""
    if not text:
        return []
    return text.split()


# ---- numbers -----------------------------------------------------------------


def coerce_number(value: Any, *, integer: bool = False) -> Any:
    """Coerce numeric text to ``int``/``float``.

    Raises ValueError if the value cannot be coerced, including empty text
    and non-integral values for integer fields.
    """
    if value is None:
        return None

    if isinstance(value, bool):
        raise ValueError(f"Invalid numeric value '{value}'")

    if isinstance(value, (int, float)):
        if integer:
            if isinstance(value, float) and not value.is_integer():
                raise ValueError(f"Non-integral value '{value}'")
            return int(value)
        return float(value)

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Empty numeric value")
        try:
            dec = Decimal(text)
        except InvalidOperation as exc:
            raise ValueError(f"Invalid numeric value '{value}'") from exc
        if not dec.is_finite():
            raise ValueError(f"Invalid numeric value '{value}'")
        if integer:
            if dec != dec.to_integral_value():
                raise ValueError(f"Non-integral value '{value}'")
            return int(dec)
        return float(text)

    raise ValueError(f"Invalid numeric value '{value}'")


def format_number(value: Any) -> str:
    """Render a number so that :func:`coerce_number` reads back the same value."""
    if isinstance(value, float):
        return repr(value)
    return str(value)
