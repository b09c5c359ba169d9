from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional

from ..schema.validation import (
    CollectionValidity,
    Dependency,
    Format,
    Inclusion,
    Presence,
    compile_format,
)
from ..schema.versions import CAP_VERSIONS, LATEST_CAP_VERSION
from ..utils.cap_types import format_timestamp, generate_identifier
from .base import Builder, Entity, add_child
from .info import Info


STATUS_ACTUAL = "Actual"
STATUS_EXERCISE = "Exercise"
STATUS_SYSTEM = "System"
STATUS_TEST = "Test"
VALID_STATUSES = (STATUS_ACTUAL, STATUS_EXERCISE, STATUS_SYSTEM, STATUS_TEST)

MSG_TYPE_ALERT = "Alert"
MSG_TYPE_UPDATE = "Update"
MSG_TYPE_CANCEL = "Cancel"
MSG_TYPE_ACK = "Ack"
MSG_TYPE_ERROR = "Error"
VALID_MSG_TYPES = (MSG_TYPE_ALERT, MSG_TYPE_UPDATE, MSG_TYPE_CANCEL, MSG_TYPE_ACK, MSG_TYPE_ERROR)

SCOPE_PUBLIC = "Public"
SCOPE_RESTRICTED = "Restricted"
SCOPE_PRIVATE = "Private"
VALID_SCOPES = (SCOPE_PUBLIC, SCOPE_RESTRICTED, SCOPE_PRIVATE)

# identifier and sender may not contain whitespace, commas or the XML
# reserved characters & and <
ALLOWED_CHARACTERS = compile_format(r"[^\s,&<]+")


@dataclass
class Alert(Entity):
    """Root of a CAP message.

    ``cap_version`` selects the schema revision the alert is written in; it is
    the only version information in the whole entity tree. ``identifier`` is
    generated when not given.
    """

    identifier: Optional[str] = field(default_factory=generate_identifier)
    sender: Optional[str] = None
    sent: Optional[datetime] = None
    status: Optional[str] = None
    msg_type: Optional[str] = None
    password: Optional[str] = None
    source: Optional[str] = None
    scope: Optional[str] = None
    restriction: Optional[str] = None
    addresses: List[str] = field(default_factory=list)
    codes: List[str] = field(default_factory=list)
    note: Optional[str] = None
    references: List[str] = field(default_factory=list)
    incidents: List[str] = field(default_factory=list)
    infos: List[Info] = field(default_factory=list)
    cap_version: str = LATEST_CAP_VERSION

    TIMESTAMP_ATTRIBUTES = ("sent",)

    VALIDATION_RULES = (
        Presence("identifier"),
        Presence("sender"),
        Presence("sent"),
        Presence("status"),
        Presence("msg_type"),
        Presence("scope"),
        Inclusion("cap_version", CAP_VERSIONS),
        Inclusion("status", VALID_STATUSES),
        Inclusion("msg_type", VALID_MSG_TYPES),
        Inclusion("scope", VALID_SCOPES),
        Format("identifier", ALLOWED_CHARACTERS),
        Format("sender", ALLOWED_CHARACTERS),
        Dependency("addresses", on="scope", value=SCOPE_PRIVATE),
        Presence("addresses", when=("scope", SCOPE_PRIVATE)),
        Dependency("restriction", on="scope", value=SCOPE_RESTRICTED),
        CollectionValidity("infos"),
    )

    def add_info(self, builder: Optional[Builder] = None, **attributes: Any) -> Info:
        return add_child(self.infos, Info, builder, attributes)

    def to_reference(self) -> str:
        """Reference to this alert usable in another alert's ``references``.

        Has the form ``sender,identifier,sent``.
        """
        return f"{self.sender},{self.identifier},{format_timestamp(self.sent)}"

    def __str__(self) -> str:
        return f"{self.sender}/{self.identifier}/{format_timestamp(self.sent)}"
