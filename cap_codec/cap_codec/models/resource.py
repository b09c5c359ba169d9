from __future__ import annotations

import base64
import hashlib
from dataclasses import dataclass
from typing import Optional, Tuple

from ..schema.validation import Numericality, Presence
from .base import Entity


@dataclass
class Resource(Entity):
    """A file or link supplementing an Info block.

    ``deref_uri`` holds the base64 encoded content of the resource; it only
    exists from CAP 1.1 onwards. ``digest`` is the SHA-1 hex digest and
    ``size`` the length in bytes.
    """

    resource_desc: Optional[str] = None
    mime_type: Optional[str] = None
    size: Optional[int] = None
    uri: Optional[str] = None
    deref_uri: Optional[str] = None
    digest: Optional[str] = None

    VALIDATION_RULES = (
        Presence("resource_desc"),
        Presence("mime_type", versions=("1.2",)),
        Numericality("size", minimum=0),
    )

    @property
    def size_in_kb(self) -> Optional[float]:
        if self.size is None:
            return None
        return self.size / 1024

    def decoded_deref_uri(self) -> Optional[bytes]:
        """The decoded contents of ``deref_uri`` if present."""
        if self.deref_uri is None:
            return None
        return base64.b64decode(self.deref_uri)

    def calculate_hash_and_size(self) -> Optional[Tuple[int, str]]:
        """Set ``digest`` and ``size`` from ``deref_uri``.

        Both are computed over the encoded text, as carried in the message.
        Returns ``(size, digest)``, or None when there is no ``deref_uri``.
        """
        if self.deref_uri is None:
            return None
        encoded = self.deref_uri.encode("utf-8")
        self.digest = hashlib.sha1(encoded).hexdigest()
        self.size = len(encoded)
        return self.size, self.digest

    def attach_content(self, content: bytes) -> Tuple[int, str]:
        """Embed already retrieved *content* as ``deref_uri``.

        Fetching the content is left to the caller.
        """
        self.deref_uri = base64.b64encode(content).decode("ascii")
        return self.calculate_hash_and_size()

    def __str__(self) -> str:
        return self.resource_desc or ""
