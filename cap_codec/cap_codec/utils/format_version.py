# Copyright 2025 TIER IV, inc.
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

"""CAP version string utilities.

CAP revisions are identified by a ``MAJOR.MINOR`` pair (``1.0``, ``1.1``,
``1.2``). Callers and documents spell them in a few ways, all of which are
normalised here:

  * ``1.2`` / ``v1.2`` / ``CAP 1.2`` / ``cap-1.2``
  * the ``cap_version`` key of a mapping, which may arrive as a float
    (``1.2``) after a JSON or YAML round trip.

Unlike design-format versions there is no compatibility window: the three
revisions are backward-incompatible, so a version is either one of the
supported rows or an error.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from ..exceptions import UnsupportedVersionError


_VERSION_RE = re.compile(r"^(?:cap[\s_-]*)?v?(\d+)\.(\d+)$", re.IGNORECASE)


@dataclass(frozen=True, order=True)
class CapVersion:
    """A parsed CAP version (major, minor)."""

    major: int
    minor: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


def parse_cap_version(raw: Any) -> CapVersion:
    """Parse a CAP version such as ``1.2``, ``v1.1`` or ``CAP 1.0``.

    Raises:
        UnsupportedVersionError: If the value cannot be parsed.
    """
    if isinstance(raw, bool) or not isinstance(raw, (str, int, float)):
        raise UnsupportedVersionError(
            f"CAP version must be a string, got {type(raw).__name__}: {raw!r}"
        )

    text = f"{raw:.1f}" if isinstance(raw, float) else str(raw)
    m = _VERSION_RE.match(text.strip())
    if m is None:
        raise UnsupportedVersionError(
            f"Invalid CAP version string: '{raw}'. Expected 'MAJOR.MINOR' (e.g. '1.2')."
        )
    return CapVersion(int(m.group(1)), int(m.group(2)))


def normalize_cap_version(raw: Any) -> str:
    """Return the canonical ``MAJOR.MINOR`` text for *raw*."""
    return str(parse_cap_version(raw))
