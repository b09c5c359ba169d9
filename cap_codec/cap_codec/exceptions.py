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

"""Custom exceptions for the CAP codec."""

from typing import Optional


class CapCodecError(Exception):
    """Base exception for CAP codec related errors."""
    pass


class ConfigurationError(CapCodecError):
    """Exception raised for invalid codec configuration."""
    pass


class DecodeError(CapCodecError):
    """Exception raised when an external representation cannot be parsed.

    ``path`` points at the offending element or key, e.g.
    ``info[0]/area[1]/circle[0]`` for markup or ``/infos/0/areas`` for mappings.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path
        super().__init__(f"{message} (path={path})" if path else message)


class UnsupportedVersionError(DecodeError):
    """Exception raised when a CAP version or namespace is not supported."""
    pass


class EncodeError(CapCodecError):
    """Exception raised when an alert cannot be written in the requested form."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path
        super().__init__(f"{message} (path={path})" if path else message)


class UnrepresentableFieldError(EncodeError):
    """Exception raised when a field has no counterpart in the target CAP version."""
    pass
