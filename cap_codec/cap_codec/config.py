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

"""Configuration management for the CAP codec."""

import os
import logging
from dataclasses import dataclass, replace

from .exceptions import ConfigurationError, UnsupportedVersionError
from .schema.versions import LATEST_CAP_VERSION, get_schema_version
from .utils.logging_utils import configure_split_stream_logging, resolve_level


EMPTY_NUMERIC_ERROR = "error"
EMPTY_NUMERIC_ZERO = "zero"
EMPTY_NUMERIC_NONE = "none"
EMPTY_NUMERIC_POLICIES = (EMPTY_NUMERIC_ERROR, EMPTY_NUMERIC_ZERO, EMPTY_NUMERIC_NONE)


@dataclass(frozen=True)
class CodecConfig:
    """Configuration shared by the CAP codecs.

    ``empty_numeric`` decides what a present-but-empty ``<size>`` element
    decodes to: ``error`` raises a DecodeError, ``zero`` yields 0 and ``none``
    yields None. An absent element is always None regardless of this setting.
    """
    default_version: str = LATEST_CAP_VERSION
    empty_numeric: str = EMPTY_NUMERIC_ERROR
    pretty_print: bool = False
    log_level: str = "INFO"
    print_level: str = "ERROR"

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "default_version", get_schema_version(self.default_version).version)
        except UnsupportedVersionError as e:
            raise ConfigurationError(f"Invalid default CAP version: {e}") from e
        if self.empty_numeric not in EMPTY_NUMERIC_POLICIES:
            raise ConfigurationError(
                f"Invalid empty numeric policy '{self.empty_numeric}'. "
                f"Valid values: {', '.join(EMPTY_NUMERIC_POLICIES)}"
            )

    @classmethod
    def from_env(cls) -> 'CodecConfig':
        """Create configuration from environment variables."""
        return cls(
            default_version=os.getenv('CAP_CODEC_DEFAULT_VERSION', LATEST_CAP_VERSION),
            empty_numeric=os.getenv('CAP_CODEC_EMPTY_NUMERIC', EMPTY_NUMERIC_ERROR).lower(),
            pretty_print=os.getenv('CAP_CODEC_PRETTY_PRINT', 'false').lower() == 'true',
            log_level=os.getenv('CAP_CODEC_LOG_LEVEL', 'INFO'),
            print_level=os.getenv('CAP_CODEC_PRINT_LEVEL', 'ERROR'),
        )

    def with_overrides(self, **changes) -> 'CodecConfig':
        return replace(self, **changes)

    def set_logging(self) -> logging.Logger:
        """Setup logging based on configuration."""
        formatter = logging.Formatter('%(name)s - %(levelname)s - %(message)s')
        return configure_split_stream_logging(
            level=resolve_level(self.log_level),
            stderr_level=resolve_level(self.print_level),
            formatter=formatter,
        )


# Global configuration instance
codec_config = CodecConfig.from_env()


def resolve_config(config: 'CodecConfig' = None) -> CodecConfig:
    """Return *config*, falling back to the global instance."""
    return config if config is not None else codec_config
