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


"""Common Alerting Protocol (CAP 1.0, 1.1 and 1.2) entities and codecs."""

from .exceptions import (
    CapCodecError,
    ConfigurationError,
    DecodeError,
    EncodeError,
    UnrepresentableFieldError,
    UnsupportedVersionError,
)
from .config import CodecConfig, codec_config
from .models import (
    Alert,
    Area,
    Circle,
    EventCode,
    Geocode,
    Info,
    Parameter,
    Point,
    Polygon,
    Resource,
)
from .schema import CAP_VERSIONS, LATEST_CAP_VERSION, ValidationResult, Violation, validate
from .formats import (
    decode_element,
    decode_json,
    decode_mapping,
    decode_markup,
    decode_structured_text,
    encode_element,
    encode_json,
    encode_mapping,
    encode_markup,
    encode_structured_text,
)

__version__ = "0.1.0"
