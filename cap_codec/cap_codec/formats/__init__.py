"""Codecs between the entity tree and its external representations."""

from .markup import decode_element, decode_markup, encode_element, encode_markup
from .mapping import decode_json, decode_mapping, encode_json, encode_mapping
from .structured_text import decode_structured_text, encode_structured_text
