"""Plist decoding for system_profiler output and bundle Info.plist files."""

from .decoder import PlistDecoder, PlistParseError, RawDict, decode_dict, decode_value
from .nodes import ElementNode, LxmlNode

__all__ = [
    "PlistDecoder",
    "PlistParseError",
    "RawDict",
    "decode_dict",
    "decode_value",
    "ElementNode",
    "LxmlNode",
]
