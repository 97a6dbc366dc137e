"""Decoding of system_profiler XML property lists into flat string mappings."""

import logging
from typing import Iterator, Optional

from lxml import etree

from macos_apps.logs import TRACE
from macos_apps.plist.nodes import ElementNode, LxmlNode

logger = logging.getLogger(__name__)

RawDict = dict[str, str]

# Key under which system_profiler lists the per-item dictionaries
ITEMS_KEY = "_items"

NESTED_DICT_PLACEHOLDER = "<dict>...</dict>"

_SCALAR_TAGS = {"string", "integer", "real", "date"}


class PlistParseError(ValueError):
    """Raised when plist text cannot be turned into a document at all."""


def decode_value(node: ElementNode) -> str:
    """
    Decode a single plist value element into a string.

    Booleans become "true"/"false", scalars keep their raw text, arrays are
    reduced to their first element and nested dictionaries are replaced by a
    fixed placeholder.

    Args:
        node: Value element following a <key>

    Returns:
        String form of the value
    """
    tag = node.tag
    if tag == "true":
        return "true"
    if tag == "false":
        return "false"
    if tag == "dict":
        logger.log(TRACE, "Dictionary values aren't supported.")
        return NESTED_DICT_PLACEHOLDER
    if tag == "array":
        # Only the first element is ever consumed (e.g. signed_by)
        for item in node.children:
            return decode_value(item)
        return ""
    # string, integer, real, date and anything unrecognised
    return node.text


def decode_dict(node: ElementNode) -> RawDict:
    """
    Decode one <dict> element into an ordered key/value mapping.

    Each <key> child is paired with the next element sibling. Keys without a
    following element are dropped and repeated keys keep the last value.

    Args:
        node: The <dict> element

    Returns:
        Mapping of key text to decoded value, in document order
    """
    result: RawDict = {}
    for child in node.children:
        if child.tag != "key":
            continue
        value_node = child.next_element_sibling
        if value_node is None:
            continue
        result[child.text] = decode_value(value_node)
    return result


def iter_elements(node: ElementNode) -> Iterator[ElementNode]:
    """Yield a node and all of its descendants in document order."""
    yield node
    for child in node.children:
        yield from iter_elements(child)


def find_items_array(root: ElementNode) -> Optional[ElementNode]:
    """
    Locate the first <array>, in document order, preceded by a sibling <key>_items</key>.

    An array nested inside an earlier sibling wins over the array that
    directly follows an outer `_items` key.
    """
    after_items_key = False
    for child in root.children:
        if child.tag == "array" and after_items_key:
            return child
        if child.tag == "key" and child.text == ITEMS_KEY:
            after_items_key = True
        found = find_items_array(child)
        if found is not None:
            return found
    return None


def _normalize_space(value: str) -> str:
    return " ".join(value.split())


def first_string_value(root: ElementNode, key: str) -> str:
    """
    Look up a top-level string value in a bundle Info.plist document.

    Only <string> siblings following a matching key of the top-level
    <dict> are considered; the first match wins.

    Args:
        root: The <plist> root element
        key: Key to look up, e.g. "CFBundleVersion"

    Returns:
        Trimmed string value, or an empty string if not found
    """
    if root.tag != "plist":
        return ""
    for top in root.children:
        if top.tag != "dict":
            continue
        for child in top.children:
            if child.tag != "key" or _normalize_space(child.text) != key:
                continue
            sibling = child.next_element_sibling
            while sibling is not None:
                if sibling.tag == "string":
                    return sibling.text.strip()
                sibling = sibling.next_element_sibling
    return ""


class PlistDecoder:
    """
    Parses plist XML into element trees and flat mappings.

    A fresh lxml parser is created for every call, so one decoder can be
    shared freely between callers.

    Args:
        lenient: Recover from malformed markup instead of raising
    """

    def __init__(self, lenient: bool = True):
        self.lenient = lenient

    def _make_parser(self) -> etree.XMLParser:
        return etree.XMLParser(
            recover=self.lenient,
            resolve_entities=False,
            no_network=True,
            remove_blank_text=False,
        )

    def parse(self, data: str | bytes) -> LxmlNode:
        """
        Parse plist text into a document tree.

        Args:
            data: XML text or raw bytes

        Returns:
            Root element of the document

        Raises:
            PlistParseError: If the input is empty or has no usable root element
        """
        if isinstance(data, str):
            # lxml refuses str input that carries an encoding declaration
            data = data.encode("utf-8")
        if not data.strip():
            raise PlistParseError("Plist input is empty")

        try:
            root = etree.fromstring(data, self._make_parser())
        except etree.XMLSyntaxError as e:
            raise PlistParseError(f"Unable to parse plist: {e}") from e

        if root is None:
            raise PlistParseError("Plist input has no root element")
        return LxmlNode(root)

    def parse_items(self, data: str | bytes) -> list[RawDict]:
        """
        Decode every dictionary listed under the `_items` key.

        Args:
            data: Full system_profiler XML output

        Returns:
            One mapping per <dict> found anywhere inside the items array, in
            document order. Empty if the document has no `_items` array.

        Raises:
            PlistParseError: If the document cannot be parsed at all
        """
        root = self.parse(data)
        items = find_items_array(root)
        if items is None:
            return []
        return [
            decode_dict(node)
            for node in iter_elements(items)
            if node is not items and node.tag == "dict"
        ]

    def lookup(self, data: str | bytes, *keys: str) -> dict[str, str]:
        """
        Read several top-level string values from one bundle plist.

        Args:
            data: Info.plist contents
            *keys: Keys to read

        Returns:
            Mapping of each requested key to its value ("" when missing)

        Raises:
            PlistParseError: If the document cannot be parsed at all
        """
        root = self.parse(data)
        return {key: first_string_value(root, key) for key in keys}
