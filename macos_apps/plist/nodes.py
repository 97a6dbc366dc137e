"""Element node interface used by the plist decoders."""

from typing import Optional, Protocol

from lxml import etree


class ElementNode(Protocol):
    """Minimal read-only view of an XML element."""

    @property
    def tag(self) -> str: ...

    @property
    def text(self) -> str: ...

    @property
    def children(self) -> list["ElementNode"]: ...

    @property
    def next_element_sibling(self) -> Optional["ElementNode"]: ...


def _is_element(node: etree._Element) -> bool:
    # Comments, processing instructions and unresolved entities carry a callable tag
    return isinstance(node.tag, str)


def _text_content(element: etree._Element) -> str:
    """Concatenate every descendant text node, skipping comments and PIs."""
    parts = [element.text or ""]
    for child in element:
        if _is_element(child):
            parts.append(_text_content(child))
        parts.append(child.tail or "")
    return "".join(parts)


class LxmlNode:
    """ElementNode adapter over an lxml element."""

    __slots__ = ("_element",)

    def __init__(self, element: etree._Element):
        self._element = element

    @property
    def tag(self) -> str:
        return self._element.tag

    @property
    def text(self) -> str:
        return _text_content(self._element)

    @property
    def children(self) -> list["LxmlNode"]:
        return [LxmlNode(child) for child in self._element if _is_element(child)]

    @property
    def next_element_sibling(self) -> Optional["LxmlNode"]:
        sibling = self._element.getnext()
        while sibling is not None and not _is_element(sibling):
            sibling = sibling.getnext()
        return LxmlNode(sibling) if sibling is not None else None

    def __repr__(self) -> str:
        return f"LxmlNode(<{self.tag}>)"
