"""
Minimal document model for the pages the transaction subsystem reads.

The home page and its inline SVG animations are split into elements by a
single regular expression scan; the inner content of every paired tag is
parsed again with the same scan. Only the selector forms the derivation
needs are supported: ``tag``, ``*``, ``tag[attr=value]`` and
``tag[attr^=value]``.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from transaction.errors import ParseError


DOCTYPE_REGEX = re.compile(r"^\s*<!DOCTYPE[^>]*>", re.IGNORECASE)
COMMENT_REGEX = re.compile(r"<!--.*?-->", re.DOTALL)
ELEMENT_REGEX = re.compile(
    r"<([a-zA-Z0-9-]+)([^>]*)>(.*?)</\1>|<([a-zA-Z0-9-]+)([^>]*?)\s*/?>",
    re.DOTALL,
)
ATTRIBUTE_REGEX = re.compile(r"""([a-zA-Z0-9-]+)(?:=["']([^"']*)["'])?""")
SELECTOR_REGEX = re.compile(r"^([a-zA-Z0-9*-]+)(?:\[([^\]]+)\])?$")
ATTRIBUTE_FILTER_REGEX = re.compile(r"""^\s*([a-zA-Z0-9-]+)\s*(\^?=)\s*(["']?)([^"']*)\3\s*$""")

ROOT_TAG = "root"


@dataclass(frozen=True, eq=False)
class Element:
    """A parsed element. ``raw_source`` is the exact markup it was read from."""

    tag: str
    attributes: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    text_content: str = ""
    children: Tuple["Element", ...] = ()
    raw_source: str = ""

    def get_attribute(self, name: str) -> Optional[str]:
        return get_attribute(self, name)

    def query_selector(self, selector: str) -> Optional["Element"]:
        return query_selector(self, selector)

    def query_selector_all(self, selector: str) -> List["Element"]:
        return query_selector_all(self, selector)


def parse(markup: str) -> Element:
    """
    Parse markup into a tree under a synthetic ``root`` element.

    Args:
        markup: Raw HTML or SVG text

    Returns:
        The root element; its ``raw_source`` is the untouched input

    Raises:
        ParseError: If no element is recognized once the doctype and
                    comments are stripped
    """
    cleaned = DOCTYPE_REGEX.sub("", markup, count=1)
    cleaned = COMMENT_REGEX.sub("", cleaned)

    children = tuple(_scan_elements(cleaned))
    if not children:
        raise ParseError("Failed to parse markup: no elements found")

    return Element(tag=ROOT_TAG, attributes=MappingProxyType({}), text_content="", children=children, raw_source=markup)


def _scan_elements(markup: str) -> Iterator[Element]:
    for match in ELEMENT_REGEX.finditer(markup):
        tag = match.group(1) or match.group(4)
        attribute_source = match.group(2) or match.group(5) or ""
        content = match.group(3) or ""

        children: Tuple[Element, ...] = ()
        if content:
            try:
                children = parse(content).children
            except ParseError:
                # Text-only content, the element is a leaf
                children = ()

        yield Element(
            tag=tag,
            attributes=MappingProxyType(parse_attributes(attribute_source)),
            text_content=content,
            children=children,
            raw_source=match.group(0),
        )


def parse_attributes(source: str) -> Dict[str, str]:
    """Read ``name="value"`` pairs; a bare name maps to an empty string."""
    attributes = {}
    for name, value in ATTRIBUTE_REGEX.findall(source):
        attributes[name] = value or ""
    return attributes


def get_attribute(element: Element, name: str) -> Optional[str]:
    """Return the attribute value, treating an empty value as absent."""
    return element.attributes.get(name) or None


def _never(element: Element) -> bool:
    return False


def compile_selector(selector: str) -> Callable[[Element], bool]:
    """
    Compile a selector into a predicate over elements.

    Unrecognized syntax compiles to a predicate that never matches.
    """
    parts = SELECTOR_REGEX.match(selector)
    if not parts:
        return _never

    tag_name = parts.group(1).lower()
    attribute_filter = parts.group(2)

    attr_name = operator = attr_value = None
    if attribute_filter:
        filter_match = ATTRIBUTE_FILTER_REGEX.match(attribute_filter)
        if not filter_match:
            return _never
        attr_name, operator, _, attr_value = filter_match.groups()

    def matches(element: Element) -> bool:
        if tag_name != "*" and element.tag.lower() != tag_name:
            return False

        if attr_name and attr_value:
            actual = get_attribute(element, attr_name)
            if not actual:
                return False
            if operator == "^=":
                return actual.startswith(attr_value)
            return actual == attr_value

        return True

    return matches


def iter_elements(element: Element) -> Iterator[Element]:
    """Walk ``element`` and all of its descendants in pre-order."""
    stack = [element]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def query_selector(element: Element, selector: str) -> Optional[Element]:
    """
    Return the first match in pre-order.

    A matching element ends the search along its own branch; its children
    are never tested.
    """
    matches = compile_selector(selector)
    stack = [element]
    while stack:
        current = stack.pop()
        if matches(current):
            return current
        stack.extend(reversed(current.children))
    return None


def query_selector_all(element: Element, selector: str) -> List[Element]:
    """Return every match in pre-order, descendants of matches included."""
    matches = compile_selector(selector)
    return [candidate for candidate in iter_elements(element) if matches(candidate)]
