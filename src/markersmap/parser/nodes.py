"""Navigation helpers over RelaxNG schema nodes.

Tag names are matched the way they are written in the schema: ``define`` for
a RelaxNG element in the default namespace, ``usfm:match`` for a prefixed
one. Matching ignores case.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

from lxml import etree

logger = logging.getLogger("markersmap.parser")

OPTIONAL_TAG = "optional"


class Scope(NamedTuple):
    """Where a node sits relative to the element that should own it."""

    owned: bool
    optional: bool


def is_element(node: object) -> bool:
    """True for element nodes, False for comments and processing instructions."""
    return isinstance(node, etree._Element) and isinstance(node.tag, str)


def qualified_name(node: etree._Element) -> str:
    local = etree.QName(node).localname
    return f"{node.prefix}:{local}" if node.prefix else local


def _tag_matches(node: object, tag: str) -> bool:
    return is_element(node) and qualified_name(node).lower() == tag.lower()


def text_content(node: etree._Element) -> str:
    return "".join(node.itertext()).strip()


def children_named(node: etree._Element, tag: str) -> list[etree._Element]:
    """Direct element children named ``tag``, in document order."""
    return [child for child in node if _tag_matches(child, tag)]


def descendants_named(
    node: etree._Element, tag: str, include_self: bool = False
) -> list[etree._Element]:
    """All element descendants named ``tag``, in document order."""
    candidates = node.iter() if include_self else node.iterdescendants()
    return [child for child in candidates if _tag_matches(child, tag)]


def resolved_name(node: etree._Element, context_label: str) -> str | None:
    """Name of a node from its ``name`` attribute or its ``name`` child element."""
    name = node.get("name")
    if name:
        return name
    name_elements = children_named(node, "name")
    if not name_elements:
        return None
    if len(name_elements) > 1:
        logger.warning(
            'XML Element in definition "%s" has multiple name elements. '
            "Using the first one for getting the element name.",
            context_label,
        )
    return text_content(name_elements[0]) or None


def usfm_attribute(node: etree._Element, local: str) -> str | None:
    """Value of ``usfm:<local>`` on ``node`` (namespace looked up by prefix)."""
    namespace = node.nsmap.get("usfm")
    if namespace is None:
        return None
    return node.get(f"{{{namespace}}}{local}")


def enclosing_scope(
    node: etree._Element, owner: etree._Element, boundary: str = "element"
) -> Scope:
    """Walk up from ``node`` to the nearest ``boundary`` ancestor (or the root).

    ``owned`` says whether that ancestor is ``owner``; ``optional`` says
    whether an ``optional`` wrapper was crossed on the way.
    """
    optional = False
    parent = node.getparent()
    while parent is not None and parent is not owner:
        if _tag_matches(parent, boundary):
            break
        if _tag_matches(parent, OPTIONAL_TAG):
            optional = True
        parent = parent.getparent()
    return Scope(owned=parent is owner, optional=optional)


def direct_scope(node: etree._Element, owner: etree._Element) -> Scope:
    """Whether ``node`` is a child of ``owner``, directly or through one ``optional``."""
    parent = node.getparent()
    if parent is None:
        return Scope(owned=False, optional=False)
    optional = False
    if _tag_matches(parent, OPTIONAL_TAG):
        optional = True
        parent = parent.getparent()
    return Scope(owned=parent is owner, optional=optional)
