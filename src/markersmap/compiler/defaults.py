"""Element-level attribute inference: default attribute and attributes not written to USFM."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from lxml import etree

from markersmap.parser.loader import SchemaDocument
from markersmap.parser.nodes import (
    children_named,
    descendants_named,
    direct_scope,
    enclosing_scope,
    resolved_name,
    usfm_attribute,
)
from markersmap.parser.references import find_definition

logger = logging.getLogger("markersmap.compiler")

STYLE_ATTRIBUTE = "style"

# Attributes never considered on any marker type.
_ALWAYS_EXCLUDED = frozenset({STYLE_ATTRIBUTE, "closed"})

# Marker types whose attributes are never considered.
_EXCLUDED_MARKER_TYPES = frozenset({"usx", "periph", "cell", "chapter", "verse"})

# Attributes not considered on specific marker types.
_EXCLUDED_ATTRIBUTES: dict[str, frozenset[str]] = {
    "book": frozenset({"code"}),
    "para": frozenset({"vid"}),
    "table": frozenset({"vid"}),
    "note": frozenset({"caller", "category"}),
    "sidebar": frozenset({"category"}),
}


def is_excluded(marker_type: str, attribute_name: str) -> bool:
    if attribute_name in _ALWAYS_EXCLUDED:
        return True
    if marker_type in _EXCLUDED_MARKER_TYPES:
        return True
    return attribute_name in _EXCLUDED_ATTRIBUTES.get(marker_type, frozenset())


@dataclass
class DeclaredAttribute:
    """An attribute an element declares, directly or through a referenced definition."""

    node: etree._Element
    name: str
    optional: bool
    skip_output_to_usfm: bool = False


@dataclass
class ElementAttributeInfo:
    """What an element's attributes contribute to every marker it produces."""

    default_attribute: str | None = None
    skip_output_attribute_to_usfm: list[str] = field(default_factory=list)


def _ignored_for_usfm(attribute: etree._Element) -> bool:
    if usfm_attribute(attribute, "ignore") == "true":
        return True
    return any(match.get("noout") == "true" for match in children_named(attribute, "usfm:match"))


class DefaultAttributeInference:
    """Decides which attribute, if any, may be written without its name in USFM.

    Default-attribute syntax is only unambiguous with exactly one attribute
    to imply: the single required attribute, or, when nothing is required,
    the first optional one.
    """

    def __init__(self, document: SchemaDocument) -> None:
        self._document = document

    def declared_attributes(
        self, element: etree._Element, marker_type: str, context_label: str
    ) -> list[DeclaredAttribute]:
        declared: list[DeclaredAttribute] = []

        for attribute in descendants_named(element, "attribute"):
            name = resolved_name(attribute, context_label)
            if not name:
                continue
            scope = enclosing_scope(attribute, element)
            if not scope.owned:
                continue
            declared.append(DeclaredAttribute(attribute, name, scope.optional))

        for ref in descendants_named(element, "ref"):
            ref_name = ref.get("name")
            if not ref_name:
                logger.warning(
                    "Found ref element without a name attribute in marker type %s "
                    'in definition "%s". Skipping.',
                    marker_type,
                    context_label,
                )
                continue
            ref_scope = direct_scope(ref, element)
            if not ref_scope.owned:
                continue
            define = find_definition(self._document, ref_name, context_label)
            if define is None:
                continue
            skip_ref = usfm_attribute(ref, "ignore") == "true"
            for attribute in descendants_named(define, "attribute"):
                name = resolved_name(attribute, context_label)
                if not name:
                    continue
                scope = direct_scope(attribute, define)
                if not scope.owned:
                    continue
                declared.append(
                    DeclaredAttribute(
                        attribute,
                        name,
                        optional=ref_scope.optional or scope.optional,
                        skip_output_to_usfm=skip_ref,
                    )
                )
        return declared

    def infer(
        self, element: etree._Element, marker_type: str, context_label: str
    ) -> ElementAttributeInfo:
        info = ElementAttributeInfo()
        required_count = 0
        first_required: str | None = None
        first_optional: str | None = None

        for declared in self.declared_attributes(element, marker_type, context_label):
            if is_excluded(marker_type, declared.name):
                continue
            if declared.skip_output_to_usfm or _ignored_for_usfm(declared.node):
                info.skip_output_attribute_to_usfm.append(declared.name)
                continue
            if not declared.optional:
                required_count += 1
                if first_required is None:
                    first_required = declared.name
            elif first_optional is None:
                first_optional = declared.name

        if required_count == 1:
            info.default_attribute = first_required
        elif required_count == 0 and first_optional is not None:
            info.default_attribute = first_optional
        return info
