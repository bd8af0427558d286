"""Definition walker: one fold step per ``define`` in the schema."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from lxml import etree

from markersmap.compiler.builder import MarkersMapBuilder
from markersmap.compiler.defaults import STYLE_ATTRIBUTE, DefaultAttributeInference
from markersmap.compiler.merge import merge_marker, with_element_info
from markersmap.models.markers import MarkerInfo, MarkerPattern, MarkerTypeInfo
from markersmap.parser.loader import SchemaDocument
from markersmap.parser.nodes import (
    descendants_named,
    enclosing_scope,
    resolved_name,
    text_content,
    usfm_attribute,
)
from markersmap.parser.references import ReferenceResolver

logger = logging.getLogger("markersmap.compiler")

# End-of-chapter and end-of-verse milestones produce no markers of their own.
SKIPPED_DEFINITION_NAMES = frozenset({"ChapterEnd", "VerseEnd"})


@dataclass
class ElementCandidates:
    """Markers one ``element`` declaration describes, before they reach the map."""

    marker_type: str
    markers: dict[str, MarkerInfo] = field(default_factory=dict)
    patterns: dict[MarkerPattern, MarkerInfo] = field(default_factory=dict)
    marker_type_info: MarkerTypeInfo = field(default_factory=MarkerTypeInfo)

    def __bool__(self) -> bool:
        return bool(self.markers or self.patterns)


class DefinitionWalker:
    """Extracts markers and marker types from each definition of a schema."""

    def __init__(self, document: SchemaDocument) -> None:
        self._document = document
        self._references = ReferenceResolver(document)
        self._defaults = DefaultAttributeInference(document)

    def walk(self, builder: MarkersMapBuilder) -> MarkersMapBuilder:
        for define in self._document.definitions:
            builder = self.step(builder, define)
        return builder

    def step(self, builder: MarkersMapBuilder, define: etree._Element) -> MarkersMapBuilder:
        """Fold one definition into ``builder`` and return it."""
        define_name = define.get("name")
        if not define_name:
            logger.warning("Found define element without a name attribute. Skipping")
            return builder
        if define_name in SKIPPED_DEFINITION_NAMES:
            builder.skip(define_name)
            return builder

        created_marker = False
        for element in descendants_named(define, "element"):
            marker_type = resolved_name(element, define_name)
            if not marker_type:
                logger.warning(
                    'Element in definition "%s" has an empty name. Skipping.', define_name
                )
                continue

            candidates = self.element_candidates(element, marker_type, define_name)
            if not candidates:
                continue
            created_marker = True

            element_info = self._defaults.infer(element, marker_type, define_name)
            for name, info in candidates.markers.items():
                completed = with_element_info(
                    info,
                    element_info.default_attribute,
                    element_info.skip_output_attribute_to_usfm,
                )
                builder.add_marker(name, completed, define_name)
            for pattern, info in candidates.patterns.items():
                completed = with_element_info(
                    info,
                    element_info.default_attribute,
                    element_info.skip_output_attribute_to_usfm,
                )
                builder.add_pattern(pattern, completed, define_name)
            builder.add_marker_type(marker_type, candidates.marker_type_info, define_name)

        if not created_marker:
            builder.skip(define_name)
        return builder

    def element_candidates(
        self, element: etree._Element, marker_type: str, define_name: str
    ) -> ElementCandidates:
        """Collect the markers named by the element's own style attributes.

        Without a style attribute the element name is itself the marker.
        """
        candidates = ElementCandidates(marker_type)
        has_style = False

        for attribute in descendants_named(element, "attribute"):
            if resolved_name(attribute, define_name) != STYLE_ATTRIBUTE:
                continue
            if not enclosing_scope(attribute, element).owned:
                continue
            has_style = True

            style_nodes = self._references.resolve(attribute, define_name)
            for value in style_nodes.values:
                marker_name = text_content(value)
                if not marker_name:
                    continue
                candidates.markers[marker_name] = merge_marker(
                    candidates.markers.get(marker_name),
                    _candidate(marker_type, value),
                    marker_name,
                    define_name,
                )
            for param in style_nodes.patterns:
                source = text_content(param)
                if not source:
                    continue
                pattern = MarkerPattern.compile(source)
                candidates.patterns[pattern] = merge_marker(
                    candidates.patterns.get(pattern),
                    _candidate(marker_type, param),
                    source,
                    define_name,
                )

        if not has_style:
            candidates.markers[marker_type] = MarkerInfo(type=marker_type)
            candidates.marker_type_info = MarkerTypeInfo(has_style_attribute=False)
        return candidates


def _candidate(marker_type: str, node: etree._Element) -> MarkerInfo:
    # usfm:propval on a value or pattern names that marker's default attribute.
    return MarkerInfo(type=marker_type, default_attribute=usfm_attribute(node, "propval") or None)
