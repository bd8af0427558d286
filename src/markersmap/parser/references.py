"""Reference resolution: expands ``ref`` nodes under a style attribute into marker candidates."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from lxml import etree

from markersmap.parser.loader import SchemaDocument
from markersmap.parser.nodes import descendants_named

logger = logging.getLogger("markersmap.parser")


@dataclass
class StyleCandidates:
    """``value`` nodes (literal marker names) and pattern ``param`` nodes."""

    values: list[etree._Element] = field(default_factory=list)
    patterns: list[etree._Element] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.values or self.patterns)

    def collect_from(self, node: etree._Element) -> None:
        self.values.extend(descendants_named(node, "value"))
        self.patterns.extend(
            param
            for param in descendants_named(node, "param")
            if param.get("name") == "pattern"
        )


def find_definition(
    document: SchemaDocument, ref_name: str, context_label: str
) -> etree._Element | None:
    """The ``define`` a reference points at, or ``None`` with a warning."""
    define = document.definition(ref_name)
    if define is None:
        logger.warning(
            'Could not find referenced definition "%s" in definition "%s". Skipping.',
            ref_name,
            context_label,
        )
    return define


class ReferenceResolver:
    """Collects every literal and pattern a style attribute allows.

    References are followed breadth-first over a worklist that only ever
    grows by names it has not seen, so each definition is expanded once and
    reference cycles terminate.
    """

    def __init__(self, document: SchemaDocument) -> None:
        self._document = document

    def resolve(self, style_attribute: etree._Element, context_label: str) -> StyleCandidates:
        candidates = StyleCandidates()
        candidates.collect_from(style_attribute)

        worklist: list[str] = []
        # The definition holding the attribute is already being expanded.
        queued: set[str] = {context_label}
        self._enqueue(style_attribute, worklist, queued, context_label)

        index = 0
        while index < len(worklist):
            ref_name = worklist[index]
            index += 1
            define = find_definition(self._document, ref_name, context_label)
            if define is None:
                continue
            candidates.collect_from(define)
            self._enqueue(define, worklist, queued, context_label)

        if not candidates:
            logger.warning(
                'Style attribute in definition "%s" has no value or param pattern '
                "elements. Skipping.",
                context_label,
            )
        return candidates

    @staticmethod
    def _enqueue(
        node: etree._Element,
        worklist: list[str],
        queued: set[str],
        context_label: str,
    ) -> None:
        for ref in descendants_named(node, "ref"):
            ref_name = ref.get("name")
            if not ref_name:
                logger.warning(
                    'Found ref element without a name attribute in definition "%s". Skipping.',
                    context_label,
                )
                continue
            if ref_name not in queued:
                queued.add(ref_name)
                worklist.append(ref_name)
