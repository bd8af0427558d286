"""Post-walk assembly: manual markers, base map inheritance and version patches."""

from __future__ import annotations

import logging

from markersmap.compiler.builder import MarkersMapBuilder
from markersmap.compiler.merge import merge_marker, merge_marker_type
from markersmap.models.markers import MarkerInfo, MarkersMap, MarkerTypeInfo

logger = logging.getLogger("markersmap.compiler")

MANUAL_SOURCE = "added manually"

# Markers not present in every usx.rng version.
MANUAL_MARKERS: dict[str, MarkerInfo] = {
    "cat": MarkerInfo(type="char"),
    "ca": MarkerInfo(
        type="char",
        is_attribute_marker_for=["c"],
        attribute_marker_attribute_name="altnumber",
    ),
    "cp": MarkerInfo(
        type="para",
        is_attribute_marker_for=["c"],
        attribute_marker_attribute_name="pubnumber",
    ),
    "va": MarkerInfo(
        type="char",
        is_attribute_marker_for=["v"],
        attribute_marker_attribute_name="altnumber",
    ),
    "vp": MarkerInfo(
        type="char",
        is_attribute_marker_for=["v"],
        attribute_marker_attribute_name="pubnumber",
    ),
    "usfm": MarkerInfo(type="para"),
    "USJ": MarkerInfo(type="USJ"),
}

MANUAL_MARKER_TYPES: dict[str, MarkerTypeInfo] = {
    "USJ": MarkerTypeInfo(has_style_attribute=False),
}

# Attribute markers listed on the markers they belong to, in USFM order.
ATTRIBUTE_MARKERS: dict[str, list[str]] = {
    "c": ["ca", "cp"],
    "v": ["va", "vp"],
}

# 3.0.x schemas leave these without a default attribute although USFM relies on one.
LINK_DEFAULT_ATTRIBUTE = "link-href"
LINK_MARKERS = ("jmp", "xt")


class MapAssembler:
    """Finishes a walked builder into a sorted, frozen ``MarkersMap``."""

    def __init__(self, base_map: MarkersMap | None = None) -> None:
        self._base_map = base_map

    def assemble(self, builder: MarkersMapBuilder) -> MarkersMap:
        self.add_manual_markers(builder)
        if self._base_map is not None:
            self.inherit(builder, self._base_map)
        self.apply_patches(builder)
        return builder.build()

    @staticmethod
    def add_manual_markers(builder: MarkersMapBuilder) -> None:
        # Copies, so no compiled map shares list fields with these tables.
        for name, info in MANUAL_MARKERS.items():
            builder.add_marker(name, info.model_copy(deep=True), MANUAL_SOURCE)
        for name, attribute_markers in ATTRIBUTE_MARKERS.items():
            existing = builder.markers.get(name)
            if existing is None:
                continue
            builder.add_marker(
                name,
                MarkerInfo(type=existing.type, attribute_markers=list(attribute_markers)),
                MANUAL_SOURCE,
            )
        for name, type_info in MANUAL_MARKER_TYPES.items():
            builder.add_marker_type(name, type_info.model_copy(deep=True), MANUAL_SOURCE)

    @staticmethod
    def inherit(builder: MarkersMapBuilder, base_map: MarkersMap) -> None:
        """Fill gaps in markers and marker types the schema shares with ``base_map``.

        Nothing the schema lacks is added.
        """
        source = f"base map {base_map.version}"
        for name, existing in builder.markers.items():
            base = base_map.markers.get(name)
            if base is not None:
                builder.markers[name] = merge_marker(existing, base, name, source)
        for pattern, existing in builder.markers_regexp.items():
            base = base_map.markers_regexp.get(pattern.source)
            if base is not None:
                builder.markers_regexp[pattern] = merge_marker(
                    existing, base, pattern.source, source
                )
        for name, existing_type in builder.marker_types.items():
            base_type = base_map.marker_types.get(name)
            if base_type is not None:
                builder.marker_types[name] = merge_marker_type(
                    existing_type, base_type, name, source
                )

    @staticmethod
    def apply_patches(builder: MarkersMapBuilder) -> None:
        for name in LINK_MARKERS:
            info = builder.markers.get(name)
            if info is None or info.default_attribute:
                continue
            logger.warning(
                "Setting default attribute for %s to %s because defaultAttribute was not set",
                name,
                LINK_DEFAULT_ATTRIBUTE,
            )
            builder.markers[name] = info.model_copy(
                update={"default_attribute": LINK_DEFAULT_ATTRIBUTE}
            )
