"""In-progress markers map owned by one compilation."""

from __future__ import annotations

from dataclasses import dataclass, field

from markersmap.compiler.merge import merge_marker, merge_marker_type
from markersmap.models.markers import MarkerInfo, MarkerPattern, MarkersMap, MarkerTypeInfo


@dataclass
class MarkersMapBuilder:
    """Accumulates markers; every write goes through the merge engines."""

    version: str
    commit: str
    usfm_tools_version: str | None = None
    markers: dict[str, MarkerInfo] = field(default_factory=dict)
    markers_regexp: dict[MarkerPattern, MarkerInfo] = field(default_factory=dict)
    marker_types: dict[str, MarkerTypeInfo] = field(default_factory=dict)
    skipped_definitions: set[str] = field(default_factory=set)

    def add_marker(self, name: str, info: MarkerInfo, source: str) -> None:
        self.markers[name] = merge_marker(self.markers.get(name), info, name, source)

    def add_pattern(self, pattern: MarkerPattern, info: MarkerInfo, source: str) -> None:
        self.markers_regexp[pattern] = merge_marker(
            self.markers_regexp.get(pattern), info, pattern.source, source
        )

    def add_marker_type(self, name: str, info: MarkerTypeInfo, source: str) -> None:
        self.marker_types[name] = merge_marker_type(
            self.marker_types.get(name), info, name, source
        )

    def skip(self, definition_name: str) -> None:
        self.skipped_definitions.add(definition_name)

    def build(self) -> MarkersMap:
        """Freeze into a ``MarkersMap`` with every table sorted by lower-cased key."""
        return MarkersMap(
            version=self.version,
            commit=self.commit,
            usfm_tools_version=self.usfm_tools_version,
            markers=self.markers,
            markers_regexp={
                pattern.source: info for pattern, info in self.markers_regexp.items()
            },
            marker_types=self.marker_types,
        )
