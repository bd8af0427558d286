"""Markers map types: markers, marker types, pattern keys and the compiled map."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, Field, PrivateAttr, field_validator

logger = logging.getLogger("markersmap.models")


class MarkerInfo(BaseModel):
    """Information about one USFM/USX/USJ marker.

    A marker with ``is_attribute_marker_for`` set is an attribute marker: it is
    written as its own marker in USFM but is an attribute of a preceding
    marker in USX/USJ (``ca`` and ``cp`` for ``c``, for example).
    """

    type: str
    default_attribute: str | None = Field(None, alias="defaultAttribute")
    attribute_markers: list[str] | None = Field(None, alias="attributeMarkers")
    skip_output_attribute_to_usfm: list[str] | None = Field(
        None, alias="skipOutputAttributeToUsfm"
    )
    is_attribute_marker_for: list[str] | None = Field(None, alias="isAttributeMarkerFor")
    attribute_marker_attribute_name: str | None = Field(
        None, alias="attributeMarkerAttributeName"
    )

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("is_attribute_marker_for")
    @classmethod
    def _non_empty_targets(cls, value: list[str] | None) -> list[str] | None:
        if value is not None and len(value) == 0:
            raise ValueError("isAttributeMarkerFor must name at least one marker")
        return value

    @property
    def is_attribute_marker(self) -> bool:
        return self.is_attribute_marker_for is not None


class MarkerTypeInfo(BaseModel):
    """Information shared by every marker of one marker type.

    Absent booleans read as ``False`` when two descriptions are compared.
    """

    has_style_attribute: bool | None = Field(None, alias="hasStyleAttribute")
    requires_newline_before: bool | None = Field(None, alias="requiresNewlineBefore")
    has_closing_marker: bool | None = Field(None, alias="hasClosingMarker")
    is_closing_marker_optional: bool | None = Field(None, alias="isClosingMarkerOptional")
    is_closing_marker_empty: bool | None = Field(None, alias="isClosingMarkerEmpty")
    skip_output_attribute_to_usfm: list[str] | None = Field(
        None, alias="skipOutputAttributeToUsfm"
    )
    skip_output_marker_to_usfm_if_attribute_is_present: list[str] | None = Field(
        None, alias="skipOutputMarkerToUsfmIfAttributeIsPresent"
    )

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def is_closeable(self) -> bool:
        return bool(self.has_closing_marker)


@dataclass(frozen=True)
class MarkerPattern:
    """A marker-name pattern from the schema, keyed by its source text.

    Two patterns are the same key when their source text is the same; the
    compiled matcher does not take part in comparison.
    """

    source: str
    _matcher: re.Pattern[str] | None = field(default=None, compare=False, repr=False)
    _invalid: bool = field(default=False, compare=False, repr=False)

    @classmethod
    def compile(cls, source: str) -> MarkerPattern:
        try:
            return cls(source, re.compile(source))
        except re.error as exc:
            logger.warning("Marker pattern %r cannot be compiled: %s", source, exc)
            return cls(source, None, True)

    def matches(self, marker_name: str) -> bool:
        """Whether ``marker_name`` matches the whole pattern (XSD patterns are anchored)."""
        if self._invalid:
            return False
        matcher = self._matcher if self._matcher is not None else re.compile(self.source)
        return matcher.fullmatch(marker_name) is not None

    def __str__(self) -> str:
        return self.source


def _sorted_case_insensitive(entries: Mapping[str, Any]) -> dict[str, Any]:
    return dict(sorted(entries.items(), key=lambda item: item[0].lower()))


class MarkersMap(BaseModel):
    """The compiled markers map.

    ``markers`` and ``markers_regexp`` are separate lookups: a name found in
    ``markers`` never needs to be tried against the patterns.
    """

    version: str
    commit: str
    usfm_tools_version: str | None = Field(None, alias="usfmToolsVersion")
    markers: Mapping[str, MarkerInfo] = Field(default_factory=dict)
    markers_regexp: Mapping[str, MarkerInfo] = Field(
        default_factory=dict, alias="markersRegExp"
    )
    marker_types: Mapping[str, MarkerTypeInfo] = Field(
        default_factory=dict, alias="markerTypes"
    )

    _patterns: list[MarkerPattern] = PrivateAttr(default_factory=list)

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("markers", "markers_regexp", "marker_types", mode="after")
    @classmethod
    def _freeze_mapping(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(_sorted_case_insensitive(value))

    def model_post_init(self, __context: Any) -> None:
        # Compiled once; invalid patterns are reported here and nowhere else.
        self._patterns = [MarkerPattern.compile(source) for source in self.markers_regexp]

    @property
    def patterns(self) -> list[MarkerPattern]:
        return list(self._patterns)

    def lookup(self, marker_name: str) -> MarkerInfo | None:
        """Find a marker by literal name first, then by the first matching pattern."""
        info = self.markers.get(marker_name)
        if info is not None:
            return info
        for pattern in self._patterns:
            if pattern.matches(marker_name):
                return self.markers_regexp[pattern.source]
        return None

    def to_json_dict(self) -> dict[str, Any]:
        """Plain dict with camelCase keys and absent fields left out."""
        data: dict[str, Any] = {"version": self.version, "commit": self.commit}
        if self.usfm_tools_version is not None:
            data["usfmToolsVersion"] = self.usfm_tools_version
        data["markers"] = {
            name: info.model_dump(by_alias=True, exclude_none=True)
            for name, info in self.markers.items()
        }
        data["markersRegExp"] = {
            source: info.model_dump(by_alias=True, exclude_none=True)
            for source, info in self.markers_regexp.items()
        }
        data["markerTypes"] = {
            name: info.model_dump(by_alias=True, exclude_none=True)
            for name, info in self.marker_types.items()
        }
        return data
