"""Pydantic domain models for the markers map compiler."""

from markersmap.models.errors import MarkerMergeConflictError, MergeConflict, ObjectKind
from markersmap.models.markers import MarkerInfo, MarkerPattern, MarkersMap, MarkerTypeInfo

__all__ = [
    "MarkerInfo",
    "MarkerMergeConflictError",
    "MarkerPattern",
    "MarkerTypeInfo",
    "MarkersMap",
    "MergeConflict",
    "ObjectKind",
]
