"""Merging two descriptions of the same marker or marker type.

A property that must be identical on both sides raises
``MarkerMergeConflictError``. A property present on one side only wins with a
warning. List properties that differ are combined with a warning.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel

from markersmap.models.errors import MarkerMergeConflictError, MergeConflict, ObjectKind
from markersmap.models.markers import MarkerInfo, MarkerTypeInfo

logger = logging.getLogger("markersmap.compiler")

_MARKER_LIST_FIELDS = (
    "skip_output_attribute_to_usfm",
    "attribute_markers",
    "is_attribute_marker_for",
)
_MARKER_STRING_FIELDS = ("default_attribute", "attribute_marker_attribute_name")

_MARKER_TYPE_FLAG_FIELDS = (
    "has_style_attribute",
    "requires_newline_before",
    "has_closing_marker",
    "is_closing_marker_optional",
    "is_closing_marker_empty",
)
_MARKER_TYPE_LIST_FIELDS = (
    "skip_output_attribute_to_usfm",
    "skip_output_marker_to_usfm_if_attribute_is_present",
)


def _alias(model: type[BaseModel], field_name: str) -> str:
    return model.model_fields[field_name].alias or field_name


def _warn_one_sided(kind: ObjectKind, name: str, property_name: str, source: str) -> None:
    logger.warning(
        '%s named "%s" has one definition with a %s and one without. '
        "Using the one with the %s. In definition: %s",
        kind.value,
        name,
        property_name,
        property_name,
        source,
    )


def _conflict(
    kind: ObjectKind,
    name: str,
    property_name: str,
    source: str,
    existing_value: Any,
    new_value: Any,
) -> MarkerMergeConflictError:
    return MarkerMergeConflictError(
        MergeConflict(
            kind=kind,
            name=name,
            property_name=property_name,
            existing_value=existing_value,
            conflicting_value=new_value,
            definition=source,
        )
    )


def _merge_strings(
    kind: ObjectKind,
    name: str,
    property_name: str,
    source: str,
    existing: str | None,
    new: str | None,
) -> str | None:
    if existing == new:
        return existing
    if existing and new:
        raise _conflict(kind, name, property_name, source, existing, new)
    _warn_one_sided(kind, name, property_name, source)
    return existing or new


def _merge_lists(
    kind: ObjectKind,
    name: str,
    property_name: str,
    source: str,
    existing: list[str] | None,
    new: list[str] | None,
) -> list[str] | None:
    if existing is None and new is None:
        return None
    if existing is None or new is None:
        _warn_one_sided(kind, name, property_name, source)
        return list(existing if existing is not None else new)  # type: ignore[arg-type]
    if len(existing) == len(new) and set(existing) == set(new):
        return list(existing)
    logger.warning(
        '%s named "%s" has two definitions with different %s arrays: %s, %s. '
        "Combining them. In definition: %s",
        kind.value,
        name,
        property_name,
        json.dumps(existing),
        json.dumps(new),
        source,
    )
    return list(dict.fromkeys([*existing, *new]))


def merge_marker(
    existing: MarkerInfo | None,
    incoming: MarkerInfo,
    name: str,
    source: str,
) -> MarkerInfo:
    """Merge ``incoming`` into ``existing`` for the marker ``name``.

    ``source`` names the definition ``incoming`` came from and only appears
    in diagnostics.
    """
    if existing is None:
        return incoming

    kind = ObjectKind.MARKER
    if existing.type != incoming.type:
        raise _conflict(kind, name, "type", source, existing.type, incoming.type)

    update: dict[str, Any] = {}
    for field_name in _MARKER_STRING_FIELDS:
        update[field_name] = _merge_strings(
            kind,
            name,
            _alias(MarkerInfo, field_name),
            source,
            getattr(existing, field_name),
            getattr(incoming, field_name),
        )
    for field_name in _MARKER_LIST_FIELDS:
        update[field_name] = _merge_lists(
            kind,
            name,
            _alias(MarkerInfo, field_name),
            source,
            getattr(existing, field_name),
            getattr(incoming, field_name),
        )
    return MarkerInfo(type=existing.type, **update)


def merge_marker_type(
    existing: MarkerTypeInfo | None,
    incoming: MarkerTypeInfo,
    name: str,
    source: str,
) -> MarkerTypeInfo:
    """Merge ``incoming`` into ``existing`` for the marker type ``name``."""
    if existing is None:
        return incoming

    kind = ObjectKind.MARKER_TYPE
    update: dict[str, Any] = {}
    for field_name in _MARKER_TYPE_FLAG_FIELDS:
        old = getattr(existing, field_name)
        new = getattr(incoming, field_name)
        if bool(old) != bool(new):
            raise _conflict(kind, name, _alias(MarkerTypeInfo, field_name), source, old, new)
        # Keep an explicit value over an absent one.
        update[field_name] = new if new is not None else old
    for field_name in _MARKER_TYPE_LIST_FIELDS:
        update[field_name] = _merge_lists(
            kind,
            name,
            _alias(MarkerTypeInfo, field_name),
            source,
            getattr(existing, field_name),
            getattr(incoming, field_name),
        )
    return MarkerTypeInfo(**update)


def with_element_info(
    candidate: MarkerInfo,
    default_attribute: str | None,
    skip_output_attribute_to_usfm: list[str] | None,
) -> MarkerInfo:
    """A candidate marker completed with what its element declares.

    The element-level default only fills a candidate without its own.
    """
    update: dict[str, Any] = {}
    if default_attribute and not candidate.default_attribute:
        update["default_attribute"] = default_attribute
    if skip_output_attribute_to_usfm:
        update["skip_output_attribute_to_usfm"] = list(skip_output_attribute_to_usfm)
    if not update:
        return candidate
    return candidate.model_copy(update=update)
