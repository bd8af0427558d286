"""Reading and writing compiled markers maps."""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from pprint import pformat

from markersmap.models.markers import MarkersMap

logger = logging.getLogger("markersmap.service")

TEMPLATE_PLACEHOLDER = " = '%USFM_MARKERS_MAP_REPLACE_ME%'"
_TEMPLATE_NAME = "markers_map_model.py.template"


class TemplateError(Exception):
    """Raised when the model template has no placeholder to patch."""


def markers_map_json(markers_map: MarkersMap) -> str:
    return json.dumps(markers_map.to_json_dict(), indent=2, ensure_ascii=False)


def write_markers_json(markers_map: MarkersMap, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(markers_map_json(markers_map), encoding="utf-8")
    logger.info("Wrote %s", path)


def load_markers_map(path: Path) -> MarkersMap:
    """Read a markers map written by ``write_markers_json``."""
    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    return MarkersMap.model_validate(data)


def read_template() -> str:
    return (
        resources.files("markersmap.templates")
        .joinpath(_TEMPLATE_NAME)
        .read_text(encoding="utf-8")
    )


def render_model_module(template: str, markers_map: MarkersMap) -> str:
    """Replace the template placeholder with a Python literal of the map."""
    if TEMPLATE_PLACEHOLDER not in template:
        raise TemplateError(f"Template does not contain {TEMPLATE_PLACEHOLDER.strip()!r}")
    literal = pformat(markers_map.to_json_dict(), indent=1, width=100, sort_dicts=False)
    return template.replace(TEMPLATE_PLACEHOLDER, f": dict[str, Any] = {literal}", 1)


def write_model_module(markers_map: MarkersMap, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_model_module(read_template(), markers_map), encoding="utf-8")
    logger.info("Wrote %s", path)
