"""I/O around the compiler: provenance lookup and map persistence."""

from markersmap.service.output import (
    TemplateError,
    load_markers_map,
    markers_map_json,
    render_model_module,
    write_markers_json,
    write_model_module,
)
from markersmap.service.provenance import ProvenanceError, tools_version

__all__ = [
    "ProvenanceError",
    "TemplateError",
    "load_markers_map",
    "markers_map_json",
    "render_model_module",
    "tools_version",
    "write_markers_json",
    "write_model_module",
]
