"""Tests for markers map persistence."""

from __future__ import annotations

import ast
import json
from pathlib import Path

import pytest

from markersmap.models.markers import MarkerInfo, MarkersMap, MarkerTypeInfo
from markersmap.service.output import (
    TEMPLATE_PLACEHOLDER,
    TemplateError,
    load_markers_map,
    read_template,
    render_model_module,
    write_markers_json,
    write_model_module,
)


@pytest.fixture
def markers_map() -> MarkersMap:
    return MarkersMap(
        version="3.1",
        commit="abc",
        usfm_tools_version="v1.2.0+",
        markers={"w": MarkerInfo(type="char", default_attribute="lemma")},
        marker_types={"usx": MarkerTypeInfo(has_style_attribute=False)},
    )


class TestJsonOutput:
    def test_write_creates_directories(self, markers_map: MarkersMap, tmp_path: Path) -> None:
        path = tmp_path / "dist" / "markers.json"
        write_markers_json(markers_map, path)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["usfmToolsVersion"] == "v1.2.0+"
        assert data["markers"]["w"] == {"type": "char", "defaultAttribute": "lemma"}
        assert data["markerTypes"]["usx"] == {"hasStyleAttribute": False}

    def test_load_written_map(self, markers_map: MarkersMap, tmp_path: Path) -> None:
        path = tmp_path / "markers.json"
        write_markers_json(markers_map, path)
        assert load_markers_map(path) == markers_map


class TestModelModule:
    def test_packaged_template_has_placeholder(self) -> None:
        assert TEMPLATE_PLACEHOLDER in read_template()

    def test_rendered_module_is_valid_python(self, markers_map: MarkersMap) -> None:
        rendered = render_model_module(read_template(), markers_map)
        assert "%USFM_MARKERS_MAP_REPLACE_ME%" not in rendered
        tree = ast.parse(rendered)
        assignment = next(node for node in tree.body if isinstance(node, ast.AnnAssign))
        value = ast.literal_eval(assignment.value)
        assert value == markers_map.to_json_dict()

    def test_missing_placeholder(self, markers_map: MarkersMap) -> None:
        with pytest.raises(TemplateError):
            render_model_module("USFM_MARKERS_MAP = {}\n", markers_map)

    def test_write_model_module(self, markers_map: MarkersMap, tmp_path: Path) -> None:
        path = tmp_path / "dist" / "markers_map_model.py"
        write_model_module(markers_map, path)
        assert "USFM_MARKERS_MAP: dict[str, Any] = {" in path.read_text(encoding="utf-8")
