"""Schema compilation pipeline for the markers map."""

from markersmap.compiler.merge import merge_marker, merge_marker_type
from markersmap.compiler.pipeline import CompilationPipeline, CompilationResult

__all__ = [
    "CompilationPipeline",
    "CompilationResult",
    "merge_marker",
    "merge_marker_type",
]
