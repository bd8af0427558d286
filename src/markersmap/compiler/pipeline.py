"""Orchestrates the full compilation: Schema → Walk → Assemble → Sort → MarkersMap."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from markersmap.compiler.assembler import MapAssembler
from markersmap.compiler.builder import MarkersMapBuilder
from markersmap.compiler.walker import DefinitionWalker
from markersmap.models.errors import MarkerMergeConflictError, MergeConflict
from markersmap.models.markers import MarkersMap
from markersmap.parser.loader import SchemaDocument, SchemaLoader

logger = logging.getLogger("markersmap.compiler")


@dataclass
class CompilationResult:
    """Either a finished markers map or the conflict that stopped compilation."""

    markers_map: MarkersMap | None = None
    conflict: MergeConflict | None = None
    warnings: list[str] = field(default_factory=list)
    skipped_definitions: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.conflict is None

    def unwrap(self) -> MarkersMap:
        """The markers map, or ``MarkerMergeConflictError`` if compilation stopped."""
        if self.conflict is not None:
            raise MarkerMergeConflictError(self.conflict)
        assert self.markers_map is not None
        return self.markers_map


class _WarningCollector(logging.Handler):
    """Records warnings and passes on what the caller's logging set-up would have shown."""

    def __init__(self, forward_to: logging.Logger | None, forward_level: int) -> None:
        super().__init__()
        self.messages: list[str] = []
        self._forward_to = forward_to
        self._forward_level = forward_level

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno == logging.WARNING:
            self.messages.append(record.getMessage())
        if self._forward_to is not None and record.levelno >= self._forward_level:
            self._forward_to.handle(record)


@contextmanager
def _collecting_warnings() -> Iterator[list[str]]:
    """Collect every ``markersmap`` warning, whatever level the logger is set to.

    For the duration, the package logger is opened up to WARNING and stops
    propagating; records the original level allowed are handed on to its
    parent unchanged.
    """
    package_logger = logging.getLogger("markersmap")
    saved_level, saved_propagate = package_logger.level, package_logger.propagate
    threshold = package_logger.getEffectiveLevel()
    collector = _WarningCollector(
        package_logger.parent if saved_propagate else None, threshold
    )
    package_logger.setLevel(min(threshold, logging.WARNING))
    package_logger.propagate = False
    package_logger.addHandler(collector)
    try:
        yield collector.messages
    finally:
        package_logger.removeHandler(collector)
        package_logger.propagate = saved_propagate
        package_logger.setLevel(saved_level)


class CompilationPipeline:
    """Compiles a USX RelaxNG schema into a markers map.

    Compilation is a pure function of its inputs apart from the warnings it
    logs; nothing is shared between calls.
    """

    def __init__(self, loader: SchemaLoader | None = None) -> None:
        self._loader = loader or SchemaLoader()

    def compile(
        self,
        schema: str,
        version: str,
        commit: str,
        usfm_tools_version: str | None = None,
        base_map: MarkersMap | None = None,
    ) -> CompilationResult:
        """Compile schema text. Loader errors propagate; merge conflicts are returned."""
        document = self._loader.load_string(schema)
        return self.compile_document(document, version, commit, usfm_tools_version, base_map)

    def compile_document(
        self,
        document: SchemaDocument,
        version: str,
        commit: str,
        usfm_tools_version: str | None = None,
        base_map: MarkersMap | None = None,
    ) -> CompilationResult:
        builder = MarkersMapBuilder(version, commit, usfm_tools_version)
        with _collecting_warnings() as warnings:
            try:
                # Phase 1: one fold step per definition
                builder = DefinitionWalker(document).walk(builder)

                # Phase 2: manual markers, inheritance, patches, sort
                markers_map = MapAssembler(base_map).assemble(builder)
            except MarkerMergeConflictError as exc:
                for line in exc.conflict.describe():
                    logger.error(line)
                return CompilationResult(
                    conflict=exc.conflict,
                    warnings=warnings,
                    skipped_definitions=sorted(builder.skipped_definitions),
                )

        return CompilationResult(
            markers_map=markers_map,
            warnings=warnings,
            skipped_definitions=sorted(builder.skipped_definitions),
        )
