"""``generate-markers-map``: compile a usx.rng file and write the markers map."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from markersmap import __version__
from markersmap.compiler.pipeline import CompilationPipeline
from markersmap.parser.loader import SchemaLoader, SchemaParseError, SchemaSafetyError
from markersmap.service.output import load_markers_map, write_markers_json, write_model_module
from markersmap.service.provenance import ProvenanceError, tools_version
from markersmap.settings import Settings

logger = logging.getLogger("markersmap.cli")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="generate-markers-map",
        description="Compile a USX RelaxNG schema into a USFM/USX/USJ markers map",
    )
    parser.add_argument("--schema", required=True, help="Path to the usx.rng schema file")
    parser.add_argument("--version", required=True, help="Schema version to include in output")
    parser.add_argument(
        "--commit", required=True, help="Commit hash the schema file is from"
    )
    parser.add_argument(
        "--outJSON", dest="out_json", default=settings.out_json,
        help="Path to the output markers JSON file",
    )
    parser.add_argument(
        "--outModel", dest="out_model", default=settings.out_model,
        help="Path to the generated Python module holding the map",
    )
    parser.add_argument(
        "--base-map", dest="base_map", default=None,
        help="Markers JSON of another version to fill gaps from",
    )
    parser.add_argument(
        "--tools-version", dest="tools_version", default=None,
        help="Version of this tool to record instead of asking git",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s: %(message)s")
    args = build_parser(settings).parse_args(argv)
    logger.debug("generate-markers-map v%s", __version__)

    try:
        usfm_tools_version = args.tools_version or tools_version()
        base_map = load_markers_map(Path(args.base_map)) if args.base_map else None
        loader = SchemaLoader(max_document_size=settings.max_schema_size)
        document = loader.load(Path(args.schema))
    except (ProvenanceError, SchemaSafetyError, SchemaParseError, OSError, ValueError) as exc:
        logger.error("%s. Cannot continue", exc)
        return 1

    result = CompilationPipeline(loader).compile_document(
        document, args.version, args.commit, usfm_tools_version, base_map
    )
    if not result.ok:
        return 1
    markers_map = result.unwrap()

    write_markers_json(markers_map, Path(args.out_json))
    write_model_module(markers_map, Path(args.out_model))

    print("Generated markers.json successfully")
    print("\nSkipped definitions:")
    print("\n".join(result.skipped_definitions))
    return 0


if __name__ == "__main__":
    sys.exit(main())
