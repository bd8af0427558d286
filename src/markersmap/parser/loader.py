"""RelaxNG schema loader with safety checks and a definition index."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from lxml import etree

from markersmap.parser.nodes import descendants_named

logger = logging.getLogger("markersmap.parser")

# ---------------------------------------------------------------------------
# Safety limits
# ---------------------------------------------------------------------------

_MAX_DOCUMENT_SIZE = 5_000_000  # 5M characters


class SchemaSafetyError(Exception):
    """Raised when schema input violates safety constraints.

    Distinct from parse errors: these indicate input that is refused before
    parsing (oversized documents) or that declares a DOCTYPE.
    """


class SchemaParseError(Exception):
    """Raised when the schema text is not well-formed XML."""


@dataclass
class SchemaDocument:
    """A parsed schema plus its ``define`` elements in document order."""

    root: etree._Element
    definitions: list[etree._Element] = field(default_factory=list)
    _by_name: dict[str, etree._Element] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        for define in self.definitions:
            name = define.get("name")
            # First definition with a name wins, later duplicates are never reached.
            if name and name not in self._by_name:
                self._by_name[name] = define

    def definition(self, name: str) -> etree._Element | None:
        return self._by_name.get(name)

    @property
    def definition_names(self) -> list[str]:
        return list(self._by_name)


class SchemaLoader:
    """Parses RelaxNG XML with entity resolution and network access disabled."""

    def __init__(self, max_document_size: int = _MAX_DOCUMENT_SIZE) -> None:
        self._max_document_size = max_document_size
        self._parser = etree.XMLParser(
            resolve_entities=False,
            no_network=True,
            huge_tree=False,
            remove_blank_text=False,
        )

    # -- safety checks -------------------------------------------------------

    def _check_schema_safety(self, content: str) -> None:
        if len(content) > self._max_document_size:
            raise SchemaSafetyError(
                f"Schema document exceeds maximum size "
                f"({len(content):,} chars > {self._max_document_size:,} limit)"
            )

    # -- public loading API --------------------------------------------------

    def load(self, path: Path) -> SchemaDocument:
        """Load a schema file."""
        with path.open("r", encoding="utf-8") as handle:
            content = handle.read()
        return self.load_string(content, filename=str(path))

    def load_string(self, content: str, filename: str = "<string>") -> SchemaDocument:
        """Load a schema from a string."""
        self._check_schema_safety(content)
        try:
            # lxml refuses str input that carries an encoding declaration.
            root = etree.fromstring(content.encode("utf-8"), self._parser)
        except etree.XMLSyntaxError as exc:
            raise SchemaParseError(f"Failed to parse schema '{filename}': {exc}") from exc
        # usx.rng never declares a DOCTYPE; refusing one rules out entity declarations.
        docinfo = root.getroottree().docinfo
        if docinfo.doctype or docinfo.internalDTD is not None:
            raise SchemaSafetyError(
                f"Schema '{filename}' declares a DOCTYPE; DOCTYPE and entity declarations "
                "are not supported"
            )
        definitions = descendants_named(root, "define", include_self=True)
        logger.debug("Loaded %d definitions from %s", len(definitions), filename)
        return SchemaDocument(root=root, definitions=definitions)
