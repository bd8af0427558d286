"""RelaxNG schema loading and navigation for the markers map compiler."""

from markersmap.parser.loader import (
    SchemaDocument,
    SchemaLoader,
    SchemaParseError,
    SchemaSafetyError,
)
from markersmap.parser.references import ReferenceResolver, StyleCandidates

__all__ = [
    "ReferenceResolver",
    "SchemaDocument",
    "SchemaLoader",
    "SchemaParseError",
    "SchemaSafetyError",
    "StyleCandidates",
]
