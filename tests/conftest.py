"""Shared test fixtures for the markers map compiler."""

from __future__ import annotations

import pytest

from markersmap.compiler.pipeline import CompilationPipeline, CompilationResult
from markersmap.parser.loader import SchemaDocument, SchemaLoader

RNG_HEADER = """\
<?xml version="1.0" encoding="utf-8"?>
<grammar xmlns="http://relaxng.org/ns/structure/1.0"
         xmlns:usfm="http://usfm.bible/usfm"
         datatypeLibrary="http://www.w3.org/2001/XMLSchema-datatypes">
"""
RNG_FOOTER = "</grammar>\n"


def rng(body: str) -> str:
    """Wrap ``define`` elements in a RelaxNG grammar with the usfm namespace."""
    return RNG_HEADER + body + RNG_FOOTER


SAMPLE_SCHEMA = rng(
    """\
  <start><ref name="Usx"/></start>

  <define name="Usx">
    <element name="usx">
      <attribute name="version"/>
      <zeroOrMore><ref name="Para"/></zeroOrMore>
    </element>
  </define>

  <define name="Para">
    <element name="para">
      <attribute name="style">
        <choice>
          <value>p</value>
          <value>m</value>
          <ref name="ParaTitleStyles"/>
        </choice>
      </attribute>
      <optional><attribute name="vid"/></optional>
      <zeroOrMore><ref name="Char"/></zeroOrMore>
    </element>
  </define>

  <define name="ParaTitleStyles">
    <choice>
      <value>mt</value>
      <ref name="ParaHeadingStyles"/>
    </choice>
  </define>

  <define name="ParaHeadingStyles">
    <choice>
      <value>s</value>
      <data type="token"><param name="pattern">s[1-4]</param></data>
      <ref name="ParaTitleStyles"/>
    </choice>
  </define>

  <define name="Char">
    <element name="char">
      <attribute name="style">
        <choice>
          <value>wj</value>
          <value>add</value>
          <value>xt</value>
          <value>jmp</value>
          <value usfm:propval="lemma">w</value>
        </choice>
      </attribute>
      <optional><attribute name="closed"/></optional>
      <text/>
    </element>
  </define>

  <define name="CharLink">
    <element name="char">
      <attribute name="style"><value>xt</value></attribute>
      <attribute name="href"/>
      <text/>
    </element>
  </define>

  <define name="Figure">
    <element name="figure">
      <attribute name="style"><value>fig</value></attribute>
      <optional><attribute name="alt"/></optional>
      <attribute name="file"/>
      <optional><ref name="FigureSize"/></optional>
      <attribute name="loc">
        <usfm:match noout="true"/>
      </attribute>
    </element>
  </define>

  <define name="FigureSize">
    <optional><attribute name="size"/></optional>
  </define>

  <define name="Milestone">
    <element name="ms">
      <attribute name="style">
        <choice>
          <data type="string"><param name="pattern">qt[1-5]?-[se]</param></data>
          <value>ts-s</value>
        </choice>
      </attribute>
      <optional><attribute name="sid" usfm:ignore="true"/></optional>
      <optional><attribute name="eid" usfm:ignore="true"/></optional>
      <optional><attribute name="who"/></optional>
    </element>
  </define>

  <define name="Chapter">
    <element name="chapter">
      <attribute name="style"><value>c</value></attribute>
      <attribute name="number"/>
      <optional><attribute name="altnumber"/></optional>
    </element>
  </define>

  <define name="ChapterEnd">
    <element name="chapter">
      <attribute name="eid"/>
    </element>
  </define>

  <define name="Verse">
    <element name="verse">
      <attribute name="style"><value>v</value></attribute>
      <attribute name="number"/>
    </element>
  </define>

  <define name="Note">
    <element>
      <name>note</name>
      <attribute name="style">
        <choice>
          <value>f</value>
          <value>x</value>
        </choice>
      </attribute>
      <attribute name="caller"/>
      <optional><attribute name="category"/></optional>
    </element>
  </define>

  <define name="Table">
    <element name="table">
      <oneOrMore>
        <element name="row">
          <attribute name="style"><value>tr</value></attribute>
        </element>
      </oneOrMore>
    </element>
  </define>
"""
)

SAMPLE_SKIPPED_DEFINITIONS = ["ChapterEnd", "FigureSize", "ParaHeadingStyles", "ParaTitleStyles"]

# Two definitions disagree on the type of marker "p".
CONFLICTING_TYPES_SCHEMA = rng(
    """\
  <define name="Para">
    <element name="para"><attribute name="style"><value>p</value></attribute></element>
  </define>
  <define name="Char">
    <element name="char"><attribute name="style"><value>p</value></attribute></element>
  </define>
"""
)


@pytest.fixture
def loader() -> SchemaLoader:
    return SchemaLoader()


@pytest.fixture
def pipeline() -> CompilationPipeline:
    return CompilationPipeline()


@pytest.fixture
def sample_document(loader: SchemaLoader) -> SchemaDocument:
    return loader.load_string(SAMPLE_SCHEMA)


@pytest.fixture
def sample_result(pipeline: CompilationPipeline) -> CompilationResult:
    """Compile the sample schema; it is free of conflicts."""
    result = pipeline.compile(SAMPLE_SCHEMA, "3.1", "abc123", "1.0.0")
    assert result.ok, f"Sample schema has a conflict: {result.conflict}"
    return result
