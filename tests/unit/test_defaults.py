"""Tests for default attribute inference."""

from __future__ import annotations

from markersmap.compiler.defaults import DefaultAttributeInference, is_excluded
from markersmap.parser.loader import SchemaLoader
from markersmap.parser.nodes import descendants_named
from tests.conftest import rng


def _infer(loader: SchemaLoader, element_body: str, marker_type: str = "char", extra: str = ""):
    document = loader.load_string(
        rng(
            f"""\
  <define name="A">
    <element name="{marker_type}">
      <attribute name="style"><value>zz</value></attribute>
{element_body}
    </element>
  </define>
{extra}"""
        )
    )
    define = document.definition("A")
    element = descendants_named(define, "element")[0]
    return DefaultAttributeInference(document).infer(element, marker_type, "A")


class TestExclusions:
    def test_style_and_closed_always_excluded(self) -> None:
        assert is_excluded("char", "style")
        assert is_excluded("char", "closed")

    def test_whole_marker_types_excluded(self) -> None:
        for marker_type in ("usx", "periph", "cell", "chapter", "verse"):
            assert is_excluded(marker_type, "anything")

    def test_single_attributes_excluded(self) -> None:
        assert is_excluded("book", "code")
        assert is_excluded("para", "vid")
        assert is_excluded("table", "vid")
        assert is_excluded("note", "caller")
        assert is_excluded("note", "category")
        assert is_excluded("sidebar", "category")
        assert not is_excluded("char", "vid")
        assert not is_excluded("book", "vid")


class TestDefaultAttributeInference:
    def test_single_required_attribute(self, loader: SchemaLoader) -> None:
        info = _infer(loader, '<attribute name="href"/><optional><attribute name="title"/></optional>')
        assert info.default_attribute == "href"

    def test_two_required_attributes_have_no_default(self, loader: SchemaLoader) -> None:
        info = _infer(loader, '<attribute name="a"/><attribute name="b"/>')
        assert info.default_attribute is None

    def test_first_optional_when_nothing_required(self, loader: SchemaLoader) -> None:
        info = _infer(
            loader,
            '<optional><attribute name="lemma"/></optional><optional><attribute name="strong"/></optional>',
        )
        assert info.default_attribute == "lemma"

    def test_no_attributes(self, loader: SchemaLoader) -> None:
        assert _infer(loader, "<text/>").default_attribute is None

    def test_nested_element_attributes_ignored(self, loader: SchemaLoader) -> None:
        info = _infer(
            loader,
            '<optional><attribute name="own"/></optional>'
            '<element name="inner"><attribute name="nested"/></element>',
        )
        assert info.default_attribute == "own"

    def test_excluded_attribute_does_not_count(self, loader: SchemaLoader) -> None:
        info = _infer(loader, '<attribute name="caller"/><optional><attribute name="category"/></optional>', "note")
        assert info.default_attribute is None

    def test_ignored_attributes_are_skipped_for_usfm(self, loader: SchemaLoader) -> None:
        info = _infer(
            loader,
            '<attribute name="sid" usfm:ignore="true"/>'
            '<attribute name="loc"><usfm:match noout="true"/></attribute>'
            '<attribute name="file"/>',
        )
        assert info.skip_output_attribute_to_usfm == ["sid", "loc"]
        assert info.default_attribute == "file"

    def test_attributes_from_referenced_definition(self, loader: SchemaLoader) -> None:
        info = _infer(
            loader,
            '<optional><ref name="Size"/></optional>',
            extra='  <define name="Size"><attribute name="size"/></define>\n',
        )
        # The ref is optional, so its attribute is optional too.
        assert info.default_attribute == "size"

    def test_required_attribute_from_reference(self, loader: SchemaLoader) -> None:
        info = _infer(
            loader,
            '<ref name="Link"/><optional><attribute name="title"/></optional>',
            extra='  <define name="Link"><attribute name="href"/></define>\n',
        )
        assert info.default_attribute == "href"

    def test_ignored_reference_marks_attributes_skipped(self, loader: SchemaLoader) -> None:
        info = _infer(
            loader,
            '<ref name="Ids" usfm:ignore="true"/><attribute name="who"/>',
            extra='  <define name="Ids"><optional><attribute name="sid"/></optional></define>\n',
        )
        assert info.skip_output_attribute_to_usfm == ["sid"]
        assert info.default_attribute == "who"

    def test_deep_reference_is_not_followed(self, loader: SchemaLoader) -> None:
        info = _infer(
            loader,
            '<zeroOrMore><ref name="Link"/></zeroOrMore>',
            extra='  <define name="Link"><attribute name="href"/></define>\n',
        )
        assert info.default_attribute is None
