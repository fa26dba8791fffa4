"""Tests for abbreviation extraction and substitution."""

from mdshape import DocumentParser
from mdshape.abbreviations import apply_abbreviations, build_abbreviation_pattern, extract_abbreviations
from mdshape.models import (
    AbbreviationContent,
    CodeSpanContent,
    FootnotesBlock,
    ParagraphBlock,
    StrongContent,
    StructuredDocument,
    TableBlock,
    TextContent,
)


def parse(md: str) -> StructuredDocument:
    return DocumentParser().parse(md)


def abbreviations_in(content) -> list[AbbreviationContent]:
    return [c for c in content if isinstance(c, AbbreviationContent)]


class TestExtraction:
    def test_definitions_are_removed_in_order(self):
        result = extract_abbreviations("*[HTML]: Hyper Text Markup Language\n*[CSS]: Cascading Style Sheets\n\nBody")
        assert result.markdown == "\nBody"
        assert list(result.abbreviations.items()) == [
            ("HTML", "Hyper Text Markup Language"),
            ("CSS", "Cascading Style Sheets"),
        ]

    def test_empty_abbreviation_or_expansion_is_discarded(self):
        result = extract_abbreviations("*[]: Nothing\n*[X]:   \nText")
        assert result.abbreviations == {}
        assert result.markdown == "Text"

    def test_non_matching_lines_are_preserved(self):
        text = "* [not]: an abbreviation\nplain *[X]: inline"
        result = extract_abbreviations(text)
        assert result.markdown == text
        assert result.abbreviations == {}

    def test_definitions_inside_code_fence_are_kept(self):
        text = "```\n*[API]: Application Programming Interface\n```\n"
        result = extract_abbreviations(text)
        assert result.markdown == text
        assert result.abbreviations == {}


class TestPattern:
    def test_longest_key_wins(self):
        pattern = build_abbreviation_pattern({"HTML": "a", "HTML5": "b"})
        assert pattern.findall("HTML5 and HTML") == ["HTML5", "HTML"]

    def test_whole_words_only(self):
        pattern = build_abbreviation_pattern({"JS": "JavaScript"})
        assert pattern.findall("JSFOO and _JS and JS.") == ["JS"]


class TestParsedDocument:
    def test_definition_applied_to_paragraph(self):
        doc = parse("*[HTML]: Hyper Text Markup Language\n\nThe HTML spec.")
        assert len(doc.blocks) == 1
        paragraph = doc.blocks[0]
        assert isinstance(paragraph, ParagraphBlock)
        assert paragraph.content == (
            TextContent(content="The "),
            AbbreviationContent(content="HTML", expansion="Hyper Text Markup Language"),
            TextContent(content=" spec."),
        )
        assert "*[HTML]" not in doc.model_dump_json()

    def test_multiple_abbreviations(self):
        doc = parse("*[HTML]: Hyper Text Markup Language\n*[CSS]: Cascading Style Sheets\n\nHTML and CSS are web technologies.")
        found = abbreviations_in(doc.blocks[0].content)
        assert [a.content for a in found] == ["HTML", "CSS"]

    def test_partial_word_not_matched(self):
        doc = parse("*[JS]: JavaScript\n\nThe word JSFOO should not match.")
        assert abbreviations_in(doc.blocks[0].content) == []

    def test_abbreviation_inside_bold(self):
        doc = parse("*[API]: Application Programming Interface\n\nThe **API** is well documented.")
        bold = next(c for c in doc.blocks[0].content if isinstance(c, StrongContent))
        assert abbreviations_in(bold.content)[0].content == "API"

    def test_code_span_is_not_scanned(self):
        doc = parse("*[API]: Application Programming Interface\n\nUse `API` here.")
        content = doc.blocks[0].content
        assert abbreviations_in(content) == []
        assert CodeSpanContent(content="API") in content

    def test_table_cells_are_scanned(self):
        doc = parse("*[CPU]: Central Processing Unit\n\n| Part |\n| --- |\n| CPU |")
        table = doc.blocks[0]
        assert isinstance(table, TableBlock)
        assert abbreviations_in(table.rows[0][0].content)[0].expansion == "Central Processing Unit"

    def test_footnote_bodies_are_scanned(self):
        doc = parse("*[W3C]: World Wide Web Consortium\n\nText[^1].\n\n[^1]: See the W3C.")
        footnotes = doc.blocks[-1]
        assert isinstance(footnotes, FootnotesBlock)
        body = footnotes.definitions[0].blocks[0]
        assert abbreviations_in(body.content)[0].content == "W3C"

    def test_no_definitions_means_no_abbreviation_nodes(self):
        doc = parse("Just a regular paragraph with no abbreviations.")
        assert abbreviations_in(doc.blocks[0].content) == []


class TestApply:
    def test_no_abbreviations_returns_same_document(self):
        doc = parse("Some HTML text.")
        assert apply_abbreviations(doc, {}) is doc

    def test_applying_twice_equals_applying_once(self):
        abbreviations = {"HTML": "Hyper Text Markup Language", "HTML5": "HTML version 5", "CSS": "Cascading Style Sheets"}
        doc = parse("HTML5 and HTML with *CSS* in a list:\n\n- CSS\n- > HTML quoted\n")
        once = apply_abbreviations(doc, abbreviations)
        twice = apply_abbreviations(once, abbreviations)
        assert once == twice
        assert once != doc

    def test_original_document_is_not_modified(self):
        doc = parse("The HTML spec.")
        apply_abbreviations(doc, {"HTML": "Hyper Text Markup Language"})
        assert doc.blocks[0].content == (TextContent(content="The HTML spec."),)
