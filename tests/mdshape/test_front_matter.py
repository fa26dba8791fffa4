"""Tests for leading metadata block extraction."""

from mdshape import DocumentParser
from mdshape.front_matter import extract_front_matter
from mdshape.models import FrontMatterFormat


class TestYamlFrontMatter:
    def test_yaml_block_is_stripped_and_parsed(self):
        result = extract_front_matter("---\ntitle: Hello\ntags: [a, b]\n---\n# Body\n")
        assert result.markdown == "# Body\n"
        assert result.front_matter is not None
        assert result.front_matter.format == FrontMatterFormat.YAML
        assert result.front_matter.data == {"title": "Hello", "tags": ["a", "b"]}
        assert result.front_matter.raw == "title: Hello\ntags: [a, b]\n"

    def test_dots_close_yaml_block(self):
        result = extract_front_matter("---\na: 1\n...\nText")
        assert result.markdown == "Text"
        assert result.front_matter.data == {"a": 1}

    def test_empty_block_gives_empty_mapping(self):
        result = extract_front_matter("---\n---\nText")
        assert result.markdown == "Text"
        assert result.front_matter.data == {}

    def test_invalid_yaml_keeps_raw_text(self):
        result = extract_front_matter("---\nkey: [unclosed\n---\nBody")
        assert result.markdown == "Body"
        assert result.front_matter.data is None
        assert result.front_matter.raw == "key: [unclosed\n"

    def test_scalar_payload_is_not_a_mapping(self):
        result = extract_front_matter("---\njust a string\n---\nBody")
        assert result.markdown == "Body"
        assert result.front_matter.data is None


class TestTomlFrontMatter:
    def test_toml_block_is_stripped_and_parsed(self):
        result = extract_front_matter('+++\ntitle = "Hello"\ncount = 3\n+++\nBody')
        assert result.markdown == "Body"
        assert result.front_matter.format == FrontMatterFormat.TOML
        assert result.front_matter.data == {"title": "Hello", "count": 3}

    def test_yaml_fence_does_not_close_toml(self):
        text = "+++\na = 1\n---\nBody"
        result = extract_front_matter(text)
        assert result.front_matter is None
        assert result.markdown == text


class TestNoFrontMatter:
    def test_plain_markdown_is_returned_verbatim(self):
        text = "# Title\n\nParagraph.\n"
        result = extract_front_matter(text)
        assert result.front_matter is None
        assert result.markdown is text

    def test_block_must_start_at_offset_zero(self):
        text = "\n---\na: 1\n---\nBody"
        result = extract_front_matter(text)
        assert result.front_matter is None
        assert result.markdown == text

    def test_unterminated_block_is_not_front_matter(self):
        text = "---\na: 1\nstill going"
        result = extract_front_matter(text)
        assert result.front_matter is None
        assert result.markdown == text

    def test_empty_input(self):
        result = extract_front_matter("")
        assert result.markdown == ""
        assert result.front_matter is None


class TestBodyPreservation:
    def test_body_round_trips_with_block_prefix(self):
        text = "---\na: 1\n---\n  indented\r\nline two\n\n"
        result = extract_front_matter(text)
        prefix = text[: len(text) - len(result.markdown)]
        assert prefix == "---\na: 1\n---\n"
        assert prefix + result.markdown == text

    def test_crlf_line_endings_are_left_alone(self):
        result = extract_front_matter("---\r\na: 1\r\n---\r\nBody\r\nMore")
        assert result.front_matter.data == {"a": 1}
        assert result.markdown == "Body\r\nMore"

    def test_non_string_keys_survive_the_full_parse(self):
        doc = DocumentParser().parse("---\n1: one\ndate: 2024-01-02\n---\nBody")
        assert doc.front_matter.data[1] == "one"
        assert str(doc.front_matter.data["date"]) == "2024-01-02"
