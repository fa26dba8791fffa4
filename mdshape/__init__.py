"""Markdown parsing and transformation to a structured document tree."""

from mdshape.abbreviations import apply_abbreviations, extract_abbreviations
from mdshape.cache import ParseCache
from mdshape.config import ParserConfigError, ParserSettings
from mdshape.diagnostics import (
    DepthLimitExceeded,
    ParseDiagnostics,
    ParseResult,
    ParserFailure,
)
from mdshape.document_parser import BaseDocumentParser, DocumentParser, ParserCacheKey
from mdshape.footnotes import extract_footnote_definitions
from mdshape.front_matter import extract_front_matter
from mdshape.models import (
    AbbreviationContent,
    AdmonitionBlock,
    AdmonitionKind,
    Block,
    CodeBlock,
    DefinitionListBlock,
    FootnotesBlock,
    FrontMatter,
    HeadingBlock,
    HtmlBlock,
    ImageBlock,
    InlineContent,
    ListBlock,
    ParagraphBlock,
    QuoteBlock,
    StructuredDocument,
    TableBlock,
    ThematicBreak,
)
from mdshape.parser import create_parser, parse_markdown
from mdshape.transformer import DocumentTransformer

__all__ = [
    # Parser
    "BaseDocumentParser",
    "DocumentParser",
    "ParserCacheKey",
    "ParserSettings",
    "ParserConfigError",
    "ParseCache",
    # Pipeline stages
    "extract_front_matter",
    "extract_footnote_definitions",
    "extract_abbreviations",
    "apply_abbreviations",
    "create_parser",
    "parse_markdown",
    "DocumentTransformer",
    # Diagnostics
    "ParseResult",
    "ParseDiagnostics",
    "DepthLimitExceeded",
    "ParserFailure",
    # Models
    "StructuredDocument",
    "FrontMatter",
    "Block",
    "InlineContent",
    "HeadingBlock",
    "ParagraphBlock",
    "ListBlock",
    "QuoteBlock",
    "AdmonitionBlock",
    "AdmonitionKind",
    "CodeBlock",
    "TableBlock",
    "ImageBlock",
    "ThematicBreak",
    "FootnotesBlock",
    "HtmlBlock",
    "DefinitionListBlock",
    "AbbreviationContent",
]
