"""Abbreviations (``*[HTML]: Hyper Text Markup Language``).

Definitions are stripped from the source before tokenizing; substitution
runs afterwards as a separate pass over the mapped document, turning
whole-word occurrences inside plain text into AbbreviationContent nodes.
"""

import re
from dataclasses import dataclass, field
from typing import assert_never

from mdshape.models import (
    AbbreviationContent,
    AdmonitionBlock,
    Block,
    CodeBlock,
    CodeSpanContent,
    DefinitionListBlock,
    EmphasisContent,
    FootnoteRefContent,
    FootnotesBlock,
    HeadingBlock,
    HtmlBlock,
    HtmlInlineContent,
    ImageBlock,
    InlineContent,
    InlineImageContent,
    LinkContent,
    ListBlock,
    ParagraphBlock,
    QuoteBlock,
    StrikethroughContent,
    StrongContent,
    StructuredDocument,
    SubscriptContent,
    SuperscriptContent,
    TableBlock,
    TableCell,
    TextContent,
    ThematicBreak,
)
from mdshape.text import FenceTracker, strip_line_ending

_ABBREVIATION_DEF_RE = re.compile(r"^\*\[([^\]]*)\]:(.*)$")


@dataclass(frozen=True)
class AbbreviationExtraction:
    markdown: str
    abbreviations: dict[str, str] = field(default_factory=dict)


def extract_abbreviations(text: str) -> AbbreviationExtraction:
    """Remove abbreviation definition lines, returning them in insertion order.

    Definitions with an empty abbreviation or expansion are dropped silently.
    """
    body: list[str] = []
    abbreviations: dict[str, str] = {}
    fences = FenceTracker()

    for line in text.splitlines(keepends=True):
        bare = strip_line_ending(line)
        if fences.feed(bare):
            body.append(line)
            continue

        match = _ABBREVIATION_DEF_RE.match(bare.strip())
        if match is None:
            body.append(line)
            continue

        abbr = match.group(1).strip()
        expansion = match.group(2).strip()
        if abbr and expansion:
            abbreviations[abbr] = expansion

    return AbbreviationExtraction(markdown="".join(body), abbreviations=abbreviations)


def build_abbreviation_pattern(abbreviations: dict[str, str]) -> re.Pattern[str]:
    """Single alternation over all keys, longest first, bounded by non-word characters."""
    keys = sorted(abbreviations, key=len, reverse=True)
    alternation = "|".join(re.escape(key) for key in keys)
    return re.compile(rf"(?<!\w)(?:{alternation})(?!\w)")


def apply_abbreviations(document: StructuredDocument, abbreviations: dict[str, str]) -> StructuredDocument:
    """Return a document with abbreviation occurrences substituted.

    With no abbreviations the same document object is returned.
    """
    if not abbreviations:
        return document
    applier = _AbbreviationApplier(abbreviations)
    return document.model_copy(update={"blocks": applier.blocks(document.blocks)})


class _AbbreviationApplier:
    def __init__(self, abbreviations: dict[str, str]):
        self.abbreviations = abbreviations
        self.pattern = build_abbreviation_pattern(abbreviations)

    def blocks(self, blocks: tuple[Block, ...]) -> tuple[Block, ...]:
        return tuple(self.block(block) for block in blocks)

    def block(self, block: Block) -> Block:
        match block:
            case HeadingBlock() | ParagraphBlock():
                return block.model_copy(update={"content": self.inlines(block.content)})
            case ListBlock():
                items = tuple(item.model_copy(update={"blocks": self.blocks(item.blocks)}) for item in block.items)
                return block.model_copy(update={"items": items})
            case QuoteBlock() | AdmonitionBlock():
                return block.model_copy(update={"blocks": self.blocks(block.blocks)})
            case TableBlock():
                return block.model_copy(
                    update={
                        "headers": self.cells(block.headers),
                        "rows": tuple(self.cells(row) for row in block.rows),
                    }
                )
            case FootnotesBlock():
                definitions = tuple(
                    definition.model_copy(update={"blocks": self.blocks(definition.blocks)})
                    for definition in block.definitions
                )
                return block.model_copy(update={"definitions": definitions})
            case DefinitionListBlock():
                items = tuple(
                    item.model_copy(
                        update={
                            "term": self.inlines(item.term),
                            "definitions": tuple(self.blocks(blocks) for blocks in item.definitions),
                        }
                    )
                    for item in block.items
                )
                return block.model_copy(update={"items": items})
            case CodeBlock() | ImageBlock() | ThematicBreak() | HtmlBlock():
                return block
            case _:
                assert_never(block)

    def cells(self, cells: tuple[TableCell, ...]) -> tuple[TableCell, ...]:
        return tuple(cell.model_copy(update={"content": self.inlines(cell.content)}) for cell in cells)

    def inlines(self, inlines: tuple[InlineContent, ...]) -> tuple[InlineContent, ...]:
        result: list[InlineContent] = []
        for inline in inlines:
            result.extend(self.inline(inline))
        return tuple(result)

    def inline(self, inline: InlineContent) -> list[InlineContent]:
        match inline:
            case TextContent():
                return self.text(inline.content)
            case (
                StrongContent()
                | EmphasisContent()
                | StrikethroughContent()
                | SuperscriptContent()
                | SubscriptContent()
                | LinkContent()
            ):
                return [inline.model_copy(update={"content": self.inlines(inline.content)})]
            case (
                CodeSpanContent()
                | InlineImageContent()
                | FootnoteRefContent()
                | HtmlInlineContent()
                | AbbreviationContent()
            ):
                return [inline]
            case _:
                assert_never(inline)

    def text(self, text: str) -> list[InlineContent]:
        result: list[InlineContent] = []
        last_end = 0
        for match in self.pattern.finditer(text):
            if match.start() > last_end:
                result.append(TextContent(content=text[last_end : match.start()]))
            abbr = match.group(0)
            result.append(AbbreviationContent(content=abbr, expansion=self.abbreviations[abbr]))
            last_end = match.end()

        if last_end == 0:
            return [TextContent(content=text)]
        if last_end < len(text):
            result.append(TextContent(content=text[last_end:]))
        return result
