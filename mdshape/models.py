"""Data models for the structured document tree.

Every node is a frozen pydantic model tagged with a ``type`` literal, so the
block and inline sets are closed discriminated unions. Trees are built once
per parse and never mutated; transformations produce new trees.
"""

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)


# === INLINE CONTENT (AST) ===


class TextContent(_Node):
    type: Literal["text"] = "text"
    content: str


class StrongContent(_Node):
    type: Literal["strong"] = "strong"
    content: tuple["InlineContent", ...]


class EmphasisContent(_Node):
    type: Literal["emphasis"] = "emphasis"
    content: tuple["InlineContent", ...]


class StrikethroughContent(_Node):
    type: Literal["strikethrough"] = "strikethrough"
    content: tuple["InlineContent", ...]


class SuperscriptContent(_Node):
    type: Literal["superscript"] = "superscript"
    content: tuple["InlineContent", ...]


class SubscriptContent(_Node):
    type: Literal["subscript"] = "subscript"
    content: tuple["InlineContent", ...]


class CodeSpanContent(_Node):
    type: Literal["code_span"] = "code_span"
    content: str


class LinkContent(_Node):
    type: Literal["link"] = "link"
    href: str
    title: str | None = None
    content: tuple["InlineContent", ...]


class InlineImageContent(_Node):
    type: Literal["inline_image"] = "inline_image"
    src: str
    alt: str | None = None
    title: str | None = None


class FootnoteRefContent(_Node):
    type: Literal["footnote_ref"] = "footnote_ref"
    label: str


class HtmlInlineContent(_Node):
    type: Literal["html_inline"] = "html_inline"
    content: str


class AbbreviationContent(_Node):
    type: Literal["abbreviation"] = "abbreviation"
    content: str  # matched text
    expansion: str


InlineContent = Annotated[
    TextContent
    | StrongContent
    | EmphasisContent
    | StrikethroughContent
    | SuperscriptContent
    | SubscriptContent
    | CodeSpanContent
    | LinkContent
    | InlineImageContent
    | FootnoteRefContent
    | HtmlInlineContent
    | AbbreviationContent,
    Field(discriminator="type"),
]


# === BLOCK TYPES ===


class AdmonitionKind(StrEnum):
    NOTE = "note"
    TIP = "tip"
    IMPORTANT = "important"
    WARNING = "warning"
    CAUTION = "caution"


class TaskState(StrEnum):
    CHECKED = "checked"
    UNCHECKED = "unchecked"


class TableAlignment(StrEnum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class HeadingBlock(_Node):
    type: Literal["heading"] = "heading"
    level: Literal[1, 2, 3, 4, 5, 6]
    content: tuple[InlineContent, ...]


class ParagraphBlock(_Node):
    type: Literal["paragraph"] = "paragraph"
    content: tuple[InlineContent, ...]


class ListItem(_Node):
    blocks: tuple["Block", ...]
    task_state: TaskState | None = None


class ListBlock(_Node):
    type: Literal["list"] = "list"
    ordered: bool
    start: int = 1
    items: tuple[ListItem, ...]


class QuoteBlock(_Node):
    type: Literal["quote"] = "quote"
    blocks: tuple["Block", ...]


class AdmonitionBlock(_Node):
    type: Literal["admonition"] = "admonition"
    kind: AdmonitionKind
    title: str | None = None
    blocks: tuple["Block", ...]


class CodeBlock(_Node):
    type: Literal["code"] = "code"
    content: str
    language: str | None = None


class TableCell(_Node):
    content: tuple[InlineContent, ...] = ()


class TableBlock(_Node):
    """GFM table. Rows may be ragged; a missing cell reads as empty."""

    type: Literal["table"] = "table"
    headers: tuple[TableCell, ...]
    rows: tuple[tuple[TableCell, ...], ...]
    alignments: tuple[TableAlignment | None, ...]


class ImageBlock(_Node):
    type: Literal["image"] = "image"
    src: str
    alt: str | None = None
    title: str | None = None


class ThematicBreak(_Node):
    type: Literal["hr"] = "hr"


class FootnoteDefinition(_Node):
    label: str
    blocks: tuple["Block", ...]


class FootnotesBlock(_Node):
    type: Literal["footnotes"] = "footnotes"
    definitions: tuple[FootnoteDefinition, ...]


class HtmlBlock(_Node):
    type: Literal["html"] = "html"
    content: str


class DefinitionItem(_Node):
    term: tuple[InlineContent, ...]
    definitions: tuple[tuple["Block", ...], ...]


class DefinitionListBlock(_Node):
    type: Literal["definition_list"] = "definition_list"
    items: tuple[DefinitionItem, ...]


Block = Annotated[
    HeadingBlock
    | ParagraphBlock
    | ListBlock
    | QuoteBlock
    | AdmonitionBlock
    | CodeBlock
    | TableBlock
    | ImageBlock
    | ThematicBreak
    | FootnotesBlock
    | HtmlBlock
    | DefinitionListBlock,
    Field(discriminator="type"),
]

# Update forward references
for _model in (
    StrongContent,
    EmphasisContent,
    StrikethroughContent,
    SuperscriptContent,
    SubscriptContent,
    LinkContent,
    ListItem,
    QuoteBlock,
    AdmonitionBlock,
    FootnoteDefinition,
    DefinitionItem,
    HeadingBlock,
    ParagraphBlock,
    ListBlock,
    TableCell,
    TableBlock,
    FootnotesBlock,
    DefinitionListBlock,
):
    _model.model_rebuild()


# === DOCUMENT ===


class FrontMatterFormat(StrEnum):
    YAML = "yaml"
    TOML = "toml"


class FrontMatter(_Node):
    format: FrontMatterFormat
    raw: str
    data: dict[Any, Any] | None = None  # None when the payload did not parse to a mapping


class StructuredDocument(_Node):
    """The full structured representation of a markdown document."""

    blocks: tuple[Block, ...] = ()
    front_matter: FrontMatter | None = None

    @property
    def footnotes(self) -> FootnotesBlock | None:
        """The trailing footnotes block, if the document has one."""
        if self.blocks and isinstance(self.blocks[-1], FootnotesBlock):
            return self.blocks[-1]
        return None
