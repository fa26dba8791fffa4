"""Transform markdown AST to StructuredDocument.

Walks the markdown-it-py SyntaxTreeNode and produces the closed block/inline
model. The walk runs on an explicit frame stack instead of Python recursion,
so the depth limit is enforced before any interpreter stack growth and does
not depend on the recursion limit.
"""

import re
from collections.abc import Callable, Iterable, Sequence
from typing import Any, NamedTuple

from loguru import logger
from markdown_it.tree import SyntaxTreeNode

from mdshape.emoji import replace_shortcodes
from mdshape.models import (
    AdmonitionBlock,
    AdmonitionKind,
    Block,
    CodeBlock,
    CodeSpanContent,
    DefinitionItem,
    DefinitionListBlock,
    EmphasisContent,
    FootnoteDefinition,
    FootnoteRefContent,
    HeadingBlock,
    HtmlBlock,
    HtmlInlineContent,
    ImageBlock,
    InlineContent,
    InlineImageContent,
    LinkContent,
    ListBlock,
    ListItem,
    ParagraphBlock,
    QuoteBlock,
    StrikethroughContent,
    StrongContent,
    SubscriptContent,
    SuperscriptContent,
    TableAlignment,
    TableBlock,
    TableCell,
    TaskState,
    TextContent,
    ThematicBreak,
)

# Footnote references, ^superscript^ and ~subscript~ inside plain text runs.
# Double tildes never reach here as text: markdown-it turns them into strikethrough.
_TEXT_MARKUP_RE = re.compile(
    r"\[\^(?P<ref>[^\]\s]+)\]"
    r"|\^(?P<sup>[^\^\s]+)\^"
    r"|(?<!~)~(?P<sub>[^~\s]+)~(?!~)"
)
_ADMONITION_RE = re.compile(r"^\[!([A-Za-z]+)\][ \t]*(.*)$")
_TASK_ITEM_CLASS = "task-list-item"
_CHECKED_ATTR = 'checked="checked"'
_ANONYMOUS_FOOTNOTE_PREFIX = "inline-"
_ALIGN_PREFIX = "text-align:"


class DepthLimitReporter:
    """Records the first time mapping goes past the depth limit in a parse."""

    def __init__(self, max_tree_depth: int, on_exceeded: Callable[[int], None] | None = None):
        self.max_tree_depth = max_tree_depth
        self._on_exceeded = on_exceeded
        self.exceeded_depth: int | None = None

    def report(self, depth: int) -> None:
        if self.exceeded_depth is not None:
            return
        self.exceeded_depth = depth
        logger.warning(f"Markdown nesting reached depth {depth}, limit is {self.max_tree_depth}; truncating")
        if self._on_exceeded is not None:
            self._on_exceeded(depth)


class _Frame:
    """One pending container on the work stack.

    Children are opened one at a time with ``opener``; once all are done,
    ``finish`` turns the collected results into the container's value.
    """

    __slots__ = ("children", "depth", "finish", "index", "opener", "results")

    def __init__(
        self,
        children: Sequence[SyntaxTreeNode],
        depth: int,
        opener: Callable[[SyntaxTreeNode, int], Any],
        finish: Callable[[list[Any]], Any],
    ):
        self.children = children
        self.depth = depth
        self.opener = opener
        self.finish = finish
        self.index = 0
        self.results: list[Any] = []


class _Term(NamedTuple):
    content: tuple[InlineContent, ...]


class _Definition(NamedTuple):
    blocks: tuple[Block, ...]


def _run(root: _Frame) -> Any:
    stack = [root]
    while True:
        frame = stack[-1]
        if frame.index < len(frame.children):
            child = frame.children[frame.index]
            frame.index += 1
            opened = frame.opener(child, frame.depth)
            if isinstance(opened, _Frame):
                stack.append(opened)
            elif isinstance(opened, list):
                frame.results.extend(opened)
            elif opened is not None:
                frame.results.append(opened)
            continue

        stack.pop()
        value = frame.finish(frame.results)
        if not stack:
            return value
        if value is not None:
            stack[-1].results.append(value)


def _inline_child(node: SyntaxTreeNode) -> SyntaxTreeNode | None:
    """The inline node of a paragraph/heading/cell (paragraphs may also carry footnote anchors)."""
    return next((c for c in node.children if c.type == "inline"), None)


def _is_standalone_image(inline: SyntaxTreeNode | None) -> bool:
    """Check if inline content is just a single image (ignoring whitespace and line breaks)."""
    if not inline or not inline.children:
        return False
    meaningful = [
        c
        for c in inline.children
        if c.type not in ("softbreak", "hardbreak") and not (c.type == "text" and not c.content.strip())
    ]
    return len(meaningful) == 1 and meaningful[0].type == "image"


def _alignment(style: Any) -> TableAlignment | None:
    if not isinstance(style, str) or not style.startswith(_ALIGN_PREFIX):
        return None
    try:
        return TableAlignment(style[len(_ALIGN_PREFIX) :].strip())
    except ValueError:
        return None


def _language(info: str) -> str | None:
    parts = info.split()
    return parts[0] if parts else None


def _footnote_block_labels(nodes: Sequence[SyntaxTreeNode]) -> set[str]:
    """Labels of the named definitions markdown-it collected into a footnote block."""
    return {
        str(footnote.meta["label"])
        for node in nodes
        if node.type == "footnote_block"
        for footnote in node.children
        if footnote.meta.get("label")
    }


class DocumentTransformer:
    """Maps markdown AST nodes to the block/inline model with a depth bound.

    Block descent (quotes, list items, definitions, footnote bodies) adds one
    level; a node opened past ``max_tree_depth`` is dropped with its whole
    subtree and reported once. Unknown node types are dropped silently.

    Footnote definitions the tokenizer found inside the body accumulate on
    the transformer; callers take them with :meth:`consume_inline_footnotes`.
    Anonymous ``^[...]`` notes are labelled ``inline-N``, skipping any label in
    ``reserved_labels`` or already named in the tree, so they never collide
    with a user label.
    """

    def __init__(
        self,
        max_tree_depth: int,
        reporter: DepthLimitReporter | None = None,
        reserved_labels: Iterable[str] = (),
    ):
        self.max_tree_depth = max_tree_depth
        self.reporter = reporter or DepthLimitReporter(max_tree_depth)
        self._inline_footnotes: list[FootnoteDefinition] = []
        self._taken_labels = set(reserved_labels)
        self._anonymous_labels: dict[int, str] = {}
        self._next_anonymous = 1

    def transform(self, ast: SyntaxTreeNode) -> list[Block]:
        """Transform AST root children to top-level blocks."""
        return self.transform_blocks(ast.children, depth=1)

    def transform_blocks(self, nodes: Sequence[SyntaxTreeNode], depth: int) -> list[Block]:
        """Map one tokenized tree's blocks; footnote ids are scoped to that tree."""
        self._taken_labels.update(_footnote_block_labels(nodes))
        self._anonymous_labels = {}
        return _run(_Frame(nodes, depth, self._open_block, finish=list))

    def consume_inline_footnotes(self) -> list[FootnoteDefinition]:
        footnotes, self._inline_footnotes = self._inline_footnotes, []
        return footnotes

    def _footnote_label(self, meta: dict) -> str:
        label = meta.get("label")
        if label:
            return str(label)
        note_id = int(meta.get("id", 0))
        if note_id not in self._anonymous_labels:
            candidate = f"{_ANONYMOUS_FOOTNOTE_PREFIX}{self._next_anonymous}"
            while candidate in self._taken_labels:
                self._next_anonymous += 1
                candidate = f"{_ANONYMOUS_FOOTNOTE_PREFIX}{self._next_anonymous}"
            self._next_anonymous += 1
            self._taken_labels.add(candidate)
            self._anonymous_labels[note_id] = candidate
        return self._anonymous_labels[note_id]

    def _within_limit(self, depth: int) -> bool:
        if depth > self.max_tree_depth:
            self.reporter.report(depth)
            return False
        return True

    # === BLOCKS ===

    def _open_block(self, node: SyntaxTreeNode, depth: int) -> Any:
        if not self._within_limit(depth):
            return None

        match node.type:
            case "heading":
                return HeadingBlock(level=int(node.tag[1]), content=self._transform_inline(_inline_child(node)))
            case "paragraph":
                return self._transform_paragraph(node)
            case "fence":
                return CodeBlock(content=node.content.rstrip("\n"), language=_language(node.info))
            case "code_block":
                return CodeBlock(content=node.content.rstrip("\n"))
            case "hr":
                return ThematicBreak()
            case "html_block":
                return HtmlBlock(content=node.content.rstrip("\n"))
            case "table":
                return self._transform_table(node)
            case "blockquote":
                return self._open_blockquote(node, depth)
            case "bullet_list" | "ordered_list":
                return self._open_list(node, depth)
            case "dl":
                return _Frame(node.children, depth + 1, self._open_definition_part, self._finish_definition_list)
            case "footnote_block":
                return _Frame(node.children, depth + 1, self._open_footnote, self._collect_inline_footnotes)
            case _:
                return None

    def _transform_paragraph(self, node: SyntaxTreeNode) -> ParagraphBlock | ImageBlock | None:
        """Transform paragraph node, detecting standalone images."""
        inline = _inline_child(node)
        if _is_standalone_image(inline):
            image = next(c for c in inline.children if c.type == "image")
            return ImageBlock(
                src=str(image.attrs.get("src", "")),
                alt=image.content or None,
                title=image.attrs.get("title") or None,
            )
        content = self._transform_inline(inline)
        return ParagraphBlock(content=content) if content else None

    def _seeded_frame(
        self,
        children: Sequence[SyntaxTreeNode],
        depth: int,
        lead: Callable[[], tuple[InlineContent, ...]],
        finish: Callable[[list[Any]], Any],
    ) -> _Frame:
        """Frame whose first block is a paragraph rebuilt by ``lead`` (marker lines removed)."""
        frame = _Frame(children, depth, self._open_block, finish)
        if self._within_limit(depth):
            content = lead()
            if content:
                frame.results.append(ParagraphBlock(content=content))
        return frame

    def _open_blockquote(self, node: SyntaxTreeNode, depth: int) -> _Frame:
        """Plain quote, or an admonition when the first line is a ``[!KIND]`` marker."""
        first = node.children[0] if node.children else None
        inline = _inline_child(first) if first is not None and first.type == "paragraph" else None
        head = inline.children[0] if inline is not None and inline.children else None
        match = _ADMONITION_RE.match(head.content) if head is not None and head.type == "text" else None
        kind = None
        if match:
            try:
                kind = AdmonitionKind(match.group(1).lower())
            except ValueError:
                kind = None

        if kind is None or inline is None:
            return _Frame(node.children, depth + 1, self._open_block, lambda blocks: QuoteBlock(blocks=blocks))

        rest = inline.children[1:]
        title: str | None = None
        lead_nodes, first_text = inline.children, match.group(2)
        if not rest or rest[0].type in ("softbreak", "hardbreak"):
            # Marker line holds only the marker and an optional plain title
            title = match.group(2).strip() or None
            lead_nodes, first_text = rest[1:], None

        def lead() -> tuple[InlineContent, ...]:
            return self._transform_inline_nodes(lead_nodes, first_text=first_text)

        return self._seeded_frame(
            node.children[1:],
            depth + 1,
            lead,
            lambda blocks: AdmonitionBlock(kind=kind, title=title, blocks=blocks),
        )

    def _open_list(self, node: SyntaxTreeNode, depth: int) -> _Frame:
        ordered = node.type == "ordered_list"
        start = int(node.attrs.get("start", 1)) if ordered else 1
        return _Frame(
            node.children,
            depth + 1,
            self._open_list_item,
            lambda items: ListBlock(ordered=ordered, start=start, items=items),
        )

    def _open_list_item(self, item: SyntaxTreeNode, depth: int) -> _Frame | None:
        if item.type != "list_item":
            return None

        # The tasklists plugin tags the item and puts a checkbox in front of its first paragraph
        first = item.children[0] if item.children else None
        inline = _inline_child(first) if first is not None and first.type == "paragraph" else None
        is_task = _TASK_ITEM_CLASS in str(item.attrs.get("class", "")).split()
        if not is_task or inline is None or not inline.children:
            return _Frame(item.children, depth, self._open_block, lambda blocks: ListItem(blocks=blocks))

        checkbox, *rest = inline.children
        state = TaskState.CHECKED if _CHECKED_ATTR in checkbox.content else TaskState.UNCHECKED
        # The plugin leaves the space after the marker on the first text node
        first_text = rest[0].content.lstrip() if rest and rest[0].type == "text" else None

        def lead() -> tuple[InlineContent, ...]:
            return self._transform_inline_nodes(rest, first_text=first_text)

        return self._seeded_frame(
            item.children[1:],
            depth,
            lead,
            lambda blocks: ListItem(blocks=blocks, task_state=state),
        )

    def _open_definition_part(self, node: SyntaxTreeNode, depth: int) -> Any:
        if node.type == "dt":
            return _Term(self._transform_inline(_inline_child(node)))
        if node.type == "dd":
            return _Frame(node.children, depth, self._open_block, lambda blocks: _Definition(tuple(blocks)))
        return None

    def _finish_definition_list(self, parts: list[Any]) -> DefinitionListBlock | None:
        items: list[DefinitionItem] = []
        term: tuple[InlineContent, ...] | None = None
        definitions: list[tuple[Block, ...]] = []
        for part in parts:
            if isinstance(part, _Term):
                if definitions:
                    items.append(DefinitionItem(term=term or (), definitions=definitions))
                term, definitions = part.content, []
            else:
                definitions.append(part.blocks)
        if definitions:
            items.append(DefinitionItem(term=term or (), definitions=definitions))
        return DefinitionListBlock(items=items) if items else None

    def _open_footnote(self, node: SyntaxTreeNode, depth: int) -> _Frame | None:
        if node.type != "footnote":
            return None
        label = self._footnote_label(node.meta)
        return _Frame(
            node.children, depth, self._open_block, lambda blocks: FootnoteDefinition(label=label, blocks=blocks)
        )

    def _collect_inline_footnotes(self, definitions: list[FootnoteDefinition]) -> None:
        # Never a block in place: the parser appends a single Footnotes block at the end
        self._inline_footnotes.extend(definitions)
        return None

    def _transform_table(self, node: SyntaxTreeNode) -> TableBlock | None:
        """Transform table node; a table with no header text and no rows maps to nothing."""
        headers: list[TableCell] = []
        alignments: list[TableAlignment | None] = []
        rows: list[list[TableCell]] = []

        for section in node.children:
            for tr in section.children:
                cells = [TableCell(content=self._transform_inline(_inline_child(cell))) for cell in tr.children]
                if section.type == "thead":
                    headers = cells
                    alignments = [_alignment(cell.attrs.get("style")) for cell in tr.children]
                elif section.type == "tbody":
                    rows.append(cells)

        if not rows and not any(cell.content for cell in headers):
            return None
        return TableBlock(headers=headers, rows=rows, alignments=alignments)

    # === INLINE CONTENT ===

    def _transform_inline(self, inline: SyntaxTreeNode | None) -> tuple[InlineContent, ...]:
        if not inline or not inline.children:
            return ()
        return self._transform_inline_nodes(inline.children)

    def _transform_inline_nodes(
        self, nodes: Sequence[SyntaxTreeNode], first_text: str | None = None
    ) -> tuple[InlineContent, ...]:
        """Transform inline nodes; ``first_text`` replaces the leading text node's content."""
        frame = _Frame(nodes, 0, self._open_inline, tuple)
        if first_text is not None and nodes and nodes[0].type == "text":
            frame.index = 1
            frame.results.extend(self._text_run(first_text))
        return _run(frame)

    def _open_inline(self, node: SyntaxTreeNode, depth: int) -> Any:
        match node.type:
            case "text":
                return self._text_run(node.content)
            case "softbreak" | "hardbreak":
                return TextContent(content="\n")
            case "strong":
                return _Frame(node.children, depth, self._open_inline, lambda c: StrongContent(content=c))
            case "em":
                return _Frame(node.children, depth, self._open_inline, lambda c: EmphasisContent(content=c))
            case "s":
                return _Frame(node.children, depth, self._open_inline, lambda c: StrikethroughContent(content=c))
            case "link":
                href = str(node.attrs.get("href", ""))
                title = node.attrs.get("title") or None
                return _Frame(
                    node.children,
                    depth,
                    self._open_inline,
                    lambda c: LinkContent(href=href, title=title, content=c),
                )
            case "code_inline":
                return CodeSpanContent(content=node.content)
            case "image":
                return InlineImageContent(
                    src=str(node.attrs.get("src", "")),
                    alt=node.content or None,
                    title=node.attrs.get("title") or None,
                )
            case "html_inline":
                return HtmlInlineContent(content=node.content)
            case "footnote_ref":
                return FootnoteRefContent(label=self._footnote_label(node.meta))
            case _:
                return None

    def _text_run(self, text: str) -> list[InlineContent]:
        """Split a plain text run into text, footnote refs, superscript and subscript.

        Emoji shortcodes are substituted in the text pieces.
        """
        result: list[InlineContent] = []
        last_end = 0
        for match in _TEXT_MARKUP_RE.finditer(text):
            if match.start() > last_end:
                result.append(TextContent(content=replace_shortcodes(text[last_end : match.start()])))
            if match.group("ref") is not None:
                result.append(FootnoteRefContent(label=match.group("ref")))
            elif match.group("sup") is not None:
                result.append(SuperscriptContent(content=[TextContent(content=replace_shortcodes(match.group("sup")))]))
            else:
                result.append(SubscriptContent(content=[TextContent(content=replace_shortcodes(match.group("sub")))]))
            last_end = match.end()

        if last_end < len(text):
            result.append(TextContent(content=replace_shortcodes(text[last_end:])))
        return result

