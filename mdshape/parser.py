"""Markdown tokenizing using markdown-it-py.

Configures markdown-it with the plugins we need:
- CommonMark base
- GFM tables, strikethrough and task list items
- Footnotes (definitions nested in containers, ``^[inline]`` notes)
- Definition lists
"""

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode
from mdit_py_plugins.deflist import deflist_plugin
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

# markdown-it's own nesting guard for the commonmark preset
TOKENIZER_MIN_NESTING = 20


def tokenizer_nesting(max_tree_depth: int) -> int:
    """Nesting allowance for markdown-it so the mapper's depth limit is the one that trips.

    One mapped level costs at most two tokenizer levels (list + list item,
    dl + dd, footnote block + footnote); the slack covers the node one past
    the limit and its leaf paragraph.
    """
    return max(TOKENIZER_MIN_NESTING, max_tree_depth * 2 + 4)


def create_parser(max_nesting: int = TOKENIZER_MIN_NESTING) -> MarkdownIt:
    """Create configured markdown-it parser."""
    md = MarkdownIt("commonmark", {"maxNesting": max_nesting})
    md.enable("table")
    md.enable("strikethrough")
    md.use(tasklists_plugin)
    md.use(footnote_plugin)
    md.use(deflist_plugin)
    return md


def parse_markdown(text: str, parser: MarkdownIt | None = None) -> SyntaxTreeNode:
    """Parse markdown text into AST.

    Args:
        text: Markdown text to parse
        parser: Configured parser; a fresh default one is created when omitted

    Returns:
        Root SyntaxTreeNode of the AST
    """
    if parser is None:
        parser = create_parser()
    tokens = parser.parse(text)
    return SyntaxTreeNode(tokens)
