"""Footnote definition pre-extraction.

Definitions (``[^label]: text`` plus indented continuation lines) are pulled
out of the body before tokenizing, so the tokenizer never sees them and each
one can be mapped on its own with the same depth limit.
"""

import re
from dataclasses import dataclass, field

from mdshape.text import FenceTracker, continuation_indent, is_blank, strip_line_ending

_FOOTNOTE_DEF_RE = re.compile(r"^ {0,3}\[\^([^\]]+)\]:(.*)$")


@dataclass(frozen=True)
class RawFootnoteDefinition:
    label: str
    markdown: str


@dataclass(frozen=True)
class FootnoteExtraction:
    markdown: str
    definitions: list[RawFootnoteDefinition] = field(default_factory=list)


class _OpenDefinition:
    def __init__(self, label: str, first_line: str) -> None:
        self.label = label
        self.lines = [first_line]
        self.pending_blanks: list[str] = []

    def close(self) -> RawFootnoteDefinition:
        return RawFootnoteDefinition(label=self.label, markdown="\n".join(self.lines).rstrip())


def extract_footnote_definitions(text: str) -> FootnoteExtraction:
    """Split ``text`` into (body without definitions, definitions in source order).

    A definition continues over lines indented by a tab or four spaces, and
    over blank lines that are followed by such an indented line. Blank lines
    held back that way are dropped from the body; any other line is kept
    verbatim. Definition lines inside fenced code are body text.
    """
    body: list[str] = []
    definitions: list[RawFootnoteDefinition] = []
    fences = FenceTracker()
    current: _OpenDefinition | None = None

    for line in text.splitlines(keepends=True):
        bare = strip_line_ending(line)

        if current is not None:
            if is_blank(bare):
                current.pending_blanks.append(line)
                continue
            indent = continuation_indent(bare)
            if indent:
                current.lines.extend("" for _ in current.pending_blanks)
                current.pending_blanks.clear()
                current.lines.append(bare[indent:])
                continue
            # Non-indented text ends the definition; held blanks go back to the body
            body.extend(current.pending_blanks)
            definitions.append(current.close())
            current = None

        if fences.feed(bare):
            body.append(line)
            continue

        match = _FOOTNOTE_DEF_RE.match(bare)
        label = match.group(1).strip() if match else ""
        if not label:
            body.append(line)
            continue
        current = _OpenDefinition(label, match.group(2).lstrip())

    if current is not None:
        body.extend(current.pending_blanks)
        definitions.append(current.close())

    return FootnoteExtraction(markdown="".join(body), definitions=definitions)
