"""Line-level helpers shared by the pre-parse extractors."""

import re

_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")


class FenceTracker:
    """Tracks whether a line-by-line scan is inside a fenced code block.

    Extractors must leave definition-looking lines inside code fences alone.
    """

    def __init__(self) -> None:
        self._marker: str | None = None

    @property
    def inside(self) -> bool:
        return self._marker is not None

    def feed(self, line: str) -> bool:
        """Consume a line; return True if it is part of a fence (including the fence lines)."""
        match = _FENCE_RE.match(line)
        if self._marker is None:
            if match:
                self._marker = match.group(1)
                return True
            return False

        if match and match.group(1)[0] == self._marker[0] and len(match.group(1)) >= len(self._marker):
            if not line[match.end() :].strip():
                self._marker = None
        return True


def strip_line_ending(line: str) -> str:
    return line.rstrip("\r\n")


def is_blank(line: str) -> bool:
    return not line.strip()


def continuation_indent(line: str) -> int:
    """Width of the indentation prefix that makes ``line`` a continuation, or 0."""
    if line.startswith("\t"):
        return 1
    if line.startswith("    "):
        return 4
    return 0
