"""Leading metadata block extraction (YAML ``---`` or TOML ``+++`` fences)."""

import tomllib
from dataclasses import dataclass

import yaml
from loguru import logger

from mdshape.models import FrontMatter, FrontMatterFormat

# opening fence -> (accepted closing fences, format)
_FENCES: dict[str, tuple[tuple[str, ...], FrontMatterFormat]] = {
    "---": (("---", "..."), FrontMatterFormat.YAML),
    "+++": (("+++",), FrontMatterFormat.TOML),
}


@dataclass(frozen=True)
class FrontMatterExtraction:
    markdown: str
    front_matter: FrontMatter | None = None


def extract_front_matter(text: str) -> FrontMatterExtraction:
    """Strip a metadata block starting at offset 0.

    The body after the closing fence line is returned byte-for-byte; nothing
    is re-indented and line endings are left alone. Without a complete block
    at the very start, the input comes back untouched.
    """
    lines = text.splitlines(keepends=True)
    if not lines:
        return FrontMatterExtraction(markdown=text)

    opening = lines[0].rstrip("\r\n").rstrip(" \t")
    fence = _FENCES.get(opening)
    if fence is None:
        return FrontMatterExtraction(markdown=text)
    closings, fmt = fence

    consumed = len(lines[0])
    payload: list[str] = []
    for line in lines[1:]:
        consumed += len(line)
        if line.rstrip("\r\n").rstrip(" \t") in closings:
            raw = "".join(payload)
            return FrontMatterExtraction(
                markdown=text[consumed:],
                front_matter=FrontMatter(format=fmt, raw=raw, data=_load_payload(raw, fmt)),
            )
        payload.append(line)

    # Unterminated fence: not front matter
    return FrontMatterExtraction(markdown=text)


def _load_payload(raw: str, fmt: FrontMatterFormat) -> dict | None:
    try:
        if fmt is FrontMatterFormat.YAML:
            data = yaml.safe_load(raw)
        else:
            data = tomllib.loads(raw)
    except (yaml.YAMLError, tomllib.TOMLDecodeError) as e:
        logger.debug(f"Front matter ({fmt}) did not parse, keeping raw text: {e}")
        return None

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.debug(f"Front matter ({fmt}) is {type(data).__name__}, not a mapping")
        return None
    return data
