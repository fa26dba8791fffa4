import os

from pydantic import PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MAX_TREE_DEPTH = 64
DEFAULT_PARSE_CACHE_SIZE = 64
# markdown-it and SyntaxTreeNode recurse once per nesting level; deeper limits are
# clamped so a tokenized tree always fits inside the interpreter recursion limit
MAX_MAPPED_TREE_DEPTH = 100


class ParserConfigError(ValueError):
    """A parser was constructed with an invalid limit."""


class ParserSettings(BaseSettings):
    max_tree_depth: PositiveInt = DEFAULT_MAX_TREE_DEPTH  # block nesting levels materialized before truncating
    cache_size: PositiveInt = DEFAULT_PARSE_CACHE_SIZE  # LRU entries kept by the parse cache

    model_config = SettingsConfigDict(
        env_prefix="MDSHAPE_",
        env_file=[os.getenv("ENV_FILE", ""), ".env"],
        extra="ignore",
    )


def require_positive_int(name: str, value: object) -> int:
    """Validate a configuration limit, raising ParserConfigError if it is not a positive integer."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ParserConfigError(f"{name} must be a positive integer, got {value!r}")
    return value
