"""Markdown to StructuredDocument parsing pipeline.

front matter -> footnote definitions -> abbreviation definitions -> markdown-it
-> DocumentTransformer -> abbreviation substitution. Each parse builds its own
transformer and reporter, so a parser instance can be shared across threads;
only the parse cache holds shared state.
"""

import abc
from collections.abc import Callable, Hashable
from dataclasses import dataclass

from loguru import logger
from markdown_it import MarkdownIt

from mdshape.abbreviations import apply_abbreviations, extract_abbreviations
from mdshape.cache import ParseCache
from mdshape.config import (
    DEFAULT_MAX_TREE_DEPTH,
    DEFAULT_PARSE_CACHE_SIZE,
    MAX_MAPPED_TREE_DEPTH,
    ParserSettings,
    require_positive_int,
)
from mdshape.diagnostics import DepthLimitExceeded, ParseDiagnostics, ParseResult, ParserFailure
from mdshape.footnotes import extract_footnote_definitions
from mdshape.front_matter import extract_front_matter
from mdshape.models import FootnoteDefinition, FootnotesBlock, StructuredDocument
from mdshape.parser import create_parser, parse_markdown, tokenizer_nesting
from mdshape.transformer import DepthLimitReporter, DocumentTransformer

PARSER_KIND = "markdown-it/commonmark+gfm+footnote+deflist"


class BaseDocumentParser(abc.ABC):
    """Parser contract. Only :meth:`parse` is required; the rest have non-caching defaults."""

    @abc.abstractmethod
    def parse(self, input: str) -> StructuredDocument:
        """Parse markdown into a document."""

    def parse_with_diagnostics(self, input: str) -> ParseResult:
        return ParseResult(document=self.parse(input))

    def parse_cached(self, key: Hashable, input: str) -> StructuredDocument:
        return self.parse_cached_with_diagnostics(key, input).document

    def parse_cached_with_diagnostics(self, key: Hashable, input: str) -> ParseResult:
        """Does not cache; implementations with a cache override this."""
        return self.parse_with_diagnostics(input)

    def cache_key(self) -> Hashable:
        """Identity of this parser for shared caches; defaults to the parser class."""
        return type(self)


@dataclass(frozen=True)
class ParserCacheKey:
    kind: str
    max_tree_depth: int


class DocumentParser(BaseDocumentParser):
    """Default parser: markdown-it tokenizing, bounded mapping, and an LRU parse cache.

    Args:
        max_tree_depth: Block nesting levels materialized before truncating. Values above
            ``MAX_MAPPED_TREE_DEPTH`` are clamped to it; the cache key keeps the configured value.
        cache_size: Entries kept by the parse cache created for this parser.
        on_depth_limit_exceeded: Called with the depth reached, at most once per parse.
            On cached parses it runs while the cache lock is held by the calling thread.
        cache: Cache shared with other parsers; entries are scoped by :meth:`cache_key`.
            When given, ``cache_size`` is still validated but the shared cache keeps its own bound.

    Raises:
        ParserConfigError: If a limit is not a positive integer.
    """

    def __init__(
        self,
        max_tree_depth: int = DEFAULT_MAX_TREE_DEPTH,
        cache_size: int = DEFAULT_PARSE_CACHE_SIZE,
        on_depth_limit_exceeded: Callable[[int], None] | None = None,
        cache: ParseCache[ParseResult] | None = None,
    ):
        self.max_tree_depth = require_positive_int("max_tree_depth", max_tree_depth)
        self.cache_size = require_positive_int("cache_size", cache_size)
        self.mapped_depth = min(self.max_tree_depth, MAX_MAPPED_TREE_DEPTH)
        if self.mapped_depth < self.max_tree_depth:
            logger.warning(f"max_tree_depth {self.max_tree_depth} clamped to {self.mapped_depth}")
        self.on_depth_limit_exceeded = on_depth_limit_exceeded
        self._cache = cache if cache is not None else ParseCache(max_entries=cache_size)
        self._md = self._create_tokenizer()

    @classmethod
    def from_settings(
        cls, settings: ParserSettings, on_depth_limit_exceeded: Callable[[int], None] | None = None
    ) -> "DocumentParser":
        return cls(
            max_tree_depth=settings.max_tree_depth,
            cache_size=settings.cache_size,
            on_depth_limit_exceeded=on_depth_limit_exceeded,
        )

    def _create_tokenizer(self) -> MarkdownIt:
        return create_parser(max_nesting=tokenizer_nesting(self.mapped_depth))

    def cache_key(self) -> ParserCacheKey:
        return ParserCacheKey(kind=PARSER_KIND, max_tree_depth=self.max_tree_depth)

    def parse(self, input: str) -> StructuredDocument:
        """Best-effort parse; a failure yields an empty document."""
        return self.parse_with_diagnostics(input).document

    def parse_with_diagnostics(self, input: str) -> ParseResult:
        try:
            return self._parse(input)
        except Exception as e:
            logger.warning(f"Markdown parse failed: {type(e).__name__}: {e}")
            return ParseResult(
                document=StructuredDocument(),
                diagnostics=ParseDiagnostics(errors=[ParserFailure(message=str(e) or type(e).__name__)]),
            )

    def parse_cached_with_diagnostics(self, key: Hashable, input: str) -> ParseResult:
        """Cached parse. Results with errors are returned but never stored."""
        return self._cache.get_or_put(
            (self.cache_key(), key),
            input,
            lambda: self.parse_with_diagnostics(input),
            store_if=lambda result: not result.diagnostics.has_errors,
        )

    def clear_cache(self) -> None:
        """Evicts all entries from the parse cache."""
        self._cache.clear()

    def _parse(self, input: str) -> ParseResult:
        front_matter = extract_front_matter(input)
        footnotes = extract_footnote_definitions(front_matter.markdown)
        abbreviations = extract_abbreviations(footnotes.markdown)

        reporter = DepthLimitReporter(self.mapped_depth, self.on_depth_limit_exceeded)
        transformer = DocumentTransformer(
            max_tree_depth=self.mapped_depth,
            reporter=reporter,
            reserved_labels={definition.label for definition in footnotes.definitions},
        )

        blocks = transformer.transform(parse_markdown(abbreviations.markdown, self._md))

        # Definition bodies sit one level inside the Footnotes block
        extracted = [
            FootnoteDefinition(
                label=definition.label,
                blocks=transformer.transform_blocks(parse_markdown(definition.markdown, self._md).children, depth=2),
            )
            for definition in footnotes.definitions
        ]
        definitions = _dedupe_footnotes(extracted + transformer.consume_inline_footnotes())
        if definitions:
            blocks.append(FootnotesBlock(definitions=definitions))

        document = StructuredDocument(blocks=blocks, front_matter=front_matter.front_matter)
        document = apply_abbreviations(document, abbreviations.abbreviations)

        warnings = []
        if reporter.exceeded_depth is not None:
            warnings.append(
                DepthLimitExceeded(max_tree_depth=self.mapped_depth, exceeded_depth=reporter.exceeded_depth)
            )
        return ParseResult(document=document, diagnostics=ParseDiagnostics(warnings=warnings))


def _dedupe_footnotes(definitions: list[FootnoteDefinition]) -> list[FootnoteDefinition]:
    """Keep the first definition of each label, in order."""
    seen: set[str] = set()
    result: list[FootnoteDefinition] = []
    for definition in definitions:
        if definition.label in seen:
            logger.debug(f"Dropping duplicate footnote definition [^{definition.label}]")
            continue
        seen.add(definition.label)
        result.append(definition)
    return result
