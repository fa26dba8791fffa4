"""Parse diagnostics: non-fatal warnings and fatal errors collected per parse."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from mdshape.models import StructuredDocument


class DepthLimitExceeded(BaseModel):
    """Tree nesting went past the configured limit; the deeper subtree was dropped."""

    model_config = ConfigDict(frozen=True)

    type: Literal["depth_limit_exceeded"] = "depth_limit_exceeded"
    max_tree_depth: int
    exceeded_depth: int


class ParserFailure(BaseModel):
    """The tokenizer or mapper raised; the document is empty."""

    model_config = ConfigDict(frozen=True)

    type: Literal["parser_failure"] = "parser_failure"
    message: str


ParseWarning = Annotated[DepthLimitExceeded, Field(discriminator="type")]
ParseError = Annotated[ParserFailure, Field(discriminator="type")]


class ParseDiagnostics(BaseModel):
    model_config = ConfigDict(frozen=True)

    warnings: tuple[ParseWarning, ...] = ()
    errors: tuple[ParseError, ...] = ()

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


class ParseResult(BaseModel):
    """A parsed document bundled with the diagnostics of the parse that produced it."""

    model_config = ConfigDict(frozen=True)

    document: StructuredDocument
    diagnostics: ParseDiagnostics = ParseDiagnostics()
