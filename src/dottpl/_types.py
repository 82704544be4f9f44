"""Token types shared by the lexer and the code generator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Instruction kinds produced by the lexer.

    Directive types are listed in the order the lexer applies their
    patterns; that order decides which directive owns overlapping text.
    """

    TEXT = "text"
    RAW = "raw"
    INTERPOLATE = "interpolate"
    CONDITIONAL = "conditional"
    ITERATE = "iterate"
    EVALUATE = "evaluate"


DIRECTIVE_ORDER: tuple[TokenType, ...] = (
    TokenType.RAW,
    TokenType.INTERPOLATE,
    TokenType.CONDITIONAL,
    TokenType.ITERATE,
    TokenType.EVALUATE,
)


@dataclass(frozen=True, slots=True)
class Token:
    """One instruction: literal text or a matched directive.

    Attributes:
        type: Instruction kind
        value: Literal text for TEXT, the full directive text otherwise
        groups: Capture groups of the directive pattern (empty for TEXT)
        offset: Position of the token in the resolved template text
        lineno: 1-based line of ``offset``
    """

    type: TokenType
    value: str
    groups: tuple[str | None, ...] = ()
    offset: int = 0
    lineno: int = 1

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, line={self.lineno})"
