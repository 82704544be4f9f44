"""Lexer: split resolved template text into a flat instruction sequence.

Directive patterns are applied in a fixed order (raw, interpolate,
conditional, iterate, evaluate). Each pattern only sees the literal text the
previous patterns left behind, so a directive matched by an earlier pattern
can never be claimed by a later, more permissive one. This matters for the
default syntax, where the evaluate pattern ``{{ ... }}`` would also match
every other directive.

Text that no pattern matches is kept verbatim as TEXT tokens.

Example:
    >>> [t.type.name for t in tokenize("a{{=it.x}}b{{ y = 1 }}", Settings())]
    ['TEXT', 'INTERPOLATE', 'TEXT', 'EVALUATE']
"""

from __future__ import annotations

import logging
import re

from dottpl._types import DIRECTIVE_ORDER, Token, TokenType
from dottpl.settings import Settings

logger = logging.getLogger(__name__)

_BREAKS_AND_COMMENTS_RE = re.compile(r"\r|\n|\t|/\*[\s\S]*?\*/")


def _ws_around_breaks(at_start: bool, at_end: bool) -> re.Pattern[str]:
    before = r"^|\r|\n" if at_start else r"\r|\n"
    after = r"\r|\n|\Z" if at_end else r"\r|\n"
    return re.compile(rf"({before})\t* +| +\t*({after})")


_WS_AROUND_BREAKS = {
    (at_start, at_end): _ws_around_breaks(at_start, at_end)
    for at_start in (True, False)
    for at_end in (True, False)
}


def strip_text(text: str, at_start: bool = True, at_end: bool = True) -> str:
    """Collapse whitespace around line breaks, then drop breaks, tabs and comments.

    Spaces at the start or end of ``text`` only collapse when ``text`` starts
    or ends the whole template (``at_start`` / ``at_end``). Spaces next to a
    directive are kept.
    """
    text = _WS_AROUND_BREAKS[at_start, at_end].sub(" ", text)
    return _BREAKS_AND_COMMENTS_RE.sub("", text)


def _split(token: Token, token_type: TokenType, pattern: re.Pattern[str]) -> list[Token]:
    """Split one TEXT token around every match of ``pattern``."""
    text = token.value
    out: list[Token] = []
    pos = 0
    for match in pattern.finditer(text):
        if match.end() == match.start():
            continue
        if match.start() > pos:
            out.append(Token(TokenType.TEXT, text[pos : match.start()], offset=token.offset + pos))
        out.append(
            Token(
                token_type,
                match.group(0),
                groups=match.groups(),
                offset=token.offset + match.start(),
            )
        )
        pos = match.end()
    if not out:
        return [token]
    if pos < len(text):
        out.append(Token(TokenType.TEXT, text[pos:], offset=token.offset + pos))
    return out


def tokenize(text: str, settings: Settings) -> list[Token]:
    """Tokenize resolved template text.

    Args:
        text: Template text with define/use directives already resolved
        settings: Compile settings; disabled directives are skipped

    Returns:
        Tokens in source order, with line numbers filled in. Adjacent TEXT
        tokens are not merged.
    """
    tokens = [Token(TokenType.TEXT, text)] if text else []

    for token_type in DIRECTIVE_ORDER:
        pattern = settings.pattern(token_type.value)
        if pattern is None:
            continue
        split: list[Token] = []
        for token in tokens:
            if token.type is TokenType.TEXT:
                split.extend(_split(token, token_type, pattern))
            else:
                split.append(token)
        tokens = split

    result: list[Token] = []
    for token in tokens:
        lineno = text.count("\n", 0, token.offset) + 1
        value = token.value
        if token.type is TokenType.TEXT and settings.strip:
            at_end = token.offset + len(value) == len(text)
            value = strip_text(value, at_start=token.offset == 0, at_end=at_end)
            if not value:
                continue
        result.append(Token(token.type, value, token.groups, token.offset, lineno))

    logger.debug("Tokenized %d chars into %d tokens", len(text), len(result))
    return result
