"""dottpl Compiler Core: turn a token stream into render-body statements.

The CodeGenerator walks the lexer's flat instruction sequence once and emits
statements for the body of a render function. Output is accumulated in
literal runs: every control directive (conditional, iterate, evaluate)
closes the current run and opens a new one, exactly where the literal would
be closed and reopened if the body were one long string expression. Runs
left empty by that are kept; removing them is the finalizer's job.

Generated body for ``{{? it.items }}{{~ it.items :x:i }}{{=i}}:{{=x}} {{~}}{{?}}``:

    ```python
    if it.items:
        _seq0 = it.items
        for _i0 in range(len(_seq0)):
            x = _wrap(_seq0[_i0])
            i = _i0
            _append(_str(i))
            _append(':')
            _append(_str(x))
            _append(' ')
    ```

Directive semantics, in the order the lexer resolves them:

1. Literal text is escaped for the output literal (backslash and quote; in
   f-string mode braces are doubled too).
2. ``raw``: content decoded as a string literal, emitted as literal text;
   empty content emits ``settings.newline``.
3. ``interpolate``: expression emitted through ``_str``.
4. ``conditional``: ``if`` / ``elif`` / ``else`` / close.
5. ``iterate``: counted loop over the iterable's length with a counter name
   unique to this generator run; empty directive closes it.
6. ``evaluate``: code spliced line by line at the current depth.

"""

from __future__ import annotations

import ast
import logging
import re
import textwrap
from collections.abc import Callable, Sequence

from dottpl._types import Token, TokenType
from dottpl.compiler.statements import Code, Output, Piece, Statement
from dottpl.exceptions import ErrorCode, TemplateSyntaxError
from dottpl.settings import Settings

logger = logging.getLogger(__name__)

_CONTROL_WS_RE = re.compile(r"[\r\t\n]")
_UNESCAPED_QUOTE_RE = re.compile(r'(\\*)"')

_IF = "conditional"
_FOR = "iterate"


def escape_literal(text: str, tstring: bool = False) -> str:
    """Escape characters that would end a single-quoted output literal."""
    text = text.replace("\\", "\\\\").replace("'", "\\'")
    if tstring:
        text = text.replace("{", "{{").replace("}", "}}")
    return text


def unescape_code(code: str) -> str:
    """Prepare an embedded expression: line breaks and tabs become spaces."""
    return _CONTROL_WS_RE.sub(" ", code).strip()


def decode_raw(content: str) -> str:
    """Decode escape sequences in raw-directive content (``\\n`` -> newline)."""

    def quote(match: re.Match[str]) -> str:
        slashes = match.group(1)
        return slashes + ('"' if len(slashes) % 2 else '\\"')

    body = _UNESCAPED_QUOTE_RE.sub(quote, content)
    body = body.replace("\n", "\\n").replace("\r", "\\r")
    return ast.literal_eval(f'"{body}"')


def dedent_code(code: str) -> list[str]:
    """Split an evaluate block into lines with common indentation removed.

    The first line usually shares the ``{{`` line and carries no indentation
    of its own, so it is stripped separately from the rest. When it opens a
    block and the rest dedents to column 0, the rest is its body and is
    indented one level under it. Comment-only lines are dropped.
    """
    lines = code.splitlines()
    if not lines:
        return []
    first = lines[0].strip()
    rest = [line.rstrip() for line in textwrap.dedent("\n".join(lines[1:])).splitlines()]
    rest = [line for line in rest if line.strip() and not line.lstrip().startswith("#")]
    if first.endswith(":") and rest and not rest[0][0].isspace():
        rest = [f"    {line}" for line in rest]
    if not first or first.startswith("#"):
        return rest
    return [first, *rest]


class CodeGenerator:
    """Generate render-body statements from a token stream.

    One generator may be reused; ``generate`` resets all per-run state.

    Attributes:
        _settings: Compile settings (fixed for the generator's lifetime)
        _statements: Statements emitted so far
        _pieces: Pieces of the currently open literal run
        _blocks: Open control blocks, innermost last
        _loop_counter: Next suffix for iterate counter names
        _filename: Template name used in error messages
        _source: Template text used for error snippets
    """

    __slots__ = (
        "_blocks",
        "_filename",
        "_loop_counter",
        "_pieces",
        "_settings",
        "_source",
        "_statements",
        "_token_dispatch",
    )

    def __init__(self, settings: Settings):
        self._settings = settings
        self._statements: list[Statement] = []
        self._pieces: list[Piece] = []
        self._blocks: list[tuple[str, Token]] = []
        self._loop_counter = 0
        self._filename: str | None = None
        self._source: str | None = None
        self._token_dispatch: dict[TokenType, Callable[[Token], None]] = {
            TokenType.TEXT: self._compile_text,
            TokenType.RAW: self._compile_raw,
            TokenType.INTERPOLATE: self._compile_interpolate,
            TokenType.CONDITIONAL: self._compile_conditional,
            TokenType.ITERATE: self._compile_iterate,
            TokenType.EVALUATE: self._compile_evaluate,
        }

    def generate(
        self,
        tokens: Sequence[Token],
        source: str | None = None,
        filename: str | None = None,
    ) -> list[Statement]:
        """Generate statements for a whole template.

        Args:
            tokens: Lexer output
            source: Resolved template text, for error snippets
            filename: Template name, for error messages

        Raises:
            TemplateSyntaxError: If conditional/iterate blocks are unbalanced
                or a raw literal cannot be decoded.
        """
        self._statements = []
        self._pieces = [Piece("")]
        self._blocks = []
        self._loop_counter = 0
        self._source = source
        self._filename = filename

        for token in tokens:
            self._token_dispatch[token.type](token)
        self._close_literal()

        if self._blocks:
            kind, token = self._blocks[-1]
            raise self._error(f"Unclosed {kind} block", token, ErrorCode.UNCLOSED_BLOCK)

        logger.debug("Generated %d statements from %d tokens", len(self._statements), len(tokens))
        return self._statements

    # ─────────────────────────────────────────────────────────────────────────
    # Literal runs
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def _depth(self) -> int:
        return len(self._blocks)

    def _close_literal(self) -> None:
        self._statements.append(Output(self._depth, tuple(self._pieces)))
        self._pieces = []

    def _open_literal(self) -> None:
        self._pieces = [Piece("")]

    def _emit(self, source: str, depth: int | None = None, opens_block: bool = False) -> None:
        depth = self._depth if depth is None else depth
        self._statements.append(Code(depth, source, opens_block))

    def _literal(self, text: str) -> None:
        self._pieces.append(Piece(escape_literal(text, self._settings.tstring)))

    # ─────────────────────────────────────────────────────────────────────────
    # Token handlers
    # ─────────────────────────────────────────────────────────────────────────

    def _compile_text(self, token: Token) -> None:
        self._literal(token.value)

    def _compile_raw(self, token: Token) -> None:
        content = token.groups[0]
        if not content:
            self._literal(self._settings.newline)
            return
        try:
            value = decode_raw(content)
        except (SyntaxError, ValueError) as e:
            raise self._error(
                f"Cannot decode raw literal {content!r}: {e}", token, ErrorCode.INVALID_RAW
            ) from e
        self._literal(value)

    def _compile_interpolate(self, token: Token) -> None:
        self._pieces.append(Piece(unescape_code(token.groups[0]), literal=False))

    def _compile_conditional(self, token: Token) -> None:
        else_flag, expression = token.groups[0], token.groups[1]
        expression = unescape_code(expression) if expression else ""
        self._close_literal()

        if else_flag:
            self._expect_open(
                _IF, token, "Else branch without an open conditional", ErrorCode.MISPLACED_BRANCH
            )
            keyword = f"elif {expression}:" if expression else "else:"
            self._emit(keyword, depth=self._depth - 1, opens_block=True)
        elif expression:
            self._emit(f"if {expression}:", opens_block=True)
            self._blocks.append((_IF, token))
        else:
            self._expect_open(
                _IF,
                token,
                "Conditional close without an open conditional",
                ErrorCode.UNEXPECTED_CLOSE,
            )
            self._blocks.pop()

        self._open_literal()

    def _compile_iterate(self, token: Token) -> None:
        iterable, element, index = token.groups[0], token.groups[1], token.groups[2]
        self._close_literal()

        if iterable:
            n = self._loop_counter
            self._loop_counter += 1
            seq, counter = f"_seq{n}", f"_i{n}"
            self._emit(f"{seq} = {unescape_code(iterable)}")
            self._emit(f"for {counter} in range(len({seq})):", opens_block=True)
            self._blocks.append((_FOR, token))
            self._emit(f"{element} = _wrap({seq}[{counter}])")
            if index:
                self._emit(f"{index} = {counter}")
        else:
            self._expect_open(
                _FOR, token, "Iterate close without an open iterate", ErrorCode.UNEXPECTED_CLOSE
            )
            self._blocks.pop()

        self._open_literal()

    def _compile_evaluate(self, token: Token) -> None:
        self._close_literal()
        for line in dedent_code(token.groups[0]):
            self._emit(line)
        self._open_literal()

    # ─────────────────────────────────────────────────────────────────────────
    # Block bookkeeping
    # ─────────────────────────────────────────────────────────────────────────

    def _expect_open(self, kind: str, token: Token, message: str, code: ErrorCode) -> None:
        if not self._blocks:
            raise self._error(message, token, code)
        open_kind, open_token = self._blocks[-1]
        if open_kind != kind:
            raise self._error(
                f"{token.value!r} belongs to a {kind} block but the innermost open block is the "
                f"{open_kind} opened on line {open_token.lineno}",
                token,
                ErrorCode.UNEXPECTED_CLOSE,
            )

    def _error(self, message: str, token: Token, code: ErrorCode) -> TemplateSyntaxError:
        return TemplateSyntaxError(
            message,
            lineno=token.lineno,
            filename=self._filename,
            source=self._source,
            code=code,
        )
