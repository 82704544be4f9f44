"""Source finalizer: wrap render-body statements into a function definition.

Produces the complete source of one render function:

    ```python
    def render(it):
        it = _wrap(it)
        _str = _stringify('')
        _out = []
        _append = _out.append
        ...body...
        return ''.join(_out)
    ```

On the way it escapes control characters left in literal text (a raw line
break would end the literal), drops the empty literal runs the generator
leaves at every control-directive boundary, and puts ``pass`` into any block
whose body ended up empty.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from dottpl.compiler.statements import Code, Output, Piece, Statement
from dottpl.settings import Settings

logger = logging.getLogger(__name__)

INDENT = "    "

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f\ud800-\udfff]")
_NAMED_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t"}


def _code_point_escape(char: str) -> str:
    code_point = ord(char)
    return f"\\x{code_point:02x}" if code_point < 0x100 else f"\\u{code_point:04x}"


def escape_control(text: str) -> str:
    """Escape line breaks, tabs, other control characters and lone surrogates."""
    return _CONTROL_CHARS_RE.sub(
        lambda m: _NAMED_ESCAPES.get(m.group(0)) or _code_point_escape(m.group(0)), text
    )


def prune_pieces(pieces: Sequence[Piece]) -> tuple[Piece, ...]:
    """Drop empty literal pieces and merge neighbouring literals."""
    out: list[Piece] = []
    for piece in pieces:
        if piece.literal:
            if not piece.value:
                continue
            if out and out[-1].literal:
                out[-1] = Piece(out[-1].value + piece.value)
                continue
        out.append(piece)
    return tuple(out)


def _render_output(pieces: Sequence[Piece], tstring: bool) -> list[str]:
    if not pieces:
        return []
    if tstring:
        parts = [
            escape_control(p.value) if p.literal else f"{{_str({p.value})}}" for p in pieces
        ]
        return [f"_append(f'{''.join(parts)}')"]
    return [
        f"_append('{escape_control(p.value)}')" if p.literal else f"_append(_str({p.value}))"
        for p in pieces
    ]


def _body_lines(statements: Sequence[Statement], tstring: bool) -> list[tuple[int, str, bool]]:
    """Render statements to (depth, line, opens_block), without dead appends."""
    lines: list[tuple[int, str, bool]] = []
    for statement in statements:
        if isinstance(statement, Output):
            pieces = prune_pieces(statement.pieces)
            lines.extend((statement.depth, line, False) for line in _render_output(pieces, tstring))
        elif isinstance(statement, Code):
            lines.append((statement.depth, statement.source, statement.opens_block))
    return lines


def _fill_empty_blocks(lines: list[tuple[int, str, bool]]) -> list[tuple[int, str, bool]]:
    out: list[tuple[int, str, bool]] = []
    for i, (depth, line, opens) in enumerate(lines):
        out.append((depth, line, opens))
        if opens and (i + 1 == len(lines) or lines[i + 1][0] <= depth):
            out.append((depth + 1, "pass", False))
    return out


def finalize(statements: Sequence[Statement], settings: Settings, name: str = "render") -> str:
    """Compose the full source of a render function.

    Args:
        statements: Generator output
        settings: Compile settings (``varname``, ``undefined``, ``tstring``)
        name: Name of the generated function

    Returns:
        Python source defining ``name`` as a one-argument function.
    """
    varname = settings.varname
    body = _fill_empty_blocks(_body_lines(statements, settings.tstring))

    lines = [
        f"def {name}({varname}):",
        f"{INDENT}{varname} = _wrap({varname})",
        f"{INDENT}_str = _stringify({settings.undefined!r})",
        f"{INDENT}_out = []",
        f"{INDENT}_append = _out.append",
    ]
    lines.extend(f"{INDENT * (depth + 1)}{line}" for depth, line, _ in body)
    lines.append(f"{INDENT}return ''.join(_out)")

    logger.debug("Finalized %s: %d body lines", name, len(body))
    return "\n".join(lines) + "\n"
