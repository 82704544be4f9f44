"""Statement records passed from the code generator to the finalizer.

A render body is a flat list of statements, each carrying the block depth it
belongs to. ``Output`` is one literal run: the pieces between two control
directives. ``Code`` is any other line of Python.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Piece:
    """Part of an output run.

    Attributes:
        value: Quote-escaped literal text, or a Python expression
        literal: True for literal text, False for an interpolated expression
    """

    value: str
    literal: bool = True


@dataclass(frozen=True, slots=True)
class Output:
    """Append a literal run to the output accumulator."""

    depth: int
    pieces: tuple[Piece, ...]


@dataclass(frozen=True, slots=True)
class Code:
    """One line of Python; ``opens_block`` marks lines ending in ``:``."""

    depth: int
    source: str
    opens_block: bool = False


Statement = Output | Code
