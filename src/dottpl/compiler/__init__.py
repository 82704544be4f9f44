"""dottpl compiler: token stream to render-function source.

- core: CodeGenerator, directive semantics and literal escaping
- statements: Output/Code records between generator and finalizer
- finalizer: function header/footer, control-character escaping, dead-append removal
"""

from __future__ import annotations

from dottpl.compiler.core import CodeGenerator, decode_raw, escape_literal, unescape_code
from dottpl.compiler.finalizer import finalize
from dottpl.compiler.statements import Code, Output, Piece, Statement

__all__ = [
    "Code",
    "CodeGenerator",
    "Output",
    "Piece",
    "Statement",
    "decode_raw",
    "escape_literal",
    "finalize",
    "unescape_code",
]
