"""Embedded evaluator: the one place template-supplied code is executed.

Used by the definition resolver (define ``=`` values and use expressions are
evaluated while compiling) and by the instantiator (the finalized render
source is executed to obtain the function). Neither sandboxes anything:
templates are code, and compiling one runs it with full interpreter access.
"""

from __future__ import annotations

from types import CodeType
from typing import Any

from dottpl.exceptions import TemplateSyntaxError


def _syntax_error(e: SyntaxError, source: str, filename: str) -> TemplateSyntaxError:
    return TemplateSyntaxError(
        e.msg,
        lineno=e.lineno,
        filename=filename,
        source=source,
        col_offset=e.offset - 1 if e.offset else None,
    )


def _compile(source: str, filename: str, mode: str) -> CodeType:
    try:
        return compile(source, filename, mode)
    except SyntaxError as e:
        raise _syntax_error(e, source, filename) from e
    except (UnicodeEncodeError, ValueError) as e:
        # lone surrogates and null bytes cannot be compiled
        raise TemplateSyntaxError(str(e), filename=filename, source=source) from e


def evaluate(code: str, namespace: dict[str, Any], filename: str = "<definition>") -> Any:
    """Evaluate a single Python expression in ``namespace``.

    Raises:
        TemplateSyntaxError: If ``code`` is not a valid expression.
        Exception: Whatever the expression itself raises, unchanged.
    """
    code = code.strip()
    return eval(_compile(code, filename, "eval"), namespace)


def execute(source: str, namespace: dict[str, Any], filename: str = "<template>") -> dict[str, Any]:
    """Execute module-level ``source`` in ``namespace`` and return the namespace.

    Raises:
        TemplateSyntaxError: If ``source`` does not compile.
    """
    exec(_compile(source, filename, "exec"), namespace)
    return namespace
