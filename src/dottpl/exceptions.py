"""Exceptions for the dottpl template compiler.

Exception Hierarchy:
TemplateError (base)
├── TemplateSyntaxError       # Invalid embedded code or unbalanced blocks
└── DefinitionError           # A define/use expression failed while resolving

Errors are raised while compiling, never while rendering. Exceptions raised
by a compiled render function (bad attribute access in the data, division by
zero in an ``{{ }}`` block, ...) propagate unchanged to its caller.

Example:
    ```
    D-SYN-001: invalid syntax
      --> <template>:7:14
       |
      7 |     _append(_str(foo + ))
       |              ^
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------


class ErrorCode(Enum):
    """Searchable error codes for dottpl compile errors.

    Format: D-{CATEGORY}-{NUMBER}
    Categories: SYN (generated or embedded code), BLK (block structure),
    RAW (raw literal), DEF (define/use resolution)
    """

    INVALID_CODE = "D-SYN-001"
    UNCLOSED_BLOCK = "D-BLK-001"
    UNEXPECTED_CLOSE = "D-BLK-002"
    MISPLACED_BRANCH = "D-BLK-003"
    INVALID_RAW = "D-RAW-001"
    DEFINITION_FAILED = "D-DEF-001"

    @property
    def category(self) -> str:
        """Error category (e.g., 'syntax', 'block', 'raw', 'definition')."""
        prefix = self.value.split("-")[1]
        return {
            "SYN": "syntax",
            "BLK": "block",
            "RAW": "raw",
            "DEF": "definition",
        }.get(prefix, "unknown")


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Source context around an error line.

    Attributes:
        lines: Tuple of (line_number, line_content) pairs around the error.
        error_line: The 1-based line number where the error occurred.
        column: Optional column offset for caret pointer.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        """Format snippet with line numbers, marking the error line."""
        parts: list[str] = ["   |"]
        for lineno, content in self.lines:
            marker = ">" if lineno == self.error_line else " "
            parts.append(f"{marker}{lineno:>3} | {content}")
            if lineno == self.error_line and self.column is not None:
                parts.append(f"     | {' ' * self.column}^")
        parts.append("   |")
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 2,
    column: int | None = None,
) -> SourceSnippet:
    """Build a SourceSnippet from source text.

    Args:
        source: Full source text (template or generated Python).
        error_line: 1-based line number of the error.
        context_lines: Number of lines to show before/after the error line.
        column: Optional column offset for caret pointer.
    """
    all_lines = source.splitlines()
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line, column=column)


class TemplateError(Exception):
    """Base exception for all dottpl errors.

        >>> try:
        ...     compile_template(text)
        ... except TemplateError as e:
        ...     log.error(e.format_compact())

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format error as a one-block diagnostic prefixed with its code."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        return header


class TemplateSyntaxError(TemplateError):
    """Invalid template structure or invalid embedded code.

    Raised when the generated render source does not compile, when a
    define/use expression is not valid Python, when a raw literal cannot be
    decoded, or when conditional/iterate blocks are unbalanced.

    When ``source`` and ``lineno`` are provided, the message includes a
    snippet of the offending line. ``source`` is whichever text the line
    number refers to: the template for block errors, the generated Python
    for code errors.
    """

    code: ErrorCode | None = ErrorCode.INVALID_CODE

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        filename: str | None = None,
        source: str | None = None,
        col_offset: int | None = None,
        *,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.lineno = lineno
        self.filename = filename
        self.source = source
        self.col_offset = col_offset
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        location = self.filename or "<template>"
        if self.lineno:
            location += f":{self.lineno}"
            if self.col_offset is not None:
                location += f":{self.col_offset}"

        header = f"Syntax Error: {self.message}\n  --> {location}"

        if self.source and self.lineno and 0 < self.lineno <= len(self.source.splitlines()):
            snippet = build_source_snippet(self.source, self.lineno, column=self.col_offset)
            return f"{header}\n{snippet.format()}"

        return header


class DefinitionError(TemplateError):
    """A define or use expression raised while it was being resolved.

    Attributes:
        name: Snippet name for define errors, None for use expressions.
        expression: The Python expression that failed.
    """

    code: ErrorCode | None = ErrorCode.DEFINITION_FAILED

    def __init__(self, message: str, *, name: str | None = None, expression: str | None = None):
        self.message = message
        self.name = name
        self.expression = expression
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [f"Definition Error: {self.message}"]
        if self.name:
            parts.append(f"  Define: {self.name}")
        if self.expression:
            parts.append(f"  Expression: {self.expression.strip()}")
        return "\n".join(parts)
