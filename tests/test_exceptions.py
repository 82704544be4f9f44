"""Error codes, messages and source snippets."""

from __future__ import annotations

import pytest

from dottpl import (
    DefinitionError,
    ErrorCode,
    TemplateError,
    TemplateSyntaxError,
    build_source_snippet,
    compile_template,
)


class TestErrorCode:
    @pytest.mark.parametrize(
        ("code", "category"),
        [
            (ErrorCode.INVALID_CODE, "syntax"),
            (ErrorCode.UNCLOSED_BLOCK, "block"),
            (ErrorCode.UNEXPECTED_CLOSE, "block"),
            (ErrorCode.MISPLACED_BRANCH, "block"),
            (ErrorCode.INVALID_RAW, "raw"),
            (ErrorCode.DEFINITION_FAILED, "definition"),
        ],
    )
    def test_category(self, code, category):
        assert code.category == category

    def test_values_unique(self):
        values = [code.value for code in ErrorCode]
        assert len(values) == len(set(values))
        assert all(value.startswith("D-") for value in values)


class TestHierarchy:
    def test_subclasses(self):
        assert issubclass(TemplateSyntaxError, TemplateError)
        assert issubclass(DefinitionError, TemplateError)

    def test_catch_all(self):
        with pytest.raises(TemplateError):
            compile_template("{{?}}")
        with pytest.raises(TemplateError):
            compile_template("{{##def.x=undefined_name#}}")


class TestTemplateSyntaxError:
    def test_default_code(self):
        assert TemplateSyntaxError("bad").code is ErrorCode.INVALID_CODE

    def test_message_without_source(self):
        error = TemplateSyntaxError("bad thing", lineno=3, filename="x.dot")
        assert str(error) == "Syntax Error: bad thing\n  --> x.dot:3"

    def test_message_with_snippet(self):
        source = "one\ntwo\nthree\nfour"
        error = TemplateSyntaxError("oops", lineno=3, source=source, col_offset=2)
        message = str(error)
        assert "<template>:3:2" in message
        assert ">  3 | three" in message
        assert "     |   ^" in message

    def test_line_out_of_range_skips_snippet(self):
        error = TemplateSyntaxError("oops", lineno=10, source="only line")
        assert "|" not in str(error)

    def test_format_compact(self):
        error = TemplateSyntaxError("bad", code=ErrorCode.UNCLOSED_BLOCK)
        assert error.format_compact().startswith("D-BLK-001: Syntax Error: bad")

    def test_compile_error_points_at_generated_line(self):
        with pytest.raises(TemplateSyntaxError) as exc_info:
            compile_template("a\n{{= it.x + }}", filename="page.dot")
        error = exc_info.value
        assert error.filename == "page.dot"
        assert error.source.splitlines()[error.lineno - 1].strip() == "_append(_str(it.x +))"


class TestDefinitionError:
    def test_message(self):
        error = DefinitionError("NameError: x", name="d", expression=" x + 1 ")
        assert str(error) == "Definition Error: NameError: x\n  Define: d\n  Expression: x + 1"

    def test_use_expression_failure(self):
        with pytest.raises(DefinitionError) as exc_info:
            compile_template("{{#def.x.missing_method()}}")
        assert exc_info.value.name is None
        assert isinstance(exc_info.value.__cause__, AttributeError)


class TestSourceSnippet:
    def test_context_window(self):
        source = "\n".join(f"line {i}" for i in range(1, 11))
        snippet = build_source_snippet(source, 5, context_lines=1)
        assert snippet.lines == ((4, "line 4"), (5, "line 5"), (6, "line 6"))
        assert snippet.error_line == 5

    def test_clamped_at_edges(self):
        snippet = build_source_snippet("a\nb", 1)
        assert snippet.lines == ((1, "a"), (2, "b"))

    def test_format(self):
        formatted = build_source_snippet("a\nb", 2, column=0).format()
        assert formatted.splitlines() == ["   |", "   1 | a", ">  2 | b", "     | ^", "   |"]
