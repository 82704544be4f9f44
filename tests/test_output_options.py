"""Raw literals and output options: strip, tstring, log, undefined."""

from __future__ import annotations

import logging

import pytest

from dottpl import ErrorCode, TemplateSyntaxError, compile_source, compile_template

from .conftest import assert_contains


class TestRaw:
    """{{! text }} emits decoded literal text."""

    def test_empty_raw_is_newline(self, render):
        assert render("a{{!}}b") == "a\nb"

    def test_configured_newline(self, render):
        assert render("a{{!}}b", newline="<br>") == "a<br>b"

    def test_escape_sequences(self, render):
        assert render("[{{!\\t}}]") == "[\t]"
        assert render("{{!a\\nb}}") == "a\nb"
        assert render("{{!\\u00e9}}") == "é"

    def test_quotes(self, render):
        assert render("{{!'single' \"double\"}}") == "'single' \"double\""

    def test_escaped_quote(self, render):
        assert render('{{!say \\"hi\\"}}') == 'say "hi"'

    def test_directive_text_is_not_interpreted(self, render):
        # raw content ends at the first "}}"
        assert render("{{!{{=it.x}}}}", {"x": 1}) == "{{=it.x}}"

    def test_undecodable(self):
        with pytest.raises(TemplateSyntaxError) as exc_info:
            compile_template("{{!\\}}")
        assert exc_info.value.code is ErrorCode.INVALID_RAW


class TestStrip:
    """strip=True collapses whitespace in literal text."""

    def test_collapses_indentation(self, render):
        text = "<p>\n    {{=it.x}}\n</p>"
        assert render(text, {"x": 1}, strip=True) == "<p> 1</p>"
        assert render(text, {"x": 1}) == "<p>\n    1\n</p>"

    def test_drops_comments(self, render):
        assert render("a/* note */b", strip=True) == "ab"

    def test_leading_and_trailing_spaces(self, render):
        assert render("  a\n    b  ", strip=True) == " a b "

    def test_expressions_untouched(self, render):
        assert render("{{= '  x  ' }}", strip=True) == "  x  "

    def test_spaces_next_to_directives_kept(self, render):
        text = "Hello   {{=it.name}}   there"
        assert render(text, {"name": "X"}, strip=True) == "Hello   X   there"

    def test_indentation_after_directive_collapses(self, render):
        assert render("{{=it.a}}\n   b", {"a": 1}, strip=True) == "1 b"

    def test_comment_around_directive_is_not_removed(self, render):
        text = "a/* {{=it.x}} */b"
        assert render(text, {"x": 1}, strip=True) == "a/* 1 */b"


class TestTstring:
    """tstring=True builds each literal run with one f-string."""

    TEMPLATES = [
        ("plain", None),
        ("{a} {{=it.x}} }", {"x": 1}),
        ("it's \\ {{=it.x}}\n\t!", {"x": "q"}),
        ("{{? it.x }}{{=it.x}}{{??}}-{{?}}", {"x": 0}),
        ("{{~ it.xs :x:i }}{{=i}}{{=x}}{{~}}", {"xs": "ab"}),
        ("{{= it['x'] }}{{!}}", {"x": "k"}),
    ]

    @pytest.mark.parametrize(("text", "data"), TEMPLATES)
    def test_same_output(self, render, text, data):
        assert render(text, data, tstring=True) == render(text, data)

    def test_braces_in_literal(self, render):
        assert render("{a} {{=it.x}} }", {"x": 1}, tstring=True) == "{a} 1 }"

    def test_generated_source(self):
        source = compile_source("<b>{{=it.x}}</b>", settings={"tstring": True})
        assert "_append(f'<b>{_str(it.x)}</b>')" in source


class TestLog:
    """The log setting receives generated source."""

    def test_callable_sink(self):
        received: list[str] = []
        compile_template("{{=it.x}}", {"log": received.append})
        assert len(received) == 1
        assert_contains(received[0], "def render(it):", "_append(_str(it.x))")

    def test_true_logs_at_info(self, caplog):
        with caplog.at_level(logging.INFO, logger="dottpl"):
            compile_template("hello", {"log": True})
        messages = [r.getMessage() for r in caplog.records if r.name == "dottpl.instantiator"]
        assert len(messages) == 1
        assert messages[0].startswith("Output: def render(it):")

    def test_disabled_by_default(self, caplog):
        with caplog.at_level(logging.INFO, logger="dottpl"):
            compile_template("hello")
        assert not [r for r in caplog.records if r.name == "dottpl.instantiator"]

    def test_sink_sees_source_before_syntax_error(self):
        received: list[str] = []
        with pytest.raises(TemplateSyntaxError):
            compile_template("{{= x + }}", {"log": received.append})
        assert "_str(x +)" in received[0]


class TestVarname:
    def test_custom_parameter_name(self, render):
        assert render("{{=data.x}}", {"x": 1}, varname="data") == "1"

    def test_generated_signature(self):
        assert compile_source("", settings={"varname": "ctx"}).startswith("def render(ctx):")

    def test_custom_function_name(self):
        assert compile_source("", name="page").startswith("def page(it):")
