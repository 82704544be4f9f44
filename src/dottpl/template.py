"""Compile entrypoints: template text to render function.

Pipeline:
    resolve defines/uses → tokenize → generate statements → finalize → instantiate

Each call merges its settings overrides onto the current default record and
owns its own expansion cache. The only state that outlives a call is the
definitions mapping, and only when the caller passes one in.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, MutableMapping
from typing import Any

from dottpl.compiler import CodeGenerator, finalize
from dottpl.instantiator import instantiate
from dottpl.lexer import tokenize
from dottpl.resolver import DefinitionResolver
from dottpl.settings import Settings, resolve_settings

logger = logging.getLogger(__name__)

SettingsOverride = Settings | Mapping[str, Any] | None


def _generate(
    text: str,
    defs: MutableMapping[str, Any] | None,
    settings: Settings,
    name: str,
    filename: str | None,
) -> str:
    resolved = DefinitionResolver(settings, defs).resolve(text)
    tokens = tokenize(resolved, settings)
    statements = CodeGenerator(settings).generate(tokens, source=resolved, filename=filename)
    return finalize(statements, settings, name=name)


def compile_source(
    text: str,
    defs: MutableMapping[str, Any] | None = None,
    settings: SettingsOverride = None,
    *,
    name: str = "render",
    filename: str | None = None,
) -> str:
    """Generate the Python source of a render function without running it.

    Args:
        text: Template text
        defs: Snippet definitions; in-template defines are added to it
        settings: Overrides merged onto the default settings
        name: Name of the generated function
        filename: Template name for error messages

    Example:
        >>> print(compile_source("Hi {{=it.name}}"))
        def render(it):
            it = _wrap(it)
            _str = _stringify('')
            _out = []
            _append = _out.append
            _append('Hi ')
            _append(_str(it.name))
            return ''.join(_out)
    """
    return _generate(text, defs, resolve_settings(settings), name, filename)


def compile_template_with_defs(
    text: str,
    defs: MutableMapping[str, Any] | None = None,
    settings: SettingsOverride = None,
    *,
    filename: str | None = None,
) -> Callable[[Any], str]:
    """Compile ``text`` into a render function, using and extending ``defs``.

    Args:
        text: Template text
        defs: Snippet definitions; in-template defines are added to it.
            A fresh mapping is used when omitted.
        settings: Overrides merged onto the default settings
        filename: Template name for error messages and tracebacks

    Returns:
        A function taking one data argument and returning the rendered text.

    Raises:
        TemplateSyntaxError: Invalid embedded code or block structure.
        DefinitionError: A define/use expression raised while resolving.
    """
    resolved_settings = resolve_settings(settings)
    source = _generate(text, defs, resolved_settings, "render", filename)
    logger.debug("Compiled %s (%d chars of source)", filename or "<template>", len(source))
    return instantiate(source, resolved_settings, "render", filename or "<template>")


def compile_template(
    text: str,
    settings: SettingsOverride = None,
    *,
    filename: str | None = None,
) -> Callable[[Any], str]:
    """Compile ``text`` with no predefined snippets.

    Example:
        >>> render = compile_template("{{=it.one}}{{=it.two}}")
        >>> render({"one": 1, "two": 2})
        '12'
    """
    return compile_template_with_defs(text, None, settings, filename=filename)
