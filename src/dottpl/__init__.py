"""dottpl: compile doT-style templates into Python render functions.

A template is literal text interleaved with ``{{ }}`` directives whose
embedded code is plain Python. Compiling it produces an ordinary function
of one argument (the data, bound to ``it``) returning a string.

Quickstart:
    >>> from dottpl import compile_template
    >>> render = compile_template("Hello, {{=it.name}}!")
    >>> render({"name": "World"})
    'Hello, World!'

Directives (default syntax):
    ``{{= expr }}``                 interpolate a value
    ``{{ code }}``                  run Python statements
    ``{{! text }}`` / ``{{!}}``     literal text with escapes / a newline
    ``{{? e }}`` ``{{?? e }}`` ``{{??}}`` ``{{?}}``   if / elif / else / end
    ``{{~ e :value:index }}`` ``{{~}}``              loop / end
    ``{{## def.name:body #}}``      define a compile-time snippet
    ``{{# def.name }}``             use a snippet (``def.name:arg`` for parameters)

Architecture:
Template Text → Resolver → Lexer → CodeGenerator → Finalizer → exec()

Pipeline stages:
1. **Resolver**: Expands define/use snippets at compile time
2. **Lexer**: Splits text into a flat instruction sequence
3. **CodeGenerator**: Emits render-body statements per instruction
4. **Finalizer**: Wraps the body into ``def render(it): ...`` source
5. **Instantiator**: Executes the source, returns the function

Missing data fields render as the ``undefined`` setting (empty by default)
instead of raising. Invalid embedded code raises ``TemplateSyntaxError``
when the template is compiled; no callable is returned.

Thread-Safety:
Compiled functions hold no compiler state and may be called concurrently.
The default settings record is immutable; ``set_default_settings`` swaps it
without locking.

"""

from dottpl.exceptions import (
    DefinitionError,
    ErrorCode,
    SourceSnippet,
    TemplateError,
    TemplateSyntaxError,
    build_source_snippet,
)
from dottpl.resolver import ParameterizedDefine
from dottpl.runtime import UNDEFINED, DataView
from dottpl.settings import (
    DEFAULT_SETTINGS,
    Settings,
    get_default_settings,
    resolve_settings,
    set_default_settings,
)
from dottpl.template import compile_source, compile_template, compile_template_with_defs

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_SETTINGS",
    "UNDEFINED",
    "DataView",
    "DefinitionError",
    "ErrorCode",
    "ParameterizedDefine",
    "Settings",
    "SourceSnippet",
    "TemplateError",
    "TemplateSyntaxError",
    "__version__",
    "build_source_snippet",
    "compile_source",
    "compile_template",
    "compile_template_with_defs",
    "get_default_settings",
    "resolve_settings",
    "set_default_settings",
]
