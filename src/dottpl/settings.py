"""Compile settings: directive syntax and code-generation switches.

A ``Settings`` record is frozen. Every compile call builds its own record by
merging caller overrides on top of the process-wide default, so nothing a
caller passes can leak into another call:

    >>> from dottpl import compile_template
    >>> fn = compile_template("<%= it.name %>", {"interpolate": r"<%=([\\s\\S]+?)%>"})
    >>> fn({"name": "Ada"})
    'Ada'

Every directive pattern may be given as a string, a compiled pattern, or
``None`` to switch the directive off. The group layout of each pattern is
part of its contract:

====================  ==========================================
field                 groups
====================  ==========================================
evaluate              (code)
interpolate           (expression)
raw                   (content)
use                   (expression)
use_params            (prefix, snippet name, argument)
define                (name, ``:`` or ``=``, value)
define_params         (parameter, body)
conditional           (else flag, expression)
iterate               (iterable, element name, index name)
====================  ==========================================
"""

from __future__ import annotations

import keyword
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields, replace
from typing import Any

PatternLike = str | re.Pattern[str] | None

PATTERN_FIELDS = (
    "evaluate",
    "interpolate",
    "raw",
    "use",
    "use_params",
    "define",
    "define_params",
    "conditional",
    "iterate",
)


@dataclass(frozen=True, slots=True)
class Settings:
    """Configuration for one compile call.

    Attributes:
        evaluate: Free-form Python block, ``{{ code }}``
        interpolate: Value output, ``{{= expr }}``
        raw: Literal text with escape sequences, ``{{! text }}``
        use: Snippet use, ``{{# def.name }}``
        use_params: Argument syntax inside a use, ``def.name:arg``
        define: Snippet definition, ``{{## def.name:body #}}``
        define_params: Parameter syntax inside a define body, ``param:body``
        conditional: ``{{? e }}`` / ``{{?? e }}`` / ``{{??}}`` / ``{{?}}``
        iterate: ``{{~ e :value:index }}`` / ``{{~}}``
        varname: Name of the render function's only parameter
        newline: Text emitted for an empty raw directive ``{{!}}``
        strip: Collapse whitespace and drop ``/* */`` comments in literal text
        tstring: Build output with f-strings instead of one append per piece
        log: False to disable, True to log the generated source, or a
            callable receiving it
        undefined: Text rendered for a missing data field
    """

    evaluate: PatternLike = r"\{\{([\s\S]+?\]*)\}\}"
    interpolate: PatternLike = r"\{\{=([\s\S]+?)\}\}"
    raw: PatternLike = r"\{\{!([\s\S]*?)\}\}"
    use: PatternLike = r"\{\{#([\s\S]+?)\}\}"
    use_params: PatternLike = (
        r"(^|[^\w])def(?:\.|\[[\'\"])([\w.]+)(?:[\'\"]\])?\s*:\s*"
        r"([\w.]+|\"[^\"]+\"|\'[^\']+\'|\{[^\}]+\})"
    )
    define: PatternLike = r"\{\{##\s*([\w.]+)\s*(:|=)([\s\S]+?)#\}\}"
    define_params: PatternLike = r"^\s*(\w+):([\s\S]+)"
    conditional: PatternLike = r"\{\{\?(\?)?\s*([\s\S]*?)\s*\}\}"
    iterate: PatternLike = r"\{\{~\s*(?:\}\}|([\s\S]+?)\s*:\s*(\w+)\s*(?::\s*(\w+))?\s*\}\})"
    varname: str = "it"
    newline: str = "\n"
    strip: bool = False
    tstring: bool = False
    log: bool | Callable[[str], Any] | None = False
    undefined: str = ""

    def __post_init__(self) -> None:
        for name in PATTERN_FIELDS:
            value = getattr(self, name)
            if isinstance(value, str):
                object.__setattr__(self, name, re.compile(value))
            elif value is not None and not isinstance(value, re.Pattern):
                raise TypeError(
                    f"Setting {name!r} must be a pattern string, a compiled pattern or None, "
                    f"got {type(value).__name__}"
                )
        if not self.varname.isidentifier() or keyword.iskeyword(self.varname):
            raise ValueError(f"varname must be a Python identifier, got {self.varname!r}")

    def pattern(self, name: str) -> re.Pattern[str] | None:
        """Compiled pattern for a directive, or None when it is disabled."""
        return getattr(self, name)

    def merge(self, overrides: Settings | Mapping[str, Any] | None) -> Settings:
        """Return a new record with ``overrides`` applied on top of this one.

        A ``Settings`` override replaces every field; a mapping replaces only
        the keys it names.

        Raises:
            TypeError: If a mapping names a field that does not exist.
        """
        if overrides is None:
            return self
        if isinstance(overrides, Settings):
            return overrides
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise TypeError(f"Unknown template setting(s): {', '.join(unknown)}")
        return replace(self, **overrides)


DEFAULT_SETTINGS = Settings()

_default_settings = DEFAULT_SETTINGS


def get_default_settings() -> Settings:
    """The record compile calls currently merge overrides onto."""
    return _default_settings


def set_default_settings(settings: Settings | Mapping[str, Any]) -> Settings:
    """Replace the process-wide default record and return the new one.

    A mapping is merged onto the built-in ``DEFAULT_SETTINGS``. No
    synchronization: compile calls racing with this see either record.
    """
    global _default_settings
    if not isinstance(settings, Settings):
        settings = DEFAULT_SETTINGS.merge(settings)
    _default_settings = settings
    return settings


def resolve_settings(overrides: Settings | Mapping[str, Any] | None = None) -> Settings:
    """Merge ``overrides`` onto the current default record."""
    return get_default_settings().merge(overrides)
