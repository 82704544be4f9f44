"""Definition resolver: compile-time snippets (``define``) and their uses.

Defines register a named snippet of template text; uses splice a snippet (or
any Python expression over the snippets) back into the template before the
lexer runs:

    {{##def.header:<h1>{{=it.title}}</h1>#}}
    {{#def.header}}

A colon define whose body starts with ``name:`` is parameterized. A use
passing an argument gets the body with every whole-word occurrence of the
parameter replaced by the argument text:

    {{##def.field:f:<td>{{=it.f}}</td>#}}
    {{#def.field:name}}{{#def.field:email}}

Each distinct (snippet, argument) pair is expanded once per compile call and
kept in the resolver's expansion cache; repeated uses read the cached text.

``def`` is a Python keyword, so ``def.name`` and ``def['name']`` in define and
use expressions are rebound to ``defs`` before evaluation. Unknown names on
``defs`` evaluate to None.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from typing import Any

from dottpl.evaluator import evaluate
from dottpl.exceptions import DefinitionError, TemplateError
from dottpl.settings import Settings

logger = logging.getLogger(__name__)

DEFS_NAME = "defs"
EXPANSIONS_NAME = "_expansions"

_DEF_PREFIX = "def."
_DEF_REFERENCE_RE = re.compile(
    r"""("(?:\\.|[^"\\])*"|'(?:\\.|[^'\\])*')|(?<![\w.])def(?=\s*[.\[])"""
)


@dataclass(frozen=True, slots=True)
class ParameterizedDefine:
    """A define with one formal parameter.

    Attributes:
        param: Formal parameter name
        text: Body text, with ``param`` still in it
    """

    param: str
    text: str

    def expand(self, argument: str) -> str:
        """Body with every whole-word occurrence of ``param`` replaced."""
        pattern = re.compile(rf"(?<![\w$]){re.escape(self.param)}(?![\w$])")
        return pattern.sub(lambda _: argument, self.text)

    def __str__(self) -> str:
        return self.text


class DefinitionsView:
    """Read access to a definitions mapping for define/use expressions.

    Attribute and item access return None for names that are not defined.
    """

    __slots__ = ("_definitions",)

    def __init__(self, definitions: Mapping[str, Any]):
        self._definitions = definitions

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__"):
            raise AttributeError(name)
        return self._view(self._definitions.get(name))

    def __getitem__(self, name: str) -> Any:
        return self._view(self._definitions.get(name))

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    @staticmethod
    def _view(value: Any) -> Any:
        if isinstance(value, Mapping):
            return DefinitionsView(value)
        return value


def rebind_def(code: str) -> str:
    """Rewrite ``def.x`` / ``def['x']`` references to the evaluation name.

    String literals are copied unchanged.
    """
    return _DEF_REFERENCE_RE.sub(lambda m: m.group(1) or DEFS_NAME, code)


class DefinitionResolver:
    """Resolve define and use directives for one compile call.

    Attributes:
        settings: Compile settings
        definitions: Snippet mapping, mutated in place by in-template defines
        expansions: Parameterized expansions keyed by (snippet name, argument)
    """

    __slots__ = ("definitions", "expansions", "settings")

    def __init__(self, settings: Settings, definitions: MutableMapping[str, Any] | None = None):
        self.settings = settings
        self.definitions: MutableMapping[str, Any] = {} if definitions is None else definitions
        self.expansions: dict[tuple[str, str], str] = {}

    @property
    def enabled(self) -> bool:
        return self.settings.define is not None or self.settings.use is not None

    def resolve(self, text: str) -> str:
        """Remove define directives and replace use directives in ``text``.

        Returns ``text`` unchanged when neither directive is configured.

        Raises:
            TemplateSyntaxError: If a define/use expression is not valid Python.
            DefinitionError: If evaluating a define/use expression raises.
        """
        if not self.enabled:
            return text
        if self.settings.define is not None:
            text = self.settings.define.sub(self._define, text)
        if self.settings.use is not None:
            text = self.settings.use.sub(self._use, text)
        return text

    def _namespace(self) -> dict[str, Any]:
        return {DEFS_NAME: DefinitionsView(self.definitions), EXPANSIONS_NAME: self.expansions}

    def _define(self, match: re.Match[str]) -> str:
        name, assign, value = match.group(1), match.group(2), match.group(3)
        if name.startswith(_DEF_PREFIX):
            name = name[len(_DEF_PREFIX) :]
        if name in self.definitions:
            return ""

        if assign == ":":
            params = self.settings.define_params
            found = params.search(value) if params is not None else None
            if found:
                self.definitions[name] = ParameterizedDefine(found.group(1), found.group(2))
            else:
                self.definitions[name] = value
        else:
            self.definitions[name] = self._evaluate(value, name=name)
        logger.debug("Defined %r", name)
        return ""

    def _use(self, match: re.Match[str]) -> str:
        code = match.group(1)
        if self.settings.use_params is not None:
            code = self.settings.use_params.sub(self._expand_call, code)

        value = self._evaluate(code)
        if value:
            return self.resolve(str(value))
        return "" if value is None else str(value)

    def _expand_call(self, match: re.Match[str]) -> str:
        prefix, name, argument = match.group(1), match.group(2), match.group(3)
        snippet = self.definitions.get(name)
        if not isinstance(snippet, ParameterizedDefine) or not argument:
            return match.group(0)

        key = (name, argument)
        if key not in self.expansions:
            self.expansions[key] = snippet.expand(argument)
            logger.debug("Expanded %r with argument %r", name, argument)
        return f"{prefix}{EXPANSIONS_NAME}[{key!r}]"

    def _evaluate(self, code: str, name: str | None = None) -> Any:
        try:
            return evaluate(rebind_def(code), self._namespace())
        except TemplateError:
            raise
        except Exception as e:
            raise DefinitionError(
                f"{type(e).__name__}: {e}", name=name, expression=code
            ) from e
