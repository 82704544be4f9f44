"""Runtime helpers injected into the namespace of compiled render functions.

Generated code refers to these under underscore names (``_wrap`` and
``_stringify``). None of them hold compiler state, so a render
function is safe to call from several threads at once as long as each call
gets its own data.

Thread-Safety:
All helpers are stateless. ``DataView`` writes go straight to the mapping it
wraps; sharing one mapping across concurrent renders shares those writes.

"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, MutableMapping
from typing import Any


class Undefined:
    """Value of a data field that does not exist.

    Falsy, empty and iterable, so ``{{? it.missing }}`` takes the false branch
    and ``{{~ it.missing :x }}`` runs zero times. Rendered by interpolation as
    the configured ``undefined`` text.
    """

    __slots__ = ()

    _instance: Undefined | None = None

    def __new__(cls) -> Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __len__(self) -> int:
        return 0

    def __iter__(self) -> Iterator[Any]:
        return iter(())

    def __str__(self) -> str:
        return ""

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = Undefined()


class DataView:
    """Attribute-style view over a data mapping.

    ``it.name`` and ``it["name"]`` both read ``data["name"]``; a missing key
    gives ``UNDEFINED`` instead of raising. Assignments write through to the
    wrapped mapping, which is how ``{{ it.total = 3 }}`` reaches the caller.
    Nested mappings are wrapped on access.

    Example:
        >>> data = {}
        >>> view = DataView(data)
        >>> view.total = 3
        >>> data
        {'total': 3}
        >>> view.missing
        UNDEFINED
    """

    __slots__ = ("_data",)

    def __init__(self, data: MutableMapping[str, Any]):
        object.__setattr__(self, "_data", data)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__"):
            raise AttributeError(name)
        return wrap(self._data.get(name, UNDEFINED))

    def __setattr__(self, name: str, value: Any) -> None:
        self._data[name] = value

    def __delattr__(self, name: str) -> None:
        self._data.pop(name, None)

    def __getitem__(self, key: Any) -> Any:
        return wrap(self._data.get(key, UNDEFINED))

    def __setitem__(self, key: Any, value: Any) -> None:
        self._data[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[Any]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __bool__(self) -> bool:
        return bool(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DataView):
            other = other._data
        return self._data == other

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return str(self._data)

    def __repr__(self) -> str:
        return f"DataView({self._data!r})"


def wrap(value: Any) -> Any:
    """Wrap mappings in a DataView; return everything else unchanged."""
    if isinstance(value, Mapping) and not isinstance(value, DataView):
        if not isinstance(value, MutableMapping):
            value = dict(value)
        return DataView(value)
    return value


def stringify(undefined: str = "") -> Callable[[Any], str]:
    """Build the ``_str`` helper a render function uses for interpolation.

    Args:
        undefined: Text to produce for ``UNDEFINED``

    Returns:
        A function converting a value to its output text.
    """

    def _str(value: Any) -> str:
        if value is UNDEFINED:
            return undefined
        if isinstance(value, str):
            return value
        return str(value)

    return _str


# =============================================================================
# Shared Base Namespace
# =============================================================================
# Copied once per instantiation; read-only after module load.
# =============================================================================

STATIC_NAMESPACE: dict[str, Any] = {
    "_wrap": wrap,
    "_stringify": stringify,
}

# Header that makes a serialized render module import what STATIC_NAMESPACE
# provides during in-process instantiation.
MODULE_IMPORTS = (
    "from dottpl.runtime import stringify as _stringify\n"
    "from dottpl.runtime import wrap as _wrap\n"
)
