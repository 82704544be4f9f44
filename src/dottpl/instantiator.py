"""Instantiator: finalized render source to a callable.

The source is executed in a fresh copy of the runtime namespace, and the
function it defines is returned. The function keeps that namespace as its
globals and nothing else; it holds no reference to settings, definitions
or compiler objects.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from dottpl.evaluator import execute
from dottpl.runtime import STATIC_NAMESPACE
from dottpl.settings import Settings

logger = logging.getLogger(__name__)


def emit_source(source: str, settings: Settings) -> None:
    """Deliver generated source to the configured ``log`` sink, if any."""
    sink = settings.log
    if not sink:
        return
    if callable(sink):
        sink(source)
    else:
        logger.info("Output: %s", source)


def instantiate(
    source: str,
    settings: Settings,
    name: str = "render",
    filename: str = "<template>",
) -> Callable[[Any], str]:
    """Execute finalized source and return the render function it defines.

    Args:
        source: Output of ``finalize``
        settings: Compile settings (only ``log`` is read)
        name: Function name the source defines
        filename: Name shown in tracebacks and syntax errors

    Raises:
        TemplateSyntaxError: If the source does not compile.
    """
    emit_source(source, settings)
    namespace: dict[str, Any] = STATIC_NAMESPACE.copy()
    execute(source, namespace, filename)
    return namespace[name]
