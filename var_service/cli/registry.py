"""Mode name → handler table for ``main.py``.

``var_service.cli.runtime`` tags each handler with ``@command``; importing
that module fills the table that ``dispatch`` reads by default.
"""

from __future__ import annotations

from typing import Any, Callable

_REGISTRY: dict[str, Any] = {}


def command(name: str) -> Callable:
    """Record the decorated handler as the one for mode ``name``."""

    def decorator(fn: Callable) -> Callable:
        _REGISTRY[name] = fn
        return fn

    return decorator


def get_registry() -> dict[str, Any]:
    return _REGISTRY
