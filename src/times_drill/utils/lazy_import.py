"""Deferred imports for optional storage drivers."""

from collections.abc import Callable
from functools import cache
from importlib import import_module

__all__ = [
    "lazy_import",
]


def lazy_import(
    module_name: str,
    attribute: str | None = None,
    *,
    install_hint: str | None = None,
) -> Callable[[], object]:
    """Return a loader that imports `module_name` on first call.

    The Redis driver is only needed once a connection is opened, so a
    session using the in-memory store never imports it.

    Args:
        module_name: Dotted module path
        attribute: Attribute to fetch from the module, if any
        install_hint: Appended to the ImportError when the module is missing

    Returns:
        Zero-argument loader; the result is cached after the first call
    """

    @cache
    def _load() -> object:
        try:
            module = import_module(module_name)
        except ImportError as e:
            if install_hint is None:
                raise
            raise ImportError(f"{module_name} is not available: {install_hint}") from e
        return getattr(module, attribute) if attribute else module

    return _load
