"""Instantiators: build listener instances from identifier strings."""

from __future__ import annotations

import importlib
import threading
from typing import Any, Protocol

from cachetools import LRUCache
from loguru import logger

from mediator.core.errors import ProviderDefinitionError


class Instantiator(Protocol):
    """Resolves an identifier into a (callable) instance."""

    def resolve(self, identifier: str) -> object:
        """Build an instance for identifier; raise ProviderDefinitionError on failure."""
        ...


def _split_identifier(identifier: str) -> tuple[str, str]:
    """Split 'pkg.mod:Attr' or 'pkg.mod.Attr' into (module, attribute path)."""
    if ":" in identifier:
        module_name, _, attr_path = identifier.partition(":")
    else:
        module_name, _, attr_path = identifier.rpartition(".")
    if not module_name or not attr_path:
        raise ProviderDefinitionError(
            f"Identifier {identifier!r} must look like 'package.module:Name' or 'package.module.Name'",
            code="malformed_identifier",
            details={"identifier": identifier},
        )
    return module_name, attr_path


class ImportInstantiator:
    """Instantiator that imports the named factory and calls it.

    Factories are classes or functions addressed by import path. Arguments for a
    factory can be registered with define(); a pre-built instance can be
    registered with share(), in which case resolve() returns it as-is.
    The factory cache is guarded by a lock, so one instance can serve a mediator
    shared between threads.
    """

    def __init__(self, *, cache_size: int = 256) -> None:
        self._factories: LRUCache[str, Any] = LRUCache(maxsize=cache_size)
        self._cache_lock = threading.Lock()
        self._definitions: dict[str, tuple[tuple[Any, ...], dict[str, Any]]] = {}
        self._shared: dict[str, object] = {}

    def define(self, identifier: str, *args: Any, **kwargs: Any) -> None:
        """Register constructor arguments used when identifier is resolved."""
        self._definitions[identifier] = (args, kwargs)

    def share(self, identifier: str, instance: object) -> None:
        """Register an instance returned for every resolve(identifier)."""
        self._shared[identifier] = instance

    def _load_factory(self, identifier: str) -> Any:
        with self._cache_lock:
            cached = self._factories.get(identifier)
        if cached is not None:
            return cached

        module_name, attr_path = _split_identifier(identifier)
        try:
            obj: Any = importlib.import_module(module_name)
        except ImportError as exc:
            raise ProviderDefinitionError(
                f"Cannot import module {module_name!r} for {identifier!r}: {exc}",
                code="import_failed",
                details={"identifier": identifier, "module": module_name},
                original_error=exc,
            ) from exc

        for part in attr_path.split("."):
            try:
                obj = getattr(obj, part)
            except AttributeError as exc:
                raise ProviderDefinitionError(
                    f"{module_name!r} has no attribute path {attr_path!r}",
                    code="missing_attribute",
                    details={"identifier": identifier, "module": module_name},
                    original_error=exc,
                ) from exc

        if not callable(obj):
            raise ProviderDefinitionError(
                f"{identifier!r} does not name a class or factory",
                code="not_a_factory",
                details={"identifier": identifier},
            )
        with self._cache_lock:
            self._factories[identifier] = obj
        return obj

    def resolve(self, identifier: str) -> object:
        """Build a fresh instance for identifier (shared instances are returned as-is)."""
        if identifier in self._shared:
            return self._shared[identifier]

        factory = self._load_factory(identifier)
        args, kwargs = self._definitions.get(identifier, ((), {}))
        try:
            instance = factory(*args, **kwargs)
        except Exception as exc:
            raise ProviderDefinitionError(
                f"Constructing {identifier!r} failed: {exc}",
                code="construction_failed",
                details={"identifier": identifier},
                original_error=exc,
            ) from exc

        logger.debug("Instantiated {} for {}", type(instance).__name__, identifier)
        return instance
