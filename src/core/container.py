"""
Service container for the reminder worker.

Collaborators are registered by name and built on first lookup, so a test
can swap any of them for a double before the engine is assembled.

Usage:
    from src.core.container import get_container

    container = get_container()
    container.register("engine", lambda c: ExecutionEngine(...))
    engine = container.get("engine")
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Union

logger = logging.getLogger(__name__)

# A class (called with no arguments) or a callable taking the container
Factory = Union[type, Callable[["ServiceContainer"], Any]]


@dataclass
class _Registration:
    factory: Optional[Factory]
    singleton: bool = True


class ServiceContainer:
    """Name -> factory registry; instances are cached unless registered transient."""

    def __init__(self) -> None:
        self._registrations: Dict[str, _Registration] = {}
        self._built: Dict[str, Any] = {}

    def register(self, name: str, factory: Factory, singleton: bool = True) -> None:
        """
        Register how to build ``name``.

        Args:
            name: Lookup key, usually a ``Services`` constant
            factory: A class, or a callable receiving this container so it
                     can resolve its own collaborators.
            singleton: Build once and reuse (default) or build per lookup.
        """
        self._registrations[name] = _Registration(factory, singleton)
        # A replaced factory must not be shadowed by an old instance
        self._built.pop(name, None)
        logger.debug("Registered %s (singleton=%s)", name, singleton)

    def register_instance(self, name: str, instance: Any) -> None:
        """Register an already built object, e.g. a test double."""
        self._registrations[name] = _Registration(None)
        self._built[name] = instance
        logger.debug("Registered instance %s", name)

    def get(self, name: str) -> Any:
        """
        Resolve ``name``, building it on first use.

        Raises:
            KeyError: nothing is registered under ``name``
        """
        registration = self._registrations.get(name)
        if registration is None:
            raise KeyError(f"Service '{name}' is not registered")

        if name in self._built:
            return self._built[name]

        factory = registration.factory
        built = factory() if isinstance(factory, type) else factory(self)
        if registration.singleton:
            self._built[name] = built
        return built

    def has(self, name: str) -> bool:
        return name in self._registrations

    def clear(self) -> None:
        """Forget every registration and cached instance."""
        self._registrations.clear()
        self._built.clear()
        logger.debug("Service container cleared")


_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """Process-wide container used by ``src.core.services``."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """Drop the process-wide container and start an empty one."""
    global _container
    if _container is not None:
        _container.clear()
    _container = ServiceContainer()
    logger.debug("Service container reset")
