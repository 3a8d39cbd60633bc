"""
Dependency container

Holds the long-lived services of one application instance (the storage
index) and tears them down in reverse creation order on shutdown.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DependencyNotFoundError(LookupError):
    """Raised when resolving a type nobody registered."""


class DependencyContainer:
    """
    Registry of services keyed by type.

    Services are either given ready-made (``register_instance``) or built
    on first use by a factory (``register_factory``); either way one
    instance is shared by every caller. Anything with a ``close()`` method
    is closed by ``shutdown()``.
    """

    def __init__(self):
        self._instances: Dict[Type, Any] = {}
        self._factories: Dict[Type, Callable[[], Any]] = {}
        self._overrides: Dict[Type, Any] = {}
        self._created: List[Any] = []
        self._lock = threading.RLock()

    def register_instance(self, interface: Type[T], instance: T) -> None:
        with self._lock:
            self._instances[interface] = instance
            self._created.append(instance)
        logger.debug(f"Registered {interface.__name__} instance")

    def register_factory(self, interface: Type[T], factory: Callable[[], T]) -> None:
        """
        Register a builder called on the first resolve().

        The factory may resolve other services; a failing factory is
        retried on the next resolve().
        """
        with self._lock:
            self._factories[interface] = factory
        logger.debug(f"Registered {interface.__name__} factory")

    def resolve(self, interface: Type[T]) -> T:
        """
        Get the service registered for a type.

        Raises:
            DependencyNotFoundError: If the type is not registered
        """
        with self._lock:
            if interface in self._overrides:
                return self._overrides[interface]
            if interface in self._instances:
                return self._instances[interface]
            if interface not in self._factories:
                raise DependencyNotFoundError(
                    f"No registration found for type: {interface.__name__}"
                )

            instance = self._factories[interface]()
            self._instances[interface] = instance
            self._created.append(instance)
            return instance

    def is_registered(self, interface: Type) -> bool:
        with self._lock:
            return any(
                interface in registry
                for registry in (self._overrides, self._instances, self._factories)
            )

    @contextmanager
    def overridden(self, interface: Type[T], replacement: T) -> Iterator[T]:
        """Temporarily answer resolve(interface) with ``replacement``."""
        with self._lock:
            self._overrides[interface] = replacement
        try:
            yield replacement
        finally:
            with self._lock:
                self._overrides.pop(interface, None)

    def shutdown(self) -> None:
        """
        Close every service that exposes ``close()``, newest first.

        Each service is closed at most once; failures are logged and the
        remaining services are still closed.
        """
        with self._lock:
            created, self._created = self._created, []

        for service in reversed(created):
            close = getattr(service, "close", None)
            if not callable(close):
                continue
            try:
                close()
            except Exception as e:
                logger.warning(f"Failed to close {type(service).__name__}: {e}")
