"""Services container used to look up expression capabilities."""

from typing import Any, Callable, Dict, Optional, Protocol, runtime_checkable

import structlog

from .errors import ServiceNotFoundError

logger = structlog.get_logger(__name__)

# Well-known service keys
PARSER = "sapwood.parser"
EVALUATOR = "sapwood.evaluator"


@runtime_checkable
class Services(Protocol):
    """Anything that resolves capabilities by key."""

    def get(self, key: str) -> Any:
        ...

    def has(self, key: str) -> bool:
        ...


@runtime_checkable
class Parser(Protocol):
    """Turns expression source text into a token sequence."""

    def parse(self, text: str) -> Any:
        ...


@runtime_checkable
class Evaluator(Protocol):
    """Evaluates a token sequence against a runtime context."""

    def evaluate(self, tokens: Any, context: Any) -> Any:
        ...


class ServiceContainer:
    """Simple key based container holding instances or lazy factories."""

    def __init__(self, services: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the container.

        Args:
            services: Optional initial mapping of key to service instance
        """
        self._services: Dict[str, Any] = dict(services or {})
        self._factories: Dict[str, Callable[["ServiceContainer"], Any]] = {}

    def set(self, key: str, service: Any) -> "ServiceContainer":
        """Register a service instance under ``key``."""
        self._factories.pop(key, None)
        self._services[key] = service
        return self

    def set_factory(
        self, key: str, factory: Callable[["ServiceContainer"], Any]
    ) -> "ServiceContainer":
        """Register a factory that builds the service on first lookup.

        Args:
            key: Service key
            factory: Callable receiving this container

        Returns:
            The container, for chaining
        """
        self._services.pop(key, None)
        self._factories[key] = factory
        return self

    def has(self, key: str) -> bool:
        """Check whether a service or factory is registered for ``key``."""
        return key in self._services or key in self._factories

    def get(self, key: str) -> Any:
        """Look up a service.

        Args:
            key: Service key

        Returns:
            The registered service

        Raises:
            ServiceNotFoundError: If nothing is registered for ``key``
        """
        if key in self._services:
            return self._services[key]

        factory = self._factories.get(key)
        if factory is None:
            raise ServiceNotFoundError(key)

        service = factory(self)
        self._services[key] = service
        del self._factories[key]

        logger.debug("Created service from factory", service=key)
        return service
