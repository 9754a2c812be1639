"""Action registry and registration decorator."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Type, Union

import structlog

from ..errors import InvalidEntryError, UnknownActionError
from .base import Action


logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ClassEntry:
    """Instantiate a fresh action from its class."""

    action_class: Type[Action]


@dataclass(frozen=True)
class FactoryEntry:
    """Build an action by calling a factory with the registry."""

    factory: Callable[["ActionRegistry"], Action]


@dataclass(frozen=True)
class PrototypeEntry:
    """Duplicate a live action instance."""

    prototype: Action


RegistryEntry = Union[ClassEntry, FactoryEntry, PrototypeEntry]


# Classes registered through the decorator, used to seed new registries
_default_actions: Dict[str, Type[Action]] = {}


class ActionRegistry:
    """Registry mapping action names to creation strategies."""

    def __init__(self, defaults: bool = True) -> None:
        """Initialize the action registry.

        Args:
            defaults: Seed the registry with every decorated action class
        """
        self._entries: Dict[str, Any] = {}

        if defaults:
            for name, action_class in _default_actions.items():
                self._entries[name] = ClassEntry(action_class)

        logger.debug("Initialized ActionRegistry", actions=sorted(self._entries))

    def register(self, name: str, entry: RegistryEntry) -> "ActionRegistry":
        """Bind a name to a creation strategy, replacing any existing one.

        Args:
            name: Action name used in configuration
            entry: Class, factory or prototype entry

        Returns:
            The registry, for chaining
        """
        if name in self._entries:
            logger.warning("Overriding existing action", action=name)

        self._entries[name] = entry

        logger.debug("Registered action", action=name, entry=type(entry).__name__)
        return self

    def register_class(self, name: str, action_class: Type[Action]) -> "ActionRegistry":
        """Register an action class instantiated with no arguments."""
        return self.register(name, ClassEntry(action_class))

    def register_factory(
        self, name: str, factory: Callable[["ActionRegistry"], Action]
    ) -> "ActionRegistry":
        """Register a factory called with this registry."""
        return self.register(name, FactoryEntry(factory))

    def register_prototype(self, name: str, prototype: Action) -> "ActionRegistry":
        """Register an action instance that is duplicated on every resolve."""
        return self.register(name, PrototypeEntry(prototype))

    def has(self, name: str) -> bool:
        """Check whether an action is registered under ``name``."""
        return name in self._entries

    def resolve(self, name: str) -> Action:
        """Create a live action for ``name``.

        Args:
            name: Registered action name

        Returns:
            A new action instance

        Raises:
            UnknownActionError: If nothing is registered under ``name``
            InvalidEntryError: If the entry is not a recognised strategy
        """
        if name not in self._entries:
            raise UnknownActionError(name)

        entry = self._entries[name]

        if isinstance(entry, ClassEntry):
            return entry.action_class()
        elif isinstance(entry, FactoryEntry):
            return entry.factory(self)
        elif isinstance(entry, PrototypeEntry):
            return entry.prototype.duplicate()

        raise InvalidEntryError(name)

    def names(self) -> List[str]:
        """Return registered names in registration order."""
        return list(self._entries)

    def list_actions(self) -> List[Dict[str, str]]:
        """List all registered actions.

        Returns:
            List of action info dictionaries
        """
        actions = []
        for name, entry in self._entries.items():
            if isinstance(entry, ClassEntry):
                description = entry.action_class.description
            elif isinstance(entry, PrototypeEntry):
                description = entry.prototype.description
            else:
                description = ""
            actions.append(
                {"name": name, "strategy": type(entry).__name__, "description": description}
            )
        return actions

    def get_stats(self) -> Dict[str, Any]:
        """Get registry statistics.

        Returns:
            Dictionary with statistics
        """
        return {
            "registered_actions": len(self._entries),
            "action_names": list(self._entries.keys()),
        }


def register_action(action_name: str, description: str = "") -> Callable[[Type[Action]], Type[Action]]:
    """Decorator registering an action class as a default binding.

    Decorators may be stacked to register one class under several names.
    Registries created afterwards with ``defaults=True`` include the binding.

    Args:
        action_name: Name of the action
        description: Optional description

    Returns:
        Decorator function
    """
    def decorator(cls: Type[Action]) -> Type[Action]:
        # Only the innermost decorator names the class
        if "name" not in cls.__dict__:
            cls.name = action_name
        if "description" not in cls.__dict__:
            cls.description = description or f"Action handler for {action_name}"

        if action_name in _default_actions and _default_actions[action_name] is not cls:
            logger.warning("Overriding default action", action=action_name)

        _default_actions[action_name] = cls
        return cls

    return decorator


def default_actions() -> Dict[str, Type[Action]]:
    """Return a copy of the decorator-registered bindings."""
    return dict(_default_actions)
