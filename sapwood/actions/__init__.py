"""Action nodes and the registry that creates them."""

from .base import Action
from .registry import (
    ActionRegistry,
    ClassEntry,
    FactoryEntry,
    PrototypeEntry,
    RegistryEntry,
    register_action,
)
from .builtin import NullAction, SeriesAction

__all__ = [
    "Action",
    "ActionRegistry",
    "ClassEntry",
    "FactoryEntry",
    "PrototypeEntry",
    "RegistryEntry",
    "register_action",
    "NullAction",
    "SeriesAction",
]
