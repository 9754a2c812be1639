"""Sapwood - compile declarative configuration into executable action trees."""

from .actions import (
    Action,
    ActionRegistry,
    ClassEntry,
    FactoryEntry,
    NullAction,
    PrototypeEntry,
    SeriesAction,
    register_action,
)
from .compiler import TreeCompiler
from .context import Context
from .engine import Engine
from .errors import (
    ActionFactoryError,
    ConfigError,
    ConfigurationFileError,
    ExecutionError,
    InvalidConfigurationError,
    InvalidEntryError,
    NoMatchingActionError,
    SapwoodError,
    ServiceNotFoundError,
    UnknownActionError,
)
from .expressions import ExpressionBridge
from .services import EVALUATOR, PARSER, ServiceContainer

__version__ = "0.1.0"

__all__ = [
    "Action",
    "ActionRegistry",
    "ClassEntry",
    "FactoryEntry",
    "PrototypeEntry",
    "NullAction",
    "SeriesAction",
    "register_action",
    "TreeCompiler",
    "Context",
    "Engine",
    "ExpressionBridge",
    "ServiceContainer",
    "PARSER",
    "EVALUATOR",
    "SapwoodError",
    "ActionFactoryError",
    "UnknownActionError",
    "InvalidEntryError",
    "InvalidConfigurationError",
    "NoMatchingActionError",
    "ConfigError",
    "ExecutionError",
    "ServiceNotFoundError",
    "ConfigurationFileError",
]
