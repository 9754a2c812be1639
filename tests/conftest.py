"""Pytest configuration and fixtures for sapwood tests."""

from typing import Any, Mapping
from unittest.mock import MagicMock

import pytest
import structlog

from sapwood.actions import Action, ActionRegistry
from sapwood.actions import registry as registry_module
from sapwood.compiler import TreeCompiler
from sapwood.config import EngineSettings
from sapwood.engine import Engine
from sapwood.services import EVALUATOR, PARSER, ServiceContainer


class RecordingAction(Action):
    """Leaf action that remembers every context it was executed with."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list = []

    def execute(self, context: Any) -> Any:
        self.calls.append(context)
        return self.name


class EchoAction(Action):
    """Returns the value of the expression under its own key."""

    name = "echo"

    def execute(self, context: Any) -> Any:
        return self.evaluate(self.config["echo"], context)


class SetAction(Action):
    """Assigns evaluated expressions to context variables."""

    name = "set"

    def execute(self, context: Any) -> None:
        for variable, expression in self.config["set"].items():
            context.set(variable, self.evaluate(expression, context))


class IfAction(Action):
    """Runs ``then`` or ``else`` depending on a condition expression."""

    name = "if"

    def configure(self, compiler: TreeCompiler, config: Mapping[str, Any]) -> None:
        super().configure(compiler, config)
        self.condition = config["if"]
        self.then = compiler.compile(config.get("then", []))
        self.otherwise = compiler.compile(config.get("else", []))

    def execute(self, context: Any) -> Any:
        if self.evaluate(self.condition, context):
            return self.then.execute(context)
        return self.otherwise.execute(context)


def named(name: str) -> type:
    """Create a RecordingAction subclass registered under ``name``."""
    return type(f"Recording_{name}", (RecordingAction,), {"name": name})


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo structlog configuration done by the command line entry point."""
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def restore_default_actions():
    """Drop actions that a test or plugin registered through the decorator."""
    saved = dict(registry_module._default_actions)
    yield
    registry_module._default_actions.clear()
    registry_module._default_actions.update(saved)


@pytest.fixture
def registry():
    """Provide a registry with the built-ins and a few test actions."""
    registry = ActionRegistry()
    for name in ("a", "b", "c"):
        registry.register_class(name, named(name))
    registry.register_class("echo", EchoAction)
    registry.register_class("set", SetAction)
    registry.register_class("if", IfAction)
    return registry


@pytest.fixture
def mock_parser():
    """Provide a parser stub turning text into a token list."""
    parser = MagicMock()
    parser.parse.side_effect = lambda text: text.split()
    return parser


@pytest.fixture
def mock_evaluator():
    """Provide an evaluator stub that always returns 2."""
    evaluator = MagicMock()
    evaluator.evaluate.return_value = 2
    return evaluator


@pytest.fixture
def services(mock_parser, mock_evaluator):
    """Provide a services container holding the stubs."""
    return ServiceContainer({PARSER: mock_parser, EVALUATOR: mock_evaluator})


@pytest.fixture
def compiler(registry, services):
    """Provide a TreeCompiler over the test registry."""
    return TreeCompiler(registry, services)


@pytest.fixture
def engine_settings():
    """Provide test engine settings."""
    return EngineSettings(
        log_level="DEBUG",
        log_format="plain",
        metrics_enabled=False,
    )


@pytest.fixture
def engine(engine_settings, registry):
    """Provide an Engine using the Jinja2 expression services."""
    return Engine(engine_settings, registry=registry)


@pytest.fixture
def sample_config():
    """Provide a nested configuration using the test actions."""
    return [
        {"set": {"total": "price * quantity"}},
        {
            "if": "total > 100",
            "then": [{"echo": "'large order: ' ~ total"}],
            "else": {"echo": "'small order'"},
        },
        "a",
    ]
