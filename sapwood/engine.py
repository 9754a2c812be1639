"""Engine wiring settings, services, registry and compiler together."""

import importlib
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Type, Union

import structlog

from .actions.base import Action
from .actions.builtin import NullAction
from .actions.registry import ActionRegistry, default_actions
from .compiler import TreeCompiler
from .config import EngineSettings, load_config
from .context import Context
from .expressions.bridge import ExpressionBridge
from .expressions.jinja import JinjaEvaluator, JinjaParser
from .services import EVALUATOR, PARSER, ServiceContainer

logger = structlog.get_logger(__name__)


class Engine:
    """Entry point for building and running action trees."""

    def __init__(
        self,
        settings: Optional[EngineSettings] = None,
        services: Optional[ServiceContainer] = None,
        registry: Optional[ActionRegistry] = None,
    ) -> None:
        """Initialize the engine.

        Parser and evaluator services default to the Jinja2 adapter unless
        ``services`` already provides them. Actions declared by plugin modules
        are also bound into a supplied ``registry`` when it lacks their names.

        Args:
            settings: Engine settings, read from the environment when omitted
            services: Services container
            registry: Action registry, seeded with the default actions when omitted
        """
        self.settings = settings or EngineSettings()
        self.services = services if services is not None else ServiceContainer()

        if not self.services.has(PARSER):
            strict = self.settings.strict_undefined
            self.services.set_factory(PARSER, lambda _: JinjaParser(strict_undefined=strict))
        if not self.services.has(EVALUATOR):
            self.services.set_factory(EVALUATOR, lambda _: JinjaEvaluator())

        plugin_actions = self.import_plugins()

        if registry is None:
            registry = ActionRegistry()
        else:
            for name, action_class in plugin_actions.items():
                if not registry.has(name):
                    registry.register_class(name, action_class)

        self.registry = registry
        self.bridge = ExpressionBridge(self.services)
        self.compiler = TreeCompiler(self.registry, self.services, self.bridge)

        logger.debug(
            "Initialized Engine",
            actions=self.registry.names(),
            plugins=self.settings.plugins,
        )

    def import_plugins(self) -> Dict[str, Type[Action]]:
        """Import plugin modules so their decorated actions are registered.

        Returns:
            Decorated action classes defined by the plugin modules, by name
        """
        plugin_actions: Dict[str, Type[Action]] = {}
        for module in self.settings.plugins:
            importlib.import_module(module)
            for name, action_class in default_actions().items():
                origin = action_class.__module__
                if origin == module or origin.startswith(f"{module}."):
                    plugin_actions[name] = action_class
            logger.info("Loaded plugin", module=module)
        return plugin_actions

    def build(self, config: Any) -> Action:
        """Compile configuration into an action tree."""
        return self.compiler.compile(config)

    def load(self, path: Union[str, Path]) -> Action:
        """Read a configuration file and compile it.

        Args:
            path: YAML or JSON file

        Returns:
            Root action of the compiled tree
        """
        config = load_config(path)
        action = self.build(config)
        logger.info("Compiled configuration file", path=str(path), action=action.name)
        return action

    def run(
        self,
        config: Any,
        context: Optional[Union[Context, Mapping[str, Any]]] = None,
    ) -> Any:
        """Compile configuration and execute it.

        Args:
            config: Configuration value, or an already compiled action
            context: Runtime context, or a mapping of initial variables

        Returns:
            Result of the root action
        """
        action = config if isinstance(config, Action) else self.build(config)
        return action.execute(self._context(context))

    def evaluate(
        self,
        expression: Any,
        context: Optional[Union[Context, Mapping[str, Any]]] = None,
    ) -> Any:
        """Evaluate a standalone expression.

        Failures are reported as ``ExecutionError`` owned by a no-op action.
        """
        owner = NullAction()
        owner.configure(self.compiler, {})
        return self.bridge.evaluate(owner, expression, self._context(context))

    def _context(
        self, context: Optional[Union[Context, Mapping[str, Any]]]
    ) -> Context:
        if context is None:
            return Context()
        if isinstance(context, Context):
            return context
        return Context(dict(context))
