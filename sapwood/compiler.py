"""Compiles configuration data into a tree of actions."""

from typing import Any, List, Mapping, Optional

import structlog
from prometheus_client import Counter

from .actions.base import Action
from .actions.builtin import NullAction, SeriesAction
from .actions.registry import ActionRegistry
from .errors import InvalidConfigurationError, NoMatchingActionError
from .expressions.bridge import ExpressionBridge
from .services import Services

logger = structlog.get_logger(__name__)

# Prometheus metrics
ACTIONS_COMPILED = Counter(
    "sapwood_actions_compiled_total",
    "Total number of top-level compilation steps",
    ["action", "shape"],
)

COMPILE_ERRORS = Counter(
    "sapwood_compile_errors_total",
    "Total number of structural compilation failures",
    ["reason"],
)


def is_sequence(config: Any) -> bool:
    """Check whether a collection is an ordered, zero-based sequence.

    Lists and tuples always are. A mapping is one when its keys are exactly
    ``0..n-1`` in iteration order.
    """
    if isinstance(config, (list, tuple)):
        return True
    if isinstance(config, Mapping):
        return list(config.keys()) == list(range(len(config)))
    return False


class TreeCompiler:
    """Turns configuration into an executable action tree.

    Only the top-level shape is decided here. Composite actions compile
    their own nested configuration by calling ``compile`` again from
    ``configure``.
    """

    def __init__(
        self,
        registry: ActionRegistry,
        services: Services,
        bridge: Optional[ExpressionBridge] = None,
    ) -> None:
        """Initialize the compiler.

        Args:
            registry: Registry used to resolve action names
            services: Services handed to actions and the expression bridge
            bridge: Expression bridge, built from ``services`` when omitted
        """
        self.registry = registry
        self.services = services
        self.bridge = bridge or ExpressionBridge(services)

    def compile(self, config: Any) -> Action:
        """Create an action tree from configuration.

        Args:
            config: Action name, list of configurations, or mapping whose
                first key names an action

        Returns:
            Root action of the compiled tree

        Raises:
            UnknownActionError: If a bare name is not registered
            InvalidConfigurationError: If config is not a string or collection
            NoMatchingActionError: If a mapping's first key is not registered
            ConfigError: If an action rejects its configuration
        """
        # A bare name is an action without configuration
        if isinstance(config, str):
            if not config:
                return self._null()
            action = self.registry.resolve(config)
            action.configure(self, {})
            self._record(action, "name")
            return action

        if not isinstance(config, (list, tuple, Mapping)):
            COMPILE_ERRORS.labels(reason="invalid_configuration").inc()
            raise InvalidConfigurationError(config)

        if not len(config):
            return self._null()

        if is_sequence(config):
            children: List[Any] = (
                list(config.values()) if isinstance(config, Mapping) else list(config)
            )
            action = SeriesAction()
            action.configure(self, {"series": children})
            self._record(action, "sequence")
            return action

        # The first key of the mapping is the action
        key = next(iter(config))
        if isinstance(key, str) and self.registry.has(key):
            action = self.registry.resolve(key)
            action.configure(self, config)
            self._record(action, "mapping")
            return action

        COMPILE_ERRORS.labels(reason="no_matching_action").inc()
        logger.warning(
            "No action matches configuration",
            key=key,
            available_actions=self.registry.names(),
        )
        raise NoMatchingActionError(key)

    def evaluate(self, action: Action, expression: Any, context: Any) -> Any:
        """Evaluate an expression on behalf of ``action``.

        See ``ExpressionBridge.evaluate``.
        """
        return self.bridge.evaluate(action, expression, context)

    def _null(self) -> Action:
        action = NullAction()
        action.configure(self, {})
        self._record(action, "empty")
        return action

    def _record(self, action: Action, shape: str) -> None:
        name = action.name or type(action).__name__
        ACTIONS_COMPILED.labels(action=name, shape=shape).inc()
        logger.debug("Compiled action", action=name, shape=shape)
