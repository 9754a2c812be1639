"""Base class for executable action nodes."""

import copy
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Type

import structlog
from pydantic import BaseModel, ValidationError

from ..errors import ConfigError, ExecutionError

if TYPE_CHECKING:
    from ..compiler import TreeCompiler

logger = structlog.get_logger(__name__)


class Action(ABC):
    """Base class for all action nodes.

    Subclasses must be constructible without arguments so the registry can
    instantiate them from a class entry. Nested configuration is compiled
    through the compiler handed to ``configure``.
    """

    #: Registered name, set by ``register_action``
    name: str = ""
    description: str = ""

    #: Optional pydantic model used to validate the raw configuration
    config_model: Optional[Type[BaseModel]] = None

    def __init__(self) -> None:
        self.compiler: Optional["TreeCompiler"] = None
        self.config: Dict[str, Any] = {}
        self.options: Optional[BaseModel] = None

    def configure(self, compiler: "TreeCompiler", config: Mapping[str, Any]) -> None:
        """Configure the action from its raw configuration.

        The mapping is the whole configuration node, including the key that
        named this action. Any other keys are parameters of the action.

        Args:
            compiler: Compiler used for nested configuration and expressions
            config: Raw configuration mapping

        Raises:
            ConfigError: If the configuration does not satisfy ``config_model``
        """
        self.compiler = compiler
        self.config = dict(config)

        if self.config_model is not None:
            try:
                self.options = self.config_model.model_validate(self.config)
            except ValidationError as e:
                raise ConfigError(
                    f"Invalid configuration for action '{self.name or type(self).__name__}': {e}",
                    action=self,
                ) from e

    @abstractmethod
    def execute(self, context: Any) -> Any:
        """Execute the action.

        Args:
            context: Runtime context borrowed from the caller

        Returns:
            Result of the action
        """
        pass

    def duplicate(self) -> "Action":
        """Return an independent deep copy of this action.

        The compiler reference is shared, everything else is copied.
        """
        memo: Dict[int, Any] = {}
        if self.compiler is not None:
            memo[id(self.compiler)] = self.compiler
        return copy.deepcopy(self, memo)

    def evaluate(self, expression: Any, context: Any) -> Any:
        """Evaluate an expression on behalf of this action.

        Args:
            expression: Expression text or an already parsed token sequence
            context: Runtime context

        Returns:
            Value of the expression

        Raises:
            ExecutionError: If the action is unconfigured or evaluation fails
        """
        if self.compiler is None:
            raise ExecutionError(self, "Action has not been configured.")
        return self.compiler.evaluate(self, expression, context)

    def option(self, key: str, default: Any = None) -> Any:
        """Get a raw configuration value."""
        return self.config.get(key, default)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"
