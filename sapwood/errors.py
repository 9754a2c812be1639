"""Exception hierarchy for action tree compilation and execution."""

from typing import Any, Optional


class SapwoodError(Exception):
    """Base class for all errors raised by sapwood."""


class ActionFactoryError(SapwoodError):
    """Structural failure while resolving or compiling actions."""


class UnknownActionError(ActionFactoryError):
    """No registry entry exists for the requested action name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"{name} action is not defined.")


class InvalidEntryError(ActionFactoryError):
    """A registry entry exists but is not a class, factory or prototype."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"{name} does not have a valid creation factory.")


class InvalidConfigurationError(ActionFactoryError):
    """Configuration is neither an action name nor a collection."""

    def __init__(self, config: Any) -> None:
        self.config = config
        super().__init__(
            f"Configuration not valid: expected a string or collection, "
            f"got {type(config).__name__}."
        )


class NoMatchingActionError(ActionFactoryError):
    """The first key of a mapping does not name a registered action."""

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(
            f"Unable to locate the appropriate action for the config (first key: {key!r})."
        )


class ConfigError(SapwoodError):
    """Raised by an action when its own configuration is invalid."""

    def __init__(self, message: str, action: Optional[Any] = None) -> None:
        self.action = action
        super().__init__(message)


class ExecutionError(SapwoodError):
    """Failure while an action was evaluating an expression.

    Attributes:
        action: The action that requested the evaluation
        cause: The original exception
    """

    def __init__(
        self, action: Any, message: str, cause: Optional[BaseException] = None
    ) -> None:
        self.action = action
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        name = getattr(self.action, "name", None) or type(self.action).__name__
        return f"[{name}] {self.args[0]}"


class ServiceNotFoundError(SapwoodError, LookupError):
    """The services container has nothing registered for a key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Service '{key}' is not registered.")


class ConfigurationFileError(SapwoodError):
    """A configuration file could not be read or parsed."""

    def __init__(self, path: Any, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")
