"""Built-in action nodes."""

# Import all built-in actions to register them
from .null import NullAction
from .series import SeriesAction

__all__ = ["NullAction", "SeriesAction"]
