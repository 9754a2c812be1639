"""Built-in action that does nothing."""

from typing import Any

from ..base import Action
from ..registry import register_action


@register_action("noop")
@register_action("null", "Do nothing")
class NullAction(Action):
    """Leaf action used for empty configuration.

    Accepts any configuration and always executes to None.
    """

    def execute(self, context: Any) -> None:
        return None
