"""Built-in composite action running children in order."""

from typing import TYPE_CHECKING, Any, List, Mapping

import structlog
from pydantic import BaseModel, Field

from ..base import Action
from ..registry import register_action

if TYPE_CHECKING:
    from ...compiler import TreeCompiler

logger = structlog.get_logger(__name__)


class SeriesConfig(BaseModel):
    """Configuration for a series of actions."""

    series: List[Any] = Field(
        default_factory=list,
        description="Child configurations, executed in order"
    )


@register_action("series", "Execute a list of actions in order")
class SeriesAction(Action):
    """Composite action owning an ordered list of child actions."""

    config_model = SeriesConfig

    def __init__(self) -> None:
        super().__init__()
        self.children: List[Action] = []

    def configure(self, compiler: "TreeCompiler", config: Mapping[str, Any]) -> None:
        """Compile every child configuration through ``compiler``."""
        super().configure(compiler, config)

        children = [compiler.compile(child) for child in self.options.series]
        self.children = children

        logger.debug("Configured series", children=len(children))

    def execute(self, context: Any) -> List[Any]:
        """Execute the children in order.

        Args:
            context: Runtime context shared by every child

        Returns:
            The result of each child, in order
        """
        return [child.execute(context) for child in self.children]
