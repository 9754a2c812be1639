"""Lazy expression evaluation on behalf of actions."""

from typing import Any

import structlog
from prometheus_client import Counter, Histogram

from ..errors import ExecutionError
from ..services import EVALUATOR, PARSER, Services

logger = structlog.get_logger(__name__)

# Prometheus metrics
EXPRESSION_EVALUATIONS = Counter(
    "sapwood_expression_evaluations_total",
    "Total number of expression evaluations",
    ["status"],
)

EXPRESSION_DURATION = Histogram(
    "sapwood_expression_duration_seconds",
    "Time spent parsing and evaluating expressions",
)


class ExpressionBridge:
    """Parses expression text on demand and evaluates it.

    Every failure, including service lookup failures, is re-raised as an
    ``ExecutionError`` naming the action that asked for the value.
    """

    def __init__(
        self,
        services: Services,
        parser_key: str = PARSER,
        evaluator_key: str = EVALUATOR,
    ) -> None:
        """Initialize the bridge.

        Args:
            services: Container providing the parser and evaluator
            parser_key: Service key of the parser
            evaluator_key: Service key of the evaluator
        """
        self.services = services
        self.parser_key = parser_key
        self.evaluator_key = evaluator_key

    def evaluate(self, action: Any, source: Any, context: Any) -> Any:
        """Evaluate an expression against a runtime context.

        Args:
            action: Action requesting the value
            source: Expression text, or an already parsed token sequence
            context: Runtime context passed to the evaluator

        Returns:
            Value produced by the evaluator

        Raises:
            ExecutionError: If parsing, lookup or evaluation fails
        """
        with EXPRESSION_DURATION.time():
            try:
                # Parse only when needed
                if isinstance(source, str):
                    tokens = self.services.get(self.parser_key).parse(source)
                else:
                    tokens = source

                value = self.services.get(self.evaluator_key).evaluate(tokens, context)

            except Exception as e:
                EXPRESSION_EVALUATIONS.labels(status="failed").inc()
                logger.warning(
                    "Expression evaluation failed",
                    action=getattr(action, "name", None) or type(action).__name__,
                    expression=source if isinstance(source, str) else None,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise ExecutionError(action, str(e), cause=e) from e

        EXPRESSION_EVALUATIONS.labels(status="success").inc()
        return value
