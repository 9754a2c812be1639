"""Parser and evaluator services backed by Jinja2 expressions."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping

import structlog
from jinja2 import StrictUndefined, Undefined, UndefinedError
from jinja2.sandbox import SandboxedEnvironment

from ..context import Context

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CompiledExpression:
    """Parsed expression ready for evaluation."""

    source: str
    expression: Callable[..., Any]
    strict: bool = True


class JinjaParser:
    """Compiles expression text with a sandboxed Jinja2 environment."""

    def __init__(self, strict_undefined: bool = True) -> None:
        """Initialize the parser.

        Args:
            strict_undefined: Raise when an expression uses an unset variable
        """
        self.strict_undefined = strict_undefined
        self.environment = SandboxedEnvironment(
            undefined=StrictUndefined if strict_undefined else Undefined
        )

    def parse(self, text: str) -> CompiledExpression:
        """Compile ``text``; raises ``jinja2.TemplateSyntaxError`` when invalid."""
        expression = self.environment.compile_expression(text, undefined_to_none=False)
        logger.debug("Compiled expression", expression=text)
        return CompiledExpression(text, expression, self.strict_undefined)


class JinjaEvaluator:
    """Evaluates compiled expressions against a runtime context."""

    def evaluate(self, tokens: CompiledExpression, context: Any) -> Any:
        """Evaluate a compiled expression.

        Args:
            tokens: Expression produced by ``JinjaParser.parse``
            context: ``Context`` or mapping of variables

        Returns:
            Value of the expression, None for an undefined result in lax mode

        Raises:
            UndefinedError: If the result is undefined in strict mode
        """
        value = tokens.expression(self._variables(context))

        if isinstance(value, Undefined):
            if tokens.strict:
                raise UndefinedError(f"'{tokens.source}' is undefined")
            return None

        return value

    def _variables(self, context: Any) -> Dict[str, Any]:
        if context is None:
            return {}
        if isinstance(context, Context):
            return context.as_dict()
        if isinstance(context, Mapping):
            return dict(context)
        raise TypeError(f"Unsupported context type: {type(context).__name__}")
