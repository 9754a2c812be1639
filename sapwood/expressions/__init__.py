"""Expression evaluation subsystem."""

from .bridge import ExpressionBridge
from .jinja import CompiledExpression, JinjaEvaluator, JinjaParser

__all__ = ["ExpressionBridge", "CompiledExpression", "JinjaEvaluator", "JinjaParser"]
