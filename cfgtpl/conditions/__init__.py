"""
Язык условий для блоков {% if ... %}.

Закрытая грамматика сравнений и логических операций над значениями
из данных рендеринга. Произвольный код не выполняется.
"""

from __future__ import annotations

from .evaluator import ConditionEvaluator, EvaluationError, evaluate_condition_string, is_truthy
from .lexer import ConditionLexer, ConditionSyntaxError
from .model import UNDEFINED, Expression
from .parser import ConditionParser

__all__ = [
    "UNDEFINED",
    "Expression",
    "ConditionLexer",
    "ConditionParser",
    "ConditionSyntaxError",
    "ConditionEvaluator",
    "EvaluationError",
    "evaluate_condition_string",
    "is_truthy",
]
