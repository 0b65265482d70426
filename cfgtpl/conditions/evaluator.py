"""
Вычислитель условных выражений.

Проходит по AST выражения и вычисляет его значение. Пути разрешаются
через переданную функцию-резолвер (обычно — область видимости рендеринга).
"""

from __future__ import annotations

import re
from typing import Any, Callable, Optional, Union, cast

from .model import (
    UNDEFINED,
    Expression,
    ExpressionType,
    LiteralExpression,
    PathExpression,
    ComparisonExpression,
    GroupExpression,
    NotExpression,
    BinaryExpression,
)
from ..errors import CfgTplUserError

Resolver = Callable[[str], Any]

_NUMERIC_RE = re.compile(r"\s*-?\d+(?:\.\d+)?\s*$")


class EvaluationError(CfgTplUserError):
    """Ошибка при вычислении условного выражения."""
    pass


def is_truthy(value: Any) -> bool:
    """
    Истинность значения в условии.

    Ложны: undefined, null, false, 0, пустая строка и пустые коллекции.
    Строка "0" истинна.
    """
    if value is UNDEFINED or value is None:
        return False
    return bool(value)


def _as_number(value: Any) -> Optional[Union[int, float]]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str) and _NUMERIC_RE.match(value):
        text = value.strip()
        return float(text) if "." in text else int(text)
    return None


def _bool_text(value: bool) -> str:
    return "true" if value else "false"


def values_equal(left: Any, right: Any) -> bool:
    """
    Сравнение на равенство.

    - null и undefined равны друг другу и только друг другу
    - число и числовая строка сравниваются как числа
    - булево значение и строка сравниваются по тексту "true"/"false"
    """
    left_nullish = left is UNDEFINED or left is None
    right_nullish = right is UNDEFINED or right is None
    if left_nullish or right_nullish:
        return left_nullish and right_nullish

    if isinstance(left, bool) or isinstance(right, bool):
        if isinstance(left, bool) and isinstance(right, bool):
            return left is right
        if isinstance(left, str) or isinstance(right, str):
            left_text = _bool_text(left) if isinstance(left, bool) else left
            right_text = _bool_text(right) if isinstance(right, bool) else right
            return left_text == right_text
        return False

    if not (isinstance(left, str) and isinstance(right, str)):
        left_num, right_num = _as_number(left), _as_number(right)
        if left_num is not None and right_num is not None:
            return left_num == right_num

    return left == right


def compare_values(left: Any, right: Any, operator: str) -> bool:
    """
    Сравнение порядка (<, <=, >, >=).

    Raises:
        EvaluationError: Если значения несравнимы
    """
    left_num, right_num = _as_number(left), _as_number(right)
    if left_num is not None and right_num is not None:
        a, b = left_num, right_num
    elif isinstance(left, str) and isinstance(right, str):
        a, b = left, right
    else:
        raise EvaluationError(f"Cannot compare {left!r} {operator} {right!r}")

    if operator == "<":
        return a < b
    if operator == "<=":
        return a <= b
    if operator == ">":
        return a > b
    if operator == ">=":
        return a >= b
    raise EvaluationError(f"Unknown comparison operator: {operator}")


class ConditionEvaluator:
    """
    Вычислитель условных выражений.

    Принимает AST выражения и резолвер путей, возвращает булево значение.
    """

    def __init__(self, resolver: Resolver):
        """
        Args:
            resolver: Функция path -> значение (UNDEFINED, если путь не разрешён)
        """
        self.resolver = resolver

    def evaluate(self, expression: Expression) -> bool:
        """
        Вычисляет истинность выражения.

        Raises:
            EvaluationError: При ошибке вычисления (несравнимые значения, неизвестный узел)
        """
        return is_truthy(self.value_of(expression))

    def value_of(self, expression: Expression) -> Any:
        """Вычисляет значение узла выражения."""
        expression_type = expression.get_type()

        if expression_type == ExpressionType.LITERAL:
            return cast(LiteralExpression, expression).value
        elif expression_type == ExpressionType.PATH:
            return self.resolver(cast(PathExpression, expression).path)
        elif expression_type == ExpressionType.GROUP:
            return self.value_of(cast(GroupExpression, expression).expression)
        elif expression_type == ExpressionType.NOT:
            return not self.evaluate(cast(NotExpression, expression).expression)
        elif expression_type == ExpressionType.COMPARE:
            return self._evaluate_comparison(cast(ComparisonExpression, expression))
        elif expression_type == ExpressionType.AND:
            return self._evaluate_and(cast(BinaryExpression, expression))
        elif expression_type == ExpressionType.OR:
            return self._evaluate_or(cast(BinaryExpression, expression))
        else:
            raise EvaluationError(f"Unknown expression type: {expression_type}")

    def _evaluate_comparison(self, expression: ComparisonExpression) -> bool:
        left = self.value_of(expression.left)
        right = self.value_of(expression.right)

        if expression.operator == "==":
            return values_equal(left, right)
        if expression.operator == "!=":
            return not values_equal(left, right)
        return compare_values(left, right, expression.operator)

    def _evaluate_and(self, expression: BinaryExpression) -> bool:
        """
        Логическое И с коротким вычислением.
        """
        if not self.evaluate(expression.left):
            return False
        return self.evaluate(expression.right)

    def _evaluate_or(self, expression: BinaryExpression) -> bool:
        """
        Логическое ИЛИ с коротким вычислением.
        """
        if self.evaluate(expression.left):
            return True
        return self.evaluate(expression.right)


def evaluate_condition_string(condition_str: str, resolver: Resolver) -> bool:
    """
    Удобная функция для вычисления условия из строки.

    Args:
        condition_str: Строка условного выражения
        resolver: Функция разрешения путей

    Returns:
        Результат вычисления условия

    Raises:
        ConditionSyntaxError: При ошибке разбора
        EvaluationError: При ошибке вычисления
    """
    from .parser import ConditionParser

    parser = ConditionParser()
    ast = parser.parse(condition_str)

    evaluator = ConditionEvaluator(resolver)
    return evaluator.evaluate(ast)
