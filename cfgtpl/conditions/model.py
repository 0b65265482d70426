"""
Модели данных для системы условий.

Содержит классы для представления выражений в блоках {% if ... %}.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ExpressionType(Enum):
    """Типы узлов выражения."""
    LITERAL = "literal"
    PATH = "path"
    COMPARE = "compare"
    AND = "and"
    OR = "or"
    NOT = "not"
    GROUP = "group"  # для явной группировки в скобках


class _Undefined:
    """Значение неразрешённого пути."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED: Any = _Undefined()


@dataclass
class Expression(ABC):
    """Базовый абстрактный класс для всех узлов выражения."""

    @abstractmethod
    def get_type(self) -> ExpressionType:
        """Возвращает тип узла."""
        pass

    def __str__(self) -> str:
        return self._to_string()

    @abstractmethod
    def _to_string(self) -> str:
        pass


@dataclass
class LiteralExpression(Expression):
    """
    Литерал: строка, число, true/false, null, undefined.
    """
    value: Any

    def get_type(self) -> ExpressionType:
        return ExpressionType.LITERAL

    def _to_string(self) -> str:
        if self.value is UNDEFINED:
            return "undefined"
        if self.value is None:
            return "null"
        if isinstance(self.value, bool):
            return "true" if self.value else "false"
        if isinstance(self.value, str):
            return repr(self.value)
        return str(self.value)


@dataclass
class PathExpression(Expression):
    """
    Ссылка на значение из данных рендеринга: hostname, item.enabled

    Разрешается по точечному пути в текущей области видимости.
    """
    path: str

    def get_type(self) -> ExpressionType:
        return ExpressionType.PATH

    def _to_string(self) -> str:
        return self.path


@dataclass
class ComparisonExpression(Expression):
    """
    Сравнение: left op right, где op — один из ==, !=, <, <=, >, >=.
    """
    left: Expression
    right: Expression
    operator: str

    def get_type(self) -> ExpressionType:
        return ExpressionType.COMPARE

    def _to_string(self) -> str:
        return f"{self.left} {self.operator} {self.right}"


@dataclass
class GroupExpression(Expression):
    """
    Группа в скобках: (expression)
    """
    expression: Expression

    def get_type(self) -> ExpressionType:
        return ExpressionType.GROUP

    def _to_string(self) -> str:
        return f"({self.expression})"


@dataclass
class NotExpression(Expression):
    """
    Отрицание: !expression
    """
    expression: Expression

    def get_type(self) -> ExpressionType:
        return ExpressionType.NOT

    def _to_string(self) -> str:
        return f"!{self.expression}"


@dataclass
class BinaryExpression(Expression):
    """
    Логическая операция: left && right, left || right
    """
    left: Expression
    right: Expression
    operator: ExpressionType  # AND или OR

    def get_type(self) -> ExpressionType:
        return self.operator

    def _to_string(self) -> str:
        op_str = "&&" if self.operator == ExpressionType.AND else "||"
        return f"{self.left} {op_str} {self.right}"


__all__ = [
    "UNDEFINED",
    "Expression",
    "ExpressionType",
    "LiteralExpression",
    "PathExpression",
    "ComparisonExpression",
    "GroupExpression",
    "NotExpression",
    "BinaryExpression",
]
