"""
Парсер условных выражений с рекурсивным спуском.

Строит абстрактное синтаксическое дерево (AST) из последовательности токенов.
Поддерживает приоритеты операторов и группировку в скобках.

Грамматика:
expression → or_expression
or_expression  → and_expression ("||" and_expression)*
and_expression → equality ("&&" equality)*
equality       → relational (("==" | "!=") relational)?
relational     → unary (("<" | "<=" | ">" | ">=") unary)?
unary          → "!" unary | primary
primary        → STRING | NUMBER | "true" | "false" | "null" | "undefined"
               | PATH | "(" expression ")"
"""

from __future__ import annotations

from typing import List, Union

from .lexer import ConditionLexer, ConditionSyntaxError, Token
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

_EQUALITY_OPERATORS = ("==", "!=")
_RELATIONAL_OPERATORS = ("<", "<=", ">", ">=")

# Предельная вложенность скобок и отрицаний
MAX_NESTING_DEPTH = 64

_KEYWORD_LITERALS = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": UNDEFINED,
}


def _parse_number(text: str) -> Union[int, float]:
    return float(text) if "." in text else int(text)


class ConditionParser:
    """
    Парсер условных выражений с рекурсивным спуском.

    Преобразует список токенов в абстрактное синтаксическое дерево,
    соблюдая приоритеты операторов и правила группировки.
    """

    def __init__(self):
        self.lexer = ConditionLexer()
        self._tokens: List[Token] = []
        self._position = 0
        self._depth = 0

    def parse(self, condition_str: str) -> Expression:
        """
        Парсит строку условия в AST.

        Args:
            condition_str: Строка условного выражения

        Returns:
            Корневой узел AST

        Raises:
            ConditionSyntaxError: При лексической или синтаксической ошибке
        """
        self._tokens = self.lexer.tokenize(condition_str)
        self._position = 0
        self._depth = 0

        if len(self._tokens) == 1 and self._tokens[0].type == 'EOF':
            raise ConditionSyntaxError("Empty condition", 0)

        result = self._parse_expression()

        if not self._is_at_end():
            current = self._current_token()
            raise ConditionSyntaxError(f"Unexpected token '{current.value}'", current.position)

        return result

    def _parse_expression(self) -> Expression:
        return self._parse_or_expression()

    def _parse_or_expression(self) -> Expression:
        """Парсит выражение с оператором || (низший приоритет)."""
        left = self._parse_and_expression()

        while self._match_operator("||"):
            right = self._parse_and_expression()
            left = BinaryExpression(left=left, right=right, operator=ExpressionType.OR)

        return left

    def _parse_and_expression(self) -> Expression:
        """Парсит выражение с оператором &&."""
        left = self._parse_equality()

        while self._match_operator("&&"):
            right = self._parse_equality()
            left = BinaryExpression(left=left, right=right, operator=ExpressionType.AND)

        return left

    def _parse_equality(self) -> Expression:
        """Сравнение на равенство; цепочки вида a == b == c не допускаются."""
        left = self._parse_relational()

        current = self._current_token()
        if current.type == 'OPERATOR' and current.value in _EQUALITY_OPERATORS:
            self._advance()
            right = self._parse_relational()
            return ComparisonExpression(left=left, right=right, operator=current.value)

        return left

    def _parse_relational(self) -> Expression:
        left = self._parse_unary()

        current = self._current_token()
        if current.type == 'OPERATOR' and current.value in _RELATIONAL_OPERATORS:
            self._advance()
            right = self._parse_unary()
            return ComparisonExpression(left=left, right=right, operator=current.value)

        return left

    def _parse_unary(self) -> Expression:
        """Парсит отрицание (правая ассоциативность)."""
        if self._match_operator("!"):
            self._enter()
            operand = self._parse_unary()
            self._depth -= 1
            return NotExpression(expression=operand)

        return self._parse_primary()

    def _parse_primary(self) -> Expression:
        """Парсит первичное выражение (литералы, пути и группы в скобках)."""
        if self._match_symbol("("):
            self._enter()
            expr = self._parse_expression()
            self._depth -= 1
            if not self._match_symbol(")"):
                raise ConditionSyntaxError("Expected ')' after grouped expression", self._current_position())
            return GroupExpression(expression=expr)

        current = self._current_token()

        if current.type == 'STRING':
            self._advance()
            return LiteralExpression(value=current.value)

        if current.type == 'NUMBER':
            self._advance()
            return LiteralExpression(value=_parse_number(current.value))

        if current.type == 'KEYWORD':
            self._advance()
            return LiteralExpression(value=_KEYWORD_LITERALS[current.value])

        if current.type == 'IDENTIFIER':
            self._advance()
            return PathExpression(path=current.value)

        if current.type == 'EOF':
            raise ConditionSyntaxError("Unexpected end of expression", current.position)
        raise ConditionSyntaxError(f"Unexpected token '{current.value}'", current.position)

    # Вспомогательные методы для работы с токенами

    def _enter(self) -> None:
        self._depth += 1
        if self._depth > MAX_NESTING_DEPTH:
            raise ConditionSyntaxError(
                f"Expression nested deeper than {MAX_NESTING_DEPTH} levels", self._current_position()
            )

    def _current_token(self) -> Token:
        if self._position >= len(self._tokens):
            return Token(type='EOF', value='', position=len(self._tokens))
        return self._tokens[self._position]

    def _current_position(self) -> int:
        return self._current_token().position

    def _is_at_end(self) -> bool:
        return self._current_token().type == 'EOF'

    def _advance(self) -> Token:
        current = self._current_token()
        if not self._is_at_end():
            self._position += 1
        return current

    def _match_operator(self, operator: str) -> bool:
        """Проверяет и потребляет оператор."""
        current = self._current_token()
        if current.type == 'OPERATOR' and current.value == operator:
            self._advance()
            return True
        return False

    def _match_symbol(self, symbol: str) -> bool:
        """Проверяет и потребляет символ."""
        current = self._current_token()
        if current.type == 'SYMBOL' and current.value == symbol:
            self._advance()
            return True
        return False


__all__ = ["ConditionParser", "ConditionSyntaxError", "MAX_NESTING_DEPTH"]
