"""
Лексер для разбора условных выражений.

Выполняет токенизацию строки условия, разбивая её на значимые элементы:
- Литералы (строки в кавычках, числа)
- Ключевые слова (true, false, null, undefined, and, or, not)
- Пути к значениям (hostname, item.enabled)
- Операторы (==, !=, <, <=, >, >=, &&, ||, !) и скобки
- Пробелы (игнорируются)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from ..errors import CfgTplUserError


class ConditionSyntaxError(CfgTplUserError):
    """Ошибка разбора условного выражения."""

    def __init__(self, message: str, position: int):
        self.message = message
        self.position = position
        super().__init__(f"Parse error at position {position}: {message}")


@dataclass
class Token:
    """
    Токен для парсинга условий.

    Attributes:
        type: Тип токена (STRING, NUMBER, KEYWORD, IDENTIFIER, OPERATOR, SYMBOL, EOF)
        value: Значение токена (для строк — без кавычек)
        position: Позиция в исходной строке
    """
    type: str
    value: str
    position: int

    def __repr__(self):
        return f"Token({self.type}, '{self.value}', pos={self.position})"


_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}


def _unescape(body: str) -> str:
    return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), body)


class ConditionLexer:
    """
    Лексер для разбиения строки условия на токены.
    """

    # Спецификация токенов: (regex_pattern, token_type, ignore_flag)
    TOKEN_SPECS = [
        # Пробелы и табуляция (игнорируем)
        (r'\s+', 'WHITESPACE', True),

        # Строковые литералы в одинарных или двойных кавычках
        (r'"(?:[^"\\]|\\.)*"', 'STRING', False),
        (r"'(?:[^'\\]|\\.)*'", 'STRING', False),

        # Числа (знак допускается, бинарного минуса в грамматике нет)
        (r'-?\d+(?:\.\d+)?', 'NUMBER', False),

        # Операторы: сначала длинные
        (r'===|!==|==|!=|<=|>=|&&|\|\||<|>|!', 'OPERATOR', False),

        (r'\(', 'SYMBOL', False),
        (r'\)', 'SYMBOL', False),

        # Пути: сегменты из букв, цифр и подчёркиваний через точку
        (r'[A-Za-z_]\w*(?:\.\w+)*', 'IDENTIFIER', False),

        # Неизвестный символ (ошибка)
        (r'.', 'UNKNOWN', False),
    ]

    KEYWORDS = {
        'true', 'false', 'null', 'undefined', 'and', 'or', 'not'
    }

    # Словесные формы логических операторов
    WORD_OPERATORS = {
        'and': '&&',
        'or': '||',
        'not': '!',
    }

    # Строгие формы сравнения сводятся к обычным
    OPERATOR_ALIASES = {
        '===': '==',
        '!==': '!=',
    }

    def __init__(self):
        self._compiled_patterns = [
            (re.compile(pattern, re.DOTALL), token_type, ignore)
            for pattern, token_type, ignore in self.TOKEN_SPECS
        ]

    def tokenize(self, text: str) -> List[Token]:
        """
        Разбивает строку на токены.

        Args:
            text: Строка условия для разбора

        Returns:
            Список токенов, включая EOF в конце

        Raises:
            ConditionSyntaxError: При обнаружении неизвестного символа
        """
        tokens: List[Token] = []
        position = 0

        while position < len(text):
            for pattern, token_type, ignore in self._compiled_patterns:
                match = pattern.match(text, position)
                if not match:
                    continue

                value = match.group(0)
                if not ignore:
                    tokens.append(self._make_token(token_type, value, position))

                position = match.end()
                break

        tokens.append(Token(type='EOF', value='', position=position))

        return tokens

    def _make_token(self, token_type: str, value: str, position: int) -> Token:
        if token_type == 'UNKNOWN':
            raise ConditionSyntaxError(f"Unexpected character '{value}'", position)

        if token_type == 'STRING':
            return Token(type='STRING', value=_unescape(value[1:-1]), position=position)

        if token_type == 'OPERATOR':
            return Token(type='OPERATOR', value=self.OPERATOR_ALIASES.get(value, value), position=position)

        if token_type == 'IDENTIFIER' and value in self.KEYWORDS:
            if value in self.WORD_OPERATORS:
                return Token(type='OPERATOR', value=self.WORD_OPERATORS[value], position=position)
            return Token(type='KEYWORD', value=value, position=position)

        return Token(type=token_type, value=value, position=position)

