"""
Лексические типы.

Определяет типы токенов шаблона и позиционную информацию.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class TokenType(enum.Enum):
    """Типы токенов в шаблоне."""

    # Текстовый контент (включая нераспознанные/незакрытые маркеры)
    TEXT = "TEXT"

    # {{ path }}
    PLACEHOLDER = "PLACEHOLDER"

    # {% ... %} или устаревшая форма {{% ... %}}
    DIRECTIVE = "DIRECTIVE"

    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """
    Токен с позиционной информацией для точной диагностики ошибок.

    Для PLACEHOLDER и DIRECTIVE value содержит очищенное содержимое маркера,
    а raw — исходный текст маркера целиком.
    """
    type: TokenType
    value: str
    raw: str
    position: int        # Позиция в исходном тексте
    end: int             # Позиция сразу после токена
    line: int            # Номер строки (начиная с 1)
    column: int          # Номер колонки (начиная с 1)

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


__all__ = ["TokenType", "Token"]
