"""
Лексический анализатор шаблонов.

Линейно сканирует текст шаблона и разбивает его на текстовые фрагменты,
плейсхолдеры {{ ... }} и директивы {% ... %}. Незакрытый плейсхолдер
превращает весь остаток текста в обычный текст, одиночный {% остаётся
текстом, а разбор продолжается после него.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .tokens import Token, TokenType

logger = logging.getLogger(__name__)

PLACEHOLDER_OPEN = "{{"
PLACEHOLDER_CLOSE = "}}"
DIRECTIVE_OPEN = "{%"
DIRECTIVE_CLOSE = "%}"
CONTROL_SIGIL = "%"

_CLOSERS = {
    PLACEHOLDER_OPEN: PLACEHOLDER_CLOSE,
    DIRECTIVE_OPEN: DIRECTIVE_CLOSE,
}


class TemplateLexer:
    """
    Лексический анализатор шаблонов.

    Распознаёт:
    - обычный текст
    - плейсхолдеры {{path}}
    - директивы {% ... %}
    - устаревшую форму директив {{% ... %}}
    """

    def __init__(self, text: str):
        self.text = text
        self.position = 0
        self.line = 1
        self.column = 1
        self.length = len(text)

    def tokenize(self) -> List[Token]:
        """
        Токенизирует весь исходный текст и возвращает список токенов.

        Последним всегда идёт EOF.
        """
        tokens: List[Token] = []

        while self.position < self.length:
            found = self._find_next_open(self.position)
            if found is None:
                tokens.append(self._text_token(self.length))
                break

            open_pos, opener = found
            if open_pos > self.position:
                tokens.append(self._text_token(open_pos))

            close_pos = self.text.find(_CLOSERS[opener], open_pos + len(opener))
            if close_pos == -1:
                if opener == DIRECTIVE_OPEN:
                    # Одиночный {% выводится как есть, разбор продолжается
                    logger.debug("Unterminated %r at %d kept as text", opener, open_pos)
                    tokens.append(self._text_token(open_pos + len(opener)))
                    continue
                # Незакрытый плейсхолдер: остаток шаблона идёт как текст
                logger.debug("Unterminated %r at %d, treating tail as text", opener, open_pos)
                tokens.append(self._text_token(self.length))
                break

            tokens.append(self._marker_token(opener, close_pos))

        tokens.append(Token(TokenType.EOF, "", "", self.position, self.position, self.line, self.column))
        return tokens

    def _find_next_open(self, start: int) -> Optional[Tuple[int, str]]:
        """Находит ближайший открывающий маркер ({{ или {%)."""
        candidates = []
        for opener in (PLACEHOLDER_OPEN, DIRECTIVE_OPEN):
            pos = self.text.find(opener, start)
            if pos != -1:
                candidates.append((pos, opener))
        if not candidates:
            return None
        return min(candidates, key=lambda c: c[0])

    def _text_token(self, end: int) -> Token:
        start_pos, start_line, start_column = self.position, self.line, self.column
        value = self.text[start_pos:end]
        self._advance_to(end)
        return Token(TokenType.TEXT, value, value, start_pos, end, start_line, start_column)

    def _marker_token(self, opener: str, close_pos: int) -> Token:
        start_pos, start_line, start_column = self.position, self.line, self.column
        end = close_pos + len(_CLOSERS[opener])
        raw = self.text[start_pos:end]
        inner = self.text[start_pos + len(opener):close_pos].strip()
        self._advance_to(end)

        if opener == DIRECTIVE_OPEN:
            return Token(TokenType.DIRECTIVE, inner, raw, start_pos, end, start_line, start_column)

        if inner.startswith(CONTROL_SIGIL):
            content = inner[len(CONTROL_SIGIL):].strip()
            if content.endswith(CONTROL_SIGIL):
                content = content[:-len(CONTROL_SIGIL)].rstrip()
            return Token(TokenType.DIRECTIVE, content, raw, start_pos, end, start_line, start_column)

        if not inner:
            logger.debug("Empty placeholder at %d:%d kept as text", start_line, start_column)
            return Token(TokenType.TEXT, raw, raw, start_pos, end, start_line, start_column)

        return Token(TokenType.PLACEHOLDER, inner, raw, start_pos, end, start_line, start_column)

    def _advance_to(self, target: int) -> None:
        """
        Перемещает позицию до target, обновляя номера строк и колонок.
        """
        chunk = self.text[self.position:target]
        newlines = chunk.count("\n")
        if newlines:
            self.line += newlines
            self.column = len(chunk) - chunk.rfind("\n")
        else:
            self.column += len(chunk)
        self.position = target


def tokenize_template(text: str) -> List[Token]:
    """
    Удобная функция для токенизации шаблона.

    Args:
        text: Исходный текст шаблона

    Returns:
        Список токенов (последний — EOF)
    """
    lexer = TemplateLexer(text)
    return lexer.tokenize()


__all__ = [
    "TemplateLexer",
    "tokenize_template",
    "PLACEHOLDER_OPEN",
    "PLACEHOLDER_CLOSE",
    "DIRECTIVE_OPEN",
    "DIRECTIVE_CLOSE",
]
