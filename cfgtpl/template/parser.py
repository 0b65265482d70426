"""
Парсер шаблонов.

Выполняет два представления одного и того же потока токенов:

1. Плоское сканирование (scan_structure): события в порядке исходного текста,
   множество переменных и дескрипторы циклов/условий. Открывающие и
   закрывающие маркеры не сопоставляются.
2. Дерево блоков (TemplateParser): стековое сопоставление каждого закрывающего
   маркера с ближайшим незакрытым открывающим того же вида. Некорректная
   вложенность фиксируется в диагностике, а проблемные маркеры превращаются
   в обычный текст.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .lexer import tokenize_template
from .nodes import TemplateAST, TemplateNode, TextNode, VariableNode, ForBlockNode, IfBlockNode
from .structure import (
    ConditionalDescriptor, LoopDescriptor, StructureList,
    Text, VariableRef, ForStart, ForEnd, IfStart, IfEnd,
)
from .tokens import Token, TokenType
from ..defaults import DefaultsMap, extract_defaults
from ..errors import CfgTplUserError

logger = logging.getLogger(__name__)

_FOR_PATTERN = re.compile(r"for\s+(\w+)\s+in\s+(\w+)\s*$")


class TemplateSyntaxError(CfgTplUserError):
    """Ошибка вложенности блоков (только в строгом режиме)."""

    def __init__(self, message: str, token: Token):
        super().__init__(f"{message} at {token.line}:{token.column}")
        self.token = token
        self.line = token.line
        self.column = token.column


class DirectiveKind(enum.Enum):
    FOR = "for"
    IF = "if"
    ENDFOR = "endfor"
    ENDIF = "endif"


_CLOSES: Dict[DirectiveKind, DirectiveKind] = {
    DirectiveKind.ENDFOR: DirectiveKind.FOR,
    DirectiveKind.ENDIF: DirectiveKind.IF,
}


@dataclass(frozen=True)
class Directive:
    """Распознанная управляющая директива."""
    kind: DirectiveKind
    element_alias: str = ""
    collection_name: str = ""
    expression: str = ""


def classify_directive(content: str) -> Optional[Directive]:
    """
    Классифицирует содержимое директивы по первому слову.

    Returns:
        Directive или None для нераспознанного/некорректного содержимого
    """
    parts = content.split(None, 1)
    if not parts:
        return None

    keyword = parts[0]
    rest = parts[1].strip() if len(parts) > 1 else ""

    if keyword == "for":
        match = _FOR_PATTERN.match(content)
        if not match:
            return None
        return Directive(DirectiveKind.FOR, element_alias=match.group(1), collection_name=match.group(2))

    if keyword == "if":
        if not rest:
            return None
        return Directive(DirectiveKind.IF, expression=rest)

    if keyword == "endfor":
        return Directive(DirectiveKind.ENDFOR)

    if keyword == "endif":
        return Directive(DirectiveKind.ENDIF)

    return None


@dataclass(frozen=True)
class Diagnostic:
    """Нефатальное сообщение о некорректной вложенности блоков."""
    message: str
    position: int
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}: {self.message}"


@dataclass(frozen=True)
class StructureScan:
    """Результат плоского сканирования."""
    variables: Tuple[str, ...]
    loops: List[LoopDescriptor]
    conditionals: List[ConditionalDescriptor]
    structure: StructureList


@dataclass(frozen=True)
class ParseResult:
    """
    Полный результат разбора шаблона.

    Attributes:
        variables: Уникальные имена переменных в порядке первого появления
        defaults: Значения из блока defaults
        loops: Дескрипторы найденных циклов
        conditionals: Дескрипторы найденных условий
        structure: Плоский список событий
        ast: Дерево блоков для рендеринга
        diagnostics: Проблемы вложенности
        body: Текст шаблона без блока defaults
    """
    variables: Tuple[str, ...]
    defaults: DefaultsMap
    loops: List[LoopDescriptor]
    conditionals: List[ConditionalDescriptor]
    structure: StructureList
    ast: TemplateAST
    diagnostics: List[Diagnostic] = field(default_factory=list)
    body: str = ""

    @property
    def loop_aliases(self) -> frozenset:
        return frozenset(loop.element_alias for loop in self.loops)


def _scan_tokens(tokens: List[Token]) -> StructureScan:
    variables: Dict[str, None] = {}
    loops: List[LoopDescriptor] = []
    conditionals: List[ConditionalDescriptor] = []
    structure: StructureList = []

    for token in tokens:
        if token.type == TokenType.TEXT:
            structure.append(Text(content=token.value))
        elif token.type == TokenType.PLACEHOLDER:
            variables.setdefault(token.value, None)
            structure.append(VariableRef(name=token.value, offset=token.position))
        elif token.type == TokenType.DIRECTIVE:
            directive = classify_directive(token.value)
            if directive is None:
                continue
            if directive.kind == DirectiveKind.FOR:
                loops.append(LoopDescriptor(
                    element_alias=directive.element_alias,
                    collection_name=directive.collection_name,
                    source_start=token.position,
                    source_end=token.end,
                ))
                structure.append(ForStart(directive.element_alias, directive.collection_name, token.position))
            elif directive.kind == DirectiveKind.IF:
                conditionals.append(ConditionalDescriptor(
                    expression=directive.expression,
                    source_start=token.position,
                    source_end=token.end,
                ))
                structure.append(IfStart(directive.expression, token.position))
            elif directive.kind == DirectiveKind.ENDFOR:
                structure.append(ForEnd(token.position))
            else:
                structure.append(IfEnd(token.position))

    return StructureScan(
        variables=tuple(variables),
        loops=loops,
        conditionals=conditionals,
        structure=structure,
    )


def scan_structure(text: str) -> StructureScan:
    """
    Плоское сканирование текста (без блока defaults).

    Args:
        text: Текст шаблона

    Returns:
        Переменные, дескрипторы и события в порядке исходного текста
    """
    return _scan_tokens(tokenize_template(text))


@dataclass
class _Frame:
    token: Token
    directive: Directive
    children: List[TemplateNode] = field(default_factory=list)


class TemplateParser:
    """
    Стековый парсер дерева блоков.

    Обрабатывает последовательность токенов и строит AST, сопоставляя
    закрывающие директивы с ближайшими открытыми блоками того же вида.
    """

    def __init__(self, tokens: List[Token], strict: bool = False):
        self.tokens = tokens
        self.strict = strict
        self.diagnostics: List[Diagnostic] = []
        self._root: List[TemplateNode] = []
        self._stack: List[_Frame] = []

    def parse(self) -> TemplateAST:
        """
        Парсит всю последовательность токенов в AST.

        Returns:
            Список корневых узлов AST

        Raises:
            TemplateSyntaxError: Только в строгом режиме, при первой проблеме вложенности
        """
        self.diagnostics = []
        self._root = []
        self._stack = []

        for token in self.tokens:
            if token.type == TokenType.EOF:
                break
            self._consume(token)

        while self._stack:
            frame = self._stack[-1]
            self._report(f"Unclosed '{frame.directive.kind.value}' block", frame.token)
            self._degrade_top()

        return self._root

    def _current(self) -> List[TemplateNode]:
        return self._stack[-1].children if self._stack else self._root

    def _consume(self, token: Token) -> None:
        if token.type == TokenType.TEXT:
            self._current().append(TextNode(text=token.value))
            return

        if token.type == TokenType.PLACEHOLDER:
            self._current().append(VariableNode(name=token.value, position=token.position))
            return

        directive = classify_directive(token.value)
        if directive is None:
            # Нераспознанная директива выводится как есть
            self._current().append(TextNode(text=token.raw))
            return

        if directive.kind in (DirectiveKind.FOR, DirectiveKind.IF):
            self._stack.append(_Frame(token=token, directive=directive))
            return

        self._close(token, _CLOSES[directive.kind])

    def _close(self, token: Token, opener_kind: DirectiveKind) -> None:
        index = self._find_open(opener_kind)
        if index is None:
            self._report(f"Unexpected '{token.value.split()[0]}' without matching '{opener_kind.value}'", token)
            self._current().append(TextNode(text=token.raw))
            return

        # Незакрытые блоки внутри найденного пересекают его границу
        while len(self._stack) - 1 > index:
            inner = self._stack[-1]
            self._report(
                f"'{inner.directive.kind.value}' block crosses the end of '{opener_kind.value}' block",
                inner.token,
            )
            self._degrade_top()

        frame = self._stack.pop()
        self._current().append(self._build_block(frame))

    def _find_open(self, kind: DirectiveKind) -> Optional[int]:
        for index in range(len(self._stack) - 1, -1, -1):
            if self._stack[index].directive.kind == kind:
                return index
        return None

    def _degrade_top(self) -> None:
        """Превращает незакрытый открывающий маркер в текст, а его тело — в содержимое родителя."""
        frame = self._stack.pop()
        target = self._current()
        target.append(TextNode(text=frame.token.raw))
        target.extend(frame.children)

    @staticmethod
    def _build_block(frame: _Frame) -> TemplateNode:
        directive = frame.directive
        if directive.kind == DirectiveKind.FOR:
            return ForBlockNode(
                element_alias=directive.element_alias,
                collection_name=directive.collection_name,
                body=frame.children,
                position=frame.token.position,
            )
        return IfBlockNode(
            expression=directive.expression,
            body=frame.children,
            position=frame.token.position,
        )

    def _report(self, message: str, token: Token) -> None:
        if self.strict:
            raise TemplateSyntaxError(message, token)
        diagnostic = Diagnostic(message=message, position=token.position, line=token.line, column=token.column)
        logger.debug("Template nesting problem: %s", diagnostic)
        self.diagnostics.append(diagnostic)


def parse_template(template: str, strict: bool = False) -> ParseResult:
    """
    Разбирает шаблон целиком: блок defaults, плоская структура и дерево блоков.

    Args:
        template: Исходный текст шаблона
        strict: Бросать TemplateSyntaxError при некорректной вложенности

    Returns:
        Новый ParseResult; состояние между вызовами не сохраняется
    """
    defaults, body = extract_defaults(template)
    tokens = tokenize_template(body)

    scan = _scan_tokens(tokens)
    parser = TemplateParser(tokens, strict=strict)
    ast = parser.parse()

    logger.debug(
        "Parsed template: %d variables, %d loops, %d conditionals, %d diagnostics",
        len(scan.variables), len(scan.loops), len(scan.conditionals), len(parser.diagnostics),
    )

    return ParseResult(
        variables=scan.variables,
        defaults=defaults,
        loops=scan.loops,
        conditionals=scan.conditionals,
        structure=scan.structure,
        ast=ast,
        diagnostics=parser.diagnostics,
        body=body,
    )


__all__ = [
    "TemplateSyntaxError",
    "DirectiveKind",
    "Directive",
    "classify_directive",
    "Diagnostic",
    "StructureScan",
    "ParseResult",
    "scan_structure",
    "TemplateParser",
    "parse_template",
]
