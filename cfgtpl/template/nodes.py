"""
AST-узлы шаблона.

Неизменяемые классы узлов дерева блоков: текст, переменные, циклы и условия.
Тела блоков — вложенные списки узлов.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class TemplateNode:
    """Базовый класс для всех узлов AST шаблона."""
    pass


@dataclass(frozen=True)
class TextNode(TemplateNode):
    """
    Обычный текстовый контент в шаблоне.

    Представляет статический текст, который не требует обработки
    и выводится в результат как есть. Сюда же попадают маркеры,
    которые не удалось сопоставить.
    """
    text: str


@dataclass(frozen=True)
class VariableNode(TemplateNode):
    """
    Плейсхолдер переменной {{path}}.

    Attributes:
        name: Путь через точку (hostname, item.name, site.mgmt.vlan)
        position: Позиция открывающего маркера в тексте без блока defaults
    """
    name: str
    position: int = 0


@dataclass(frozen=True)
class ForBlockNode(TemplateNode):
    """
    Блок цикла {% for alias in collection %}...{% endfor %}.

    Тело рендерится по разу на каждый элемент коллекции,
    при этом alias связан с текущим элементом.
    """
    element_alias: str
    collection_name: str
    body: List[TemplateNode] = field(default_factory=list)
    position: int = 0


@dataclass(frozen=True)
class IfBlockNode(TemplateNode):
    """
    Условный блок {% if expression %}...{% endif %}.

    Выражение хранится в исходном виде и разбирается при рендеринге.
    """
    expression: str
    body: List[TemplateNode] = field(default_factory=list)
    position: int = 0


# Алиас для списка узлов (AST)
TemplateAST = List[TemplateNode]


__all__ = [
    "TemplateNode",
    "TextNode",
    "VariableNode",
    "ForBlockNode",
    "IfBlockNode",
    "TemplateAST",
]
