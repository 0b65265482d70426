"""
Плоская структура шаблона.

События сканирования в порядке следования в исходном тексте и дескрипторы
найденных циклов и условий. Маркеры управляющих конструкций представлены
узлами нулевой ширины; сопоставление открывающих и закрывающих маркеров
здесь не выполняется (см. parser.TemplateParser для дерева блоков).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class LoopDescriptor:
    """
    Найденный заголовок цикла: for element_alias in collection_name.

    source_start — позиция открывающего маркера,
    source_end — позиция сразу после закрывающего маркера.
    """
    element_alias: str
    collection_name: str
    source_start: int
    source_end: int


@dataclass(frozen=True)
class ConditionalDescriptor:
    """Найденный заголовок условия: if expression."""
    expression: str
    source_start: int
    source_end: int


@dataclass(frozen=True)
class StructureNode:
    """Базовый класс для событий плоской структуры."""
    pass


@dataclass(frozen=True)
class Text(StructureNode):
    content: str


@dataclass(frozen=True)
class VariableRef(StructureNode):
    name: str
    offset: int


@dataclass(frozen=True)
class ForStart(StructureNode):
    element_alias: str
    collection_name: str
    offset: int


@dataclass(frozen=True)
class ForEnd(StructureNode):
    offset: int


@dataclass(frozen=True)
class IfStart(StructureNode):
    expression: str
    offset: int


@dataclass(frozen=True)
class IfEnd(StructureNode):
    offset: int


StructureList = List[StructureNode]


__all__ = [
    "LoopDescriptor",
    "ConditionalDescriptor",
    "StructureNode",
    "Text",
    "VariableRef",
    "ForStart",
    "ForEnd",
    "IfStart",
    "IfEnd",
    "StructureList",
]
