"""
Контекст рендеринга.

Разрешение точечных путей в данных и область видимости с привязками
переменных циклов.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from ..conditions.model import UNDEFINED

RenderContext = Mapping[str, Any]


def resolve_path(data: Any, path: str) -> Any:
    """
    Разрешает путь вида a.b.c в данных.

    Поиск прекращается, как только текущее значение не является словарём
    или не содержит очередного ключа.

    Returns:
        Найденное значение или UNDEFINED
    """
    value = data
    for part in path.split("."):
        if isinstance(value, Mapping) and part in value:
            value = value[part]
        else:
            return UNDEFINED
    return value


def format_value(value: Any) -> str:
    """Текстовое представление скалярного значения для подстановки."""
    if value is UNDEFINED or value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    # Словари и списки не подставляются
    if isinstance(value, (Mapping, list, tuple, set)):
        return ""
    return str(value)


@dataclass(frozen=True)
class RenderScope:
    """
    Область видимости при рендеринге.

    Порядок поиска: привязки циклов (вложенные перекрывают внешние),
    затем данные, затем значения по умолчанию (по точному имени).
    """
    data: RenderContext
    defaults: Mapping[str, str] = field(default_factory=dict)
    bindings: Dict[str, Any] = field(default_factory=dict)

    def child(self, alias: str, element: Any) -> RenderScope:
        """Создаёт область для одной итерации цикла."""
        bindings = dict(self.bindings)
        bindings[alias] = element
        return RenderScope(data=self.data, defaults=self.defaults, bindings=bindings)

    def lookup(self, path: str) -> Any:
        head, _, rest = path.partition(".")
        if head in self.bindings:
            element = self.bindings[head]
            return resolve_path(element, rest) if rest else element

        value = resolve_path(self.data, path)
        if value is UNDEFINED and path in self.defaults:
            return self.defaults[path]
        return value

    def lookup_text(self, path: str) -> str:
        return format_value(self.lookup(path))


def make_scope(data: Optional[RenderContext], defaults: Optional[Mapping[str, str]] = None) -> RenderScope:
    return RenderScope(data=data or {}, defaults=defaults or {})


__all__ = ["RenderContext", "RenderScope", "resolve_path", "format_value", "make_scope"]
