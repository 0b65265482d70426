"""
Подготовка данных рендеринга по результату разбора шаблона.

- начальный набор данных из значений по умолчанию
- переменные, которые всё ещё используют значения по умолчанию
- переменные без значения
- заготовка блока defaults для шаблона, в котором его нет
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, MutableMapping

from .conditions.model import UNDEFINED
from .defaults import DEFAULTS_CLOSE, DEFAULTS_OPEN, find_defaults_block
from .template.context import format_value, resolve_path
from .template.parser import ParseResult, parse_template


def set_path(data: MutableMapping[str, Any], path: str, value: Any) -> None:
    """Записывает значение по точечному пути, создавая промежуточные словари."""
    parts = path.split(".")
    current = data
    for part in parts[:-1]:
        nested = current.get(part)
        if not isinstance(nested, MutableMapping):
            nested = {}
            current[part] = nested
        current = nested
    current[parts[-1]] = value


def top_level_variables(result: ParseResult) -> List[str]:
    """Переменные, не относящиеся к элементам циклов, в порядке появления."""
    aliases = result.loop_aliases
    return [name for name in result.variables if name.partition(".")[0] not in aliases]


def loop_fields(result: ParseResult, alias: str) -> List[str]:
    """Поля элемента цикла, на которые ссылается шаблон ({{alias.field}})."""
    prefix = alias + "."
    fields: Dict[str, None] = {}
    for name in result.variables:
        if name.startswith(prefix):
            fields.setdefault(name[len(prefix):], None)
    return list(fields)


def initial_data(result: ParseResult) -> Dict[str, Any]:
    """
    Начальный набор данных для заполнения.

    Переменные получают значение по умолчанию или пустую строку,
    каждая коллекция цикла — один элемент с пустыми полями.
    """
    data: Dict[str, Any] = {}

    for name in top_level_variables(result):
        set_path(data, name, result.defaults.get(name, ""))

    for loop in result.loops:
        if loop.collection_name in data:
            continue
        data[loop.collection_name] = [
            {name: "" for name in loop_fields(result, loop.element_alias)}
        ]

    return data


def _has_value(data: Mapping[str, Any], name: str) -> bool:
    value = resolve_path(data, name)
    return value is not UNDEFINED and format_value(value) != ""


def defaults_in_use(result: ParseResult, data: Mapping[str, Any]) -> List[str]:
    """Переменные, значение которых берётся из блока defaults."""
    return [
        name for name in top_level_variables(result)
        if resolve_path(data, name) is UNDEFINED and result.defaults.get(name, "") != ""
    ]


def missing_values(result: ParseResult, data: Mapping[str, Any]) -> List[str]:
    """Переменные без значения ни в данных, ни в блоке defaults."""
    missing = []
    for name in top_level_variables(result):
        if _has_value(data, name):
            continue
        if resolve_path(data, name) is UNDEFINED and result.defaults.get(name, "") != "":
            continue
        missing.append(name)
    return missing


def scaffold_defaults(template: str) -> str:
    """
    Добавляет в начало шаблона пустой блок defaults со всеми переменными.

    Шаблон возвращается без изменений, если блок уже есть или переменных нет.
    """
    if find_defaults_block(template) is not None:
        return template

    names = top_level_variables(parse_template(template))
    if not names:
        return template

    lines = [DEFAULTS_OPEN]
    lines.extend(f"{name}: " for name in names)
    lines.append(DEFAULTS_CLOSE)
    return "\n".join(lines) + "\n\n" + template


__all__ = [
    "set_path",
    "top_level_variables",
    "loop_fields",
    "initial_data",
    "defaults_in_use",
    "missing_values",
    "scaffold_defaults",
]
