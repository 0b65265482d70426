"""
Извлечение блока значений по умолчанию.

Блок имеет вид:

    {% defaults %}
    # комментарий
    hostname: "R1"
    mgmt_vlan: 10
    {% enddefaults %}

Распознаётся только первый блок. Содержимое разбирается как плоский
словарь «ключ → строка», сам блок вырезается из текста шаблона.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

DEFAULTS_OPEN = "{% defaults %}"
DEFAULTS_CLOSE = "{% enddefaults %}"

DefaultsMap = Dict[str, str]

logger = logging.getLogger(__name__)


def find_defaults_block(template: str) -> Optional[Tuple[int, int]]:
    """
    Находит границы блока defaults.

    Returns:
        (start, end), где end — позиция сразу после закрывающего маркера,
        либо None, если блока нет или он не закрыт
    """
    start = template.find(DEFAULTS_OPEN)
    if start == -1:
        return None

    close = template.find(DEFAULTS_CLOSE, start)
    if close == -1:
        logger.debug("Defaults block at %d has no closing marker, left as text", start)
        return None

    return start, close + len(DEFAULTS_CLOSE)


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def parse_defaults_body(body: str) -> DefaultsMap:
    """Разбирает строки «key: value» внутри блока defaults."""
    result: DefaultsMap = {}

    for raw_line in body.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        colon = line.find(":")
        if colon <= 0:
            logger.debug("Skipping defaults line without key: %r", line)
            continue

        key = line[:colon].strip()
        value = line[colon + 1:].strip()
        result[key] = _unquote(value)

    return result


def extract_defaults(template: str) -> Tuple[DefaultsMap, str]:
    """
    Извлекает значения по умолчанию и возвращает шаблон без блока defaults.

    Если открывающего или закрывающего маркера нет, шаблон
    возвращается без изменений, а словарь пуст.

    Args:
        template: Исходный текст шаблона

    Returns:
        Кортеж (словарь значений по умолчанию, текст без блока)
    """
    span = find_defaults_block(template)
    if span is None:
        return {}, template

    start, end = span
    body = template[start + len(DEFAULTS_OPEN):end - len(DEFAULTS_CLOSE)]
    defaults = parse_defaults_body(body)

    return defaults, template[:start] + template[end:]


__all__ = [
    "DEFAULTS_OPEN",
    "DEFAULTS_CLOSE",
    "DefaultsMap",
    "find_defaults_block",
    "parse_defaults_body",
    "extract_defaults",
]
