from __future__ import annotations

import json
from typing import Any


def dumps(obj: Any) -> str:
    """
    JSON-дампер для ответов CLI.
    — ensure_ascii=False; отступ 2 для читаемости; без завершающего \\n (CLI решает сам).
    """
    return json.dumps(obj, ensure_ascii=False, indent=2)
