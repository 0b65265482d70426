"""
Base exception for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from CfgTplUserError.

Programming errors and bugs should NOT inherit from CfgTplUserError —
they will propagate with full tracebacks.
"""

from __future__ import annotations


class CfgTplUserError(Exception):
    """
    Base class for all user-facing errors in cfgtpl.

    These errors indicate problems that the user can fix:
    broken template nesting, unreadable data files, invalid configuration,
    unfilled template variables, etc.
    """
    pass


class DataLoadError(CfgTplUserError):
    """Файл данных для рендеринга не читается или не является словарём."""
    pass


class ConfigLoadError(CfgTplUserError):
    """Ошибка загрузки конфигурации инструмента с указанием поля."""
    pass


class MissingValuesError(CfgTplUserError):
    """Рендеринг заблокирован: для части переменных не заданы значения."""

    def __init__(self, names: list[str]):
        super().__init__(f"Missing values for: {', '.join(names)}")
        self.names = names


__all__ = ["CfgTplUserError", "DataLoadError", "ConfigLoadError", "MissingValuesError"]
