"""
Движок шаблонов конфигураций.

Плейсхолдеры {{path}}, циклы {% for x in items %}, условия {% if expr %}
и блок значений по умолчанию {% defaults %}.
"""

from __future__ import annotations

from .context import RenderScope, format_value, resolve_path
from .parser import Diagnostic, ParseResult, TemplateSyntaxError, parse_template, scan_structure
from .renderer import render_ast, render_template

__all__ = [
    "Diagnostic",
    "ParseResult",
    "RenderScope",
    "TemplateSyntaxError",
    "format_value",
    "parse_template",
    "render_ast",
    "render_template",
    "resolve_path",
    "scan_structure",
]
