"""
cfgtpl — генератор текстовых конфигураций (например, конфигураций сетевых
устройств) из шаблонов с переменными, значениями по умолчанию, циклами
и условиями.

Основной API — чистые функции:

    result = parse_template(text)     # переменные, defaults, циклы, условия
    output = render_template(text, data)
"""

from __future__ import annotations

from .conditions import UNDEFINED, evaluate_condition_string
from .data import defaults_in_use, initial_data, missing_values, scaffold_defaults
from .defaults import extract_defaults
from .errors import CfgTplUserError
from .export import artifact_filename, extract_hostname, write_artifact
from .template import (
    Diagnostic,
    ParseResult,
    TemplateSyntaxError,
    parse_template,
    render_ast,
    render_template,
    resolve_path,
    scan_structure,
)
from .template.context import make_scope
from .template.evaluator import TemplateConditionEvaluator
from .template.structure import (
    ConditionalDescriptor,
    LoopDescriptor,
    StructureNode,
    Text,
    VariableRef,
    ForStart,
    ForEnd,
    IfStart,
    IfEnd,
)


def evaluate_condition(expression: str, data, defaults=None) -> bool:
    """
    Вычисляет выражение условия над данными так же, как при рендеринге:
    ошибки дают False и пишутся в лог.
    """
    return TemplateConditionEvaluator(make_scope(data, defaults)).evaluate_condition_text(expression)


__all__ = [
    "UNDEFINED",
    "CfgTplUserError",
    "ConditionalDescriptor",
    "Diagnostic",
    "ForEnd",
    "ForStart",
    "IfEnd",
    "IfStart",
    "LoopDescriptor",
    "ParseResult",
    "StructureNode",
    "TemplateSyntaxError",
    "Text",
    "VariableRef",
    "artifact_filename",
    "defaults_in_use",
    "evaluate_condition",
    "evaluate_condition_string",
    "extract_defaults",
    "extract_hostname",
    "initial_data",
    "missing_values",
    "parse_template",
    "render_ast",
    "render_template",
    "resolve_path",
    "scaffold_defaults",
    "scan_structure",
    "write_artifact",
]
