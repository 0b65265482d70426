"""
Схема JSON-отчёта команды `cfgtpl inspect`.

Отчёт потребляют внешние построители форм: имена переменных,
значения по умолчанию, циклы и условия.
"""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from .data import loop_fields, top_level_variables
from .template.parser import ParseResult


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Loop(_Schema):
    element_alias: str = Field(alias="elementAlias")
    collection_name: str = Field(alias="collectionName")
    item_fields: List[str] = Field(default_factory=list, alias="fields")
    source_start: int = Field(alias="sourceStart")
    source_end: int = Field(alias="sourceEnd")


class Conditional(_Schema):
    expression: str
    source_start: int = Field(alias="sourceStart")
    source_end: int = Field(alias="sourceEnd")


class Problem(_Schema):
    message: str
    line: int
    column: int


class InspectReport(_Schema):
    variables: List[str]
    top_level_variables: List[str] = Field(alias="topLevelVariables")
    defaults: Dict[str, str]
    loops: List[Loop]
    conditionals: List[Conditional]
    diagnostics: List[Problem]


def build_inspect_report(result: ParseResult) -> InspectReport:
    return InspectReport(
        variables=list(result.variables),
        top_level_variables=top_level_variables(result),
        defaults=dict(result.defaults),
        loops=[
            Loop(
                element_alias=loop.element_alias,
                collection_name=loop.collection_name,
                item_fields=loop_fields(result, loop.element_alias),
                source_start=loop.source_start,
                source_end=loop.source_end,
            )
            for loop in result.loops
        ],
        conditionals=[
            Conditional(
                expression=cond.expression,
                source_start=cond.source_start,
                source_end=cond.source_end,
            )
            for cond in result.conditionals
        ],
        diagnostics=[
            Problem(message=d.message, line=d.line, column=d.column)
            for d in result.diagnostics
        ],
    )


__all__ = ["InspectReport", "Loop", "Conditional", "Problem", "build_inspect_report"]
