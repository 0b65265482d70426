"""
Рендерер шаблонов.

Обходит дерево блоков и вычисляет каждый узел в текущей области видимости:
- переменные подставляются по точечному пути
- циклы повторяют тело для каждого элемента коллекции, связывая псевдоним
  с элементом
- условия оставляют тело только при истинном выражении

Плейсхолдеры вида {{item.field}} разрешаются только внутри того цикла,
который связывает item, поэтому поля элементов не теряются до разворачивания
цикла.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .context import RenderContext, RenderScope, make_scope
from .evaluator import TemplateConditionEvaluator
from .nodes import TemplateAST, TemplateNode, TextNode, VariableNode, ForBlockNode, IfBlockNode
from .parser import parse_template
from ..conditions.model import Expression

logger = logging.getLogger(__name__)


class TemplateRenderer:
    """
    Рендерер AST шаблона.
    """

    def __init__(self, scope: RenderScope):
        self.scope = scope
        # Разобранные выражения условий переиспользуются между итерациями
        self._condition_cache: Dict[str, Expression] = {}

    def render(self, ast: TemplateAST) -> str:
        """Рендерит список узлов в текст."""
        return self._render_nodes(ast, self.scope)

    def _render_nodes(self, nodes: Sequence[TemplateNode], scope: RenderScope) -> str:
        parts: List[str] = []
        for node in nodes:
            rendered = self._render_node(node, scope)
            if rendered:
                parts.append(rendered)
        return "".join(parts)

    def _render_node(self, node: TemplateNode, scope: RenderScope) -> str:
        if isinstance(node, TextNode):
            return node.text
        if isinstance(node, VariableNode):
            return scope.lookup_text(node.name)
        if isinstance(node, ForBlockNode):
            return self._render_for(node, scope)
        if isinstance(node, IfBlockNode):
            return self._render_if(node, scope)

        logger.warning("No renderer for node type: %s", type(node).__name__)
        return ""

    def _render_for(self, node: ForBlockNode, scope: RenderScope) -> str:
        items = _as_sequence(scope.lookup(node.collection_name))
        if items is None:
            logger.debug("Collection %r is not a list, loop skipped", node.collection_name)
            return ""

        return "".join(
            self._render_nodes(node.body, scope.child(node.element_alias, item))
            for item in items
        )

    def _render_if(self, node: IfBlockNode, scope: RenderScope) -> str:
        evaluator = TemplateConditionEvaluator(scope, self._condition_cache)
        if evaluator.evaluate_condition_text(node.expression):
            return self._render_nodes(node.body, scope)
        return ""


def _as_sequence(value: Any) -> Optional[Sequence[Any]]:
    if isinstance(value, (list, tuple)):
        return value
    return None


def render_ast(
    ast: TemplateAST,
    data: Optional[RenderContext],
    defaults: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Рендерит уже разобранный AST.

    Args:
        ast: Дерево блоков (ParseResult.ast)
        data: Данные рендеринга
        defaults: Значения по умолчанию для переменных, отсутствующих в data
    """
    return TemplateRenderer(make_scope(data, defaults)).render(ast)


def render_template(
    template: str,
    data: Optional[RenderContext],
    *,
    apply_defaults: bool = True,
    strict: bool = False,
) -> str:
    """
    Рендерит шаблон с данными.

    Блок defaults в результат не попадает; его значения используются для
    переменных, которых нет в data (если apply_defaults).

    Args:
        template: Исходный текст шаблона
        data: Данные рендеринга
        apply_defaults: Подставлять значения по умолчанию
        strict: Бросать TemplateSyntaxError при некорректной вложенности

    Returns:
        Итоговый текст
    """
    result = parse_template(template, strict=strict)
    defaults = result.defaults if apply_defaults else None
    return render_ast(result.ast, data, defaults)


__all__ = ["TemplateRenderer", "render_ast", "render_template"]
