"""
Вычислитель условий для движка шаблонизации.

Связывает язык условий с областью видимости рендеринга. Любая ошибка
разбора или вычисления даёт ложный результат и пишется в лог.
"""

from __future__ import annotations

import logging
from typing import Dict

from .context import RenderScope
from ..conditions.evaluator import ConditionEvaluator, EvaluationError
from ..conditions.lexer import ConditionSyntaxError
from ..conditions.model import Expression
from ..conditions.parser import ConditionParser

logger = logging.getLogger(__name__)


class TemplateConditionEvaluator:
    """
    Оценщик условий для шаблонов.

    Пути в выражениях разрешаются в переданной области видимости,
    поэтому внутри цикла доступны поля текущего элемента.
    """

    def __init__(self, scope: RenderScope, cache: Dict[str, Expression] | None = None):
        self.scope = scope
        self.base_evaluator = ConditionEvaluator(scope.lookup)
        self._cache = cache if cache is not None else {}

    def evaluate_condition_text(self, condition_text: str) -> bool:
        """
        Вычисляет условие из текстового представления.

        Args:
            condition_text: Текст выражения из {% if ... %}

        Returns:
            Результат вычисления; False при любой ошибке
        """
        try:
            expression = self._cache.get(condition_text)
            if expression is None:
                expression = ConditionParser().parse(condition_text)
                self._cache[condition_text] = expression
            return self.base_evaluator.evaluate(expression)
        except (ConditionSyntaxError, EvaluationError) as e:
            logger.warning("Condition evaluation failed for %r: %s", condition_text, e)
            return False
        except RecursionError:
            # Слишком длинная цепочка && и ||
            logger.warning("Condition evaluation failed for %r: expression is too long", condition_text[:80])
            return False


__all__ = ["TemplateConditionEvaluator"]
