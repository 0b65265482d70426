"""
Integration tests for the conditions system.

Tests the full pipeline inside templates: parsing -> evaluation
against render data, loop bindings and defaults.
"""

import logging

import pytest

from cfgtpl import evaluate_condition
from cfgtpl.conditions import ConditionParser, ConditionSyntaxError
from cfgtpl.template.context import make_scope
from cfgtpl.template.evaluator import TemplateConditionEvaluator


class TestConditionsIntegration:

    def test_end_to_end_pipeline(self):
        """Test full conditions processing pipeline"""
        data = {
            "role": "core",
            "ospf": "yes",
            "stack": {"members": 2},
            "ntp": "",
        }

        test_cases = [
            ("ospf", True),
            ("ntp", False),
            ('role == "core"', True),
            ("role === 'core'", True),
            ("role !== 'core'", False),
            ("stack.members > 1", True),
            ("stack.members == '2'", True),
            ("role == 'core' and not ntp", True),
            ("(role == 'edge' or ospf == 'yes') && stack.members < 3", True),
            ("missing", False),
            ("!missing", True),
        ]

        for condition, expected in test_cases:
            assert evaluate_condition(condition, data) is expected, condition

    def test_defaults_are_used(self):
        assert evaluate_condition("role == 'core'", {}, {"role": "core"}) is True
        assert evaluate_condition("role == 'core'", {"role": "edge"}, {"role": "core"}) is False

    def test_loop_binding(self):
        scope = make_scope({"enabled": False}).child("port", {"enabled": True})
        evaluator = TemplateConditionEvaluator(scope)

        assert evaluator.evaluate_condition_text("port.enabled") is True
        assert evaluator.evaluate_condition_text("enabled") is False

    @pytest.mark.parametrize("condition", [
        "",
        "a ==",
        "a = 1",
        "role < 1",
        "os.system('id')",
    ])
    def test_errors_are_falsy(self, condition, caplog):
        with caplog.at_level(logging.WARNING, logger="cfgtpl"):
            assert evaluate_condition(condition, {"role": "core"}) is False
        assert "Condition evaluation failed" in caplog.text

    def test_parsed_expressions_are_cached(self):
        cache = {}
        evaluator = TemplateConditionEvaluator(make_scope({"a": 1}), cache)

        assert evaluator.evaluate_condition_text("a == 1") is True
        assert list(cache) == ["a == 1"]

        # Cached AST is reused for another scope
        other = TemplateConditionEvaluator(make_scope({"a": 2}), cache)
        assert other.evaluate_condition_text("a == 1") is False

    def test_syntax_error_is_user_error(self):
        from cfgtpl.errors import CfgTplUserError

        with pytest.raises(CfgTplUserError):
            ConditionParser().parse("a &&")
        assert issubclass(ConditionSyntaxError, CfgTplUserError)

    @pytest.mark.parametrize("condition", [
        "!" * 1200 + "a",
        "(" * 300 + "a" + ")" * 300,
        " && ".join(["a"] * 5000),
    ])
    def test_oversized_expressions_are_falsy(self, condition, caplog):
        """Deep nesting and very long chains fail closed instead of raising"""
        with caplog.at_level(logging.WARNING, logger="cfgtpl"):
            assert evaluate_condition(condition, {"a": 1}) is False
        assert "Condition evaluation failed" in caplog.text

    def test_oversized_expression_in_template(self):
        from cfgtpl import render_template

        template = "[{% if " + "!" * 1200 + "a %}X{% endif %}]"
        assert render_template(template, {"a": 1}) == "[]"
