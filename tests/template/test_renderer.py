"""Тесты рендеринга шаблонов."""

import logging

import pytest

from cfgtpl.template.parser import TemplateSyntaxError, parse_template
from cfgtpl.template.renderer import render_ast, render_template


class TestVariables:

    def test_template_without_placeholders_unchanged(self):
        template = "interface Gi0/1\n description uplink\n"
        assert render_template(template, {}) == template

    def test_every_occurrence_replaced(self):
        template = "{{x}}-{x}-{{x}} {{ x }}"
        assert render_template(template, {"x": "v"}) == "v-{x}-v v"

    def test_dotted_path(self):
        data = {"site": {"mgmt": {"vlan": 99}}}
        assert render_template("vlan {{site.mgmt.vlan}}", data) == "vlan 99"

    def test_unresolved_becomes_empty(self):
        assert render_template("[{{missing}}][{{a.b.c}}]", {"a": {"b": "scalar"}}) == "[][]"

    def test_scalar_formatting(self):
        data = {"t": True, "f": False, "n": None, "zero": 0, "lst": [1, 2], "map": {"k": "v"}}
        template = "{{t}} {{f}} [{{n}}] {{zero}} [{{lst}}] [{{map}}]"
        assert render_template(template, data) == "true false [] 0 [] []"

    def test_defaults_fill_missing_values(self):
        template = "{% defaults %}\nhostname: R1\n{% enddefaults %}hostname {{hostname}}"

        assert render_template(template, {}) == "hostname R1"
        assert render_template(template, {"hostname": "R2"}) == "hostname R2"
        assert render_template(template, {}, apply_defaults=False) == "hostname "

    def test_explicit_empty_value_not_replaced_by_default(self):
        template = "{% defaults %}\nx: d\n{% enddefaults %}[{{x}}]"
        assert render_template(template, {"x": ""}) == "[]"

    def test_none_data(self):
        assert render_template("a{{b}}", None) == "a"

    def test_stray_directive_opener_keeps_placeholders(self):
        template = "banner motd 100{% load\nhostname {{x}}\n"
        assert render_template(template, {"x": "R1"}) == "banner motd 100{% load\nhostname R1\n"


class TestLoops:

    def test_cardinality_and_order(self):
        template = "{% for v in vlans %}vlan {{v.id}} name {{v.name}}\n{% endfor %}"
        data = {"vlans": [{"id": 10, "name": "MGMT"}, {"id": 20, "name": "USERS"}, {"id": 30, "name": "VOICE"}]}

        assert render_template(template, data) == (
            "vlan 10 name MGMT\n"
            "vlan 20 name USERS\n"
            "vlan 30 name VOICE\n"
        )

    @pytest.mark.parametrize("data", [{}, {"items": []}, {"items": "not a list"}, {"items": {"a": 1}}])
    def test_empty_or_unresolved_collection(self, data):
        template = "A{% for i in items %}X{{i.v}}{% endfor %}B"
        assert render_template(template, data) == "AB"

    def test_missing_field_is_empty(self):
        template = "{% for i in items %}[{{i.name}}]{% endfor %}"
        assert render_template(template, {"items": [{"name": "a"}, {}]}) == "[a][]"

    def test_top_level_variables_inside_loop(self):
        template = "{% for p in ports %}{{p.name}}@{{hostname}};{% endfor %}"
        data = {"hostname": "sw1", "ports": [{"name": "Gi0/1"}, {"name": "Gi0/2"}]}

        assert render_template(template, data) == "Gi0/1@sw1;Gi0/2@sw1;"

    def test_loop_scoped_placeholder_resolved_per_element(self):
        """
        Поле элемента ({{item.name}}) разрешается внутри цикла, а не
        подставляется заранее из верхнего уровня данных.
        """
        template = "{% for item in items %}name={{item.name}}\n{% endfor %}"
        data = {"items": [{"name": "alpha"}, {"name": "beta"}]}

        assert render_template(template, data) == "name=alpha\nname=beta\n"

    def test_alias_shadows_top_level_key(self):
        template = "{{item.name}}|{% for item in items %}{{item.name}}|{% endfor %}{{item.name}}"
        data = {"item": {"name": "top"}, "items": [{"name": "inner"}]}

        assert render_template(template, data) == "top|inner|top"

    def test_scalar_elements(self):
        template = "{% for host in hosts %}ntp server {{host}}\n{% endfor %}"
        assert render_template(template, {"hosts": ["10.0.0.1", "10.0.0.2"]}) == (
            "ntp server 10.0.0.1\nntp server 10.0.0.2\n"
        )

    def test_nested_loops(self):
        template = (
            "{% for s in switches %}{{s.name}}:"
            "{% for p in ports %}{{s.name}}/{{p}} {% endfor %}\n"
            "{% endfor %}"
        )
        data = {"switches": [{"name": "a"}, {"name": "b"}], "ports": [1, 2]}

        assert render_template(template, data) == "a:a/1 a/2 \nb:b/1 b/2 \n"


class TestConditionals:

    @pytest.mark.parametrize("a, b, expected", [
        ("x", "x", "X"),
        ("x", "y", ""),
        ("1", 1, "X"),
        (None, None, "X"),
    ])
    def test_truth_table(self, a, b, expected):
        assert render_template("{% if a == b %}X{% endif %}", {"a": a, "b": b}) == expected

    def test_unresolved_operands_are_equal(self):
        assert render_template("{% if a == b %}X{% endif %}", {}) == "X"

    def test_malformed_expression_renders_empty_and_logs(self, caplog):
        with caplog.at_level(logging.WARNING, logger="cfgtpl"):
            assert render_template("[{% if a == = b %}X{% endif %}]", {"a": 1}) == "[]"
        assert "Condition evaluation failed" in caplog.text

    def test_incomparable_values_are_falsy(self, caplog):
        with caplog.at_level(logging.WARNING, logger="cfgtpl"):
            assert render_template("{% if a < b %}X{% endif %}", {"a": "x", "b": 1}) == ""
        assert "Cannot compare" in caplog.text

    def test_code_is_not_executed(self):
        template = "{% if __import__('os').system('echo hi') %}X{% endif %}"
        assert render_template(template, {}) == ""

    def test_condition_inside_loop_sees_element(self):
        template = "{% for p in ports %}{% if p.enabled == true %}no {% endif %}shutdown {{p.name}}\n{% endfor %}"
        data = {"ports": [{"name": "Gi1", "enabled": True}, {"name": "Gi2", "enabled": False}]}

        assert render_template(template, data) == "no shutdown Gi1\nshutdown Gi2\n"

    def test_defaults_visible_in_conditions(self):
        template = "{% defaults %}\nrole: core\n{% enddefaults %}{% if role == 'core' %}X{% endif %}"
        assert render_template(template, {}) == "X"

    def test_body_rendered_with_variables(self):
        template = "{% if ospf %}router ospf {{pid}}\n{% endif %}"
        assert render_template(template, {"ospf": "yes", "pid": 1}) == "router ospf 1\n"
        assert render_template(template, {"ospf": "", "pid": 1}) == ""


class TestWholeTemplates:

    def test_router_template(self, router_template):
        data = {
            "hostname": "core-sw1",
            "ospf": "yes",
            "vlans": [{"id": 10, "name": "MGMT"}, {"id": 20, "name": "USERS"}],
        }

        assert render_template(router_template, data) == (
            "\n"
            "hostname core-sw1\n"
            "!\n"
            "vlan 10\n name MGMT\n"
            "vlan 20\n name USERS\n"
            "router ospf 1\n"
            "interface Vlan10\n"
        )

    def test_rendered_output_reparses_empty(self, router_template):
        output = render_template(router_template, {"vlans": [{"id": 1, "name": "x"}]})
        result = parse_template(output)

        assert result.variables == ()
        assert result.loops == []
        assert result.conditionals == []

    def test_malformed_nesting_rendered_literally(self):
        template = "{% if x %}A{% endfor %}"
        assert render_template(template, {"x": True}) == "{% if x %}A{% endfor %}"

    def test_strict_render_raises(self):
        with pytest.raises(TemplateSyntaxError):
            render_template("{% for a in b %}", {}, strict=True)

    def test_render_ast_reuses_parse(self):
        result = parse_template("{% defaults %}\nn: 1\n{% enddefaults %}{{n}}")

        assert render_ast(result.ast, {}, result.defaults) == "1"
        assert render_ast(result.ast, {"n": 2}) == "2"
