"""Сквозные тесты командной строки cfgtpl."""

from pathlib import Path

from conftest import jload, run_cli, write

EXPECTED_ROUTER = (
    "\n"
    "hostname core-sw1\n"
    "!\n"
    "vlan 10\n name MGMT\n"
    "vlan 20\n name USERS\n"
    "router ospf 1\n"
    "interface Vlan10\n"
)


def test_cli_inspect_json(tmpproj):
    cp = run_cli(tmpproj, "inspect", "router.tpl")
    assert cp.returncode == 0, cp.stderr
    data = jload(cp.stdout)

    assert data["variables"] == ["hostname", "vlan.id", "vlan.name", "mgmt_vlan"]
    assert data["topLevelVariables"] == ["hostname", "mgmt_vlan"]
    assert data["defaults"] == {"hostname": "R1", "mgmt_vlan": "10"}
    assert data["loops"] == [{
        "elementAlias": "vlan",
        "collectionName": "vlans",
        "fields": ["id", "name"],
        "sourceStart": 25,
        "sourceEnd": 48,
    }]
    assert [c["expression"] for c in data["conditionals"]] == ['ospf == "yes"']
    assert data["diagnostics"] == []


def test_cli_render_stdout(tmpproj):
    cp = run_cli(tmpproj, "render", "router.tpl", "--data", "data.yaml")
    assert cp.returncode == 0, cp.stderr
    assert cp.stdout == EXPECTED_ROUTER
    # mgmt_vlan взят из блока defaults
    assert "Using default values: mgmt_vlan='10'" in cp.stderr


def test_cli_render_set_overrides_data(tmpproj):
    cp = run_cli(tmpproj, "render", "router.tpl", "-d", "data.yaml", "--set", "hostname=edge", "--set", "mgmt_vlan=99")
    assert cp.returncode == 0, cp.stderr
    assert "hostname edge\n" in cp.stdout
    assert cp.stdout.endswith("interface Vlan99\n")
    assert "Using default values" not in cp.stderr


def test_cli_render_without_defaults(tmpproj):
    cp = run_cli(tmpproj, "render", "router.tpl", "-d", "data.yaml", "--no-defaults")
    assert cp.returncode == 0, cp.stderr
    assert cp.stdout.endswith("interface Vlan\n")
    assert "Using default values" not in cp.stderr


def test_cli_render_require_values(tmpproj):
    cp = run_cli(tmpproj, "render", "router.tpl", "-d", "data.yaml", "--no-defaults", "--require-values")
    assert cp.returncode == 2
    assert cp.stdout == ""
    assert "Missing values for: mgmt_vlan" in cp.stderr


def test_cli_render_from_stdin(tmpproj):
    cp = run_cli(tmpproj, "render", "-", "--set", "name=x", stdin="n={{name}}")
    assert cp.returncode == 0, cp.stderr
    assert cp.stdout == "n=x"


def test_cli_render_output_file(tmpproj):
    cp = run_cli(tmpproj, "render", "router.tpl", "-d", "data.yaml", "-o", "out.cfg")
    assert cp.returncode == 0, cp.stderr
    assert cp.stdout == ""
    assert (tmpproj / "out.cfg").read_text(encoding="utf-8") == EXPECTED_ROUTER


def test_cli_render_save_uses_hostname(tmpproj):
    cp = run_cli(tmpproj, "render", "router.tpl", "-d", "data.yaml", "--save", "configs")
    assert cp.returncode == 0, cp.stderr

    path = Path(cp.stdout.strip())
    assert path.name == "core-sw1.cfg"
    assert (tmpproj / "configs" / "core-sw1.cfg").read_text(encoding="utf-8") == EXPECTED_ROUTER


def test_cli_render_config_output_dir(tmpproj):
    write(tmpproj / "cfgtpl.yaml", "output_dir: build\nartifact_suffix: .txt\nwarn_on_defaults: false\n")
    cp = run_cli(tmpproj, "render", "router.tpl", "-d", "data.yaml")
    assert cp.returncode == 0, cp.stderr
    assert (tmpproj / "build" / "core-sw1.txt").is_file()
    assert cp.stderr == ""


def test_cli_render_strict_nesting(tmpproj):
    write(tmpproj / "bad.tpl", "{% for p in ports %}{{p}}\n")

    cp = run_cli(tmpproj, "render", "bad.tpl")
    assert cp.returncode == 0, cp.stderr
    assert cp.stdout == "{% for p in ports %}\n"

    cp = run_cli(tmpproj, "render", "bad.tpl", "--strict")
    assert cp.returncode == 2
    assert "Unclosed 'for' block at 1:1" in cp.stderr


def test_cli_user_errors(tmpproj):
    cp = run_cli(tmpproj, "render", "missing.tpl")
    assert cp.returncode == 2
    assert "Template not found" in cp.stderr
    assert "Traceback" not in cp.stderr

    cp = run_cli(tmpproj, "render", "router.tpl", "--set", "broken")
    assert cp.returncode == 2
    assert "Expected 'key=value'" in cp.stderr

    cp = run_cli(tmpproj, "--config", "nope.yaml", "render", "router.tpl")
    assert cp.returncode == 2
    assert "Config file not found" in cp.stderr


def test_cli_scaffold(tmpproj):
    write(tmpproj / "plain.tpl", "hostname {{hostname}}\n")

    cp = run_cli(tmpproj, "scaffold", "plain.tpl")
    assert cp.returncode == 0, cp.stderr
    assert cp.stdout == "{% defaults %}\nhostname: \n{% enddefaults %}\n\nhostname {{hostname}}\n"
    assert (tmpproj / "plain.tpl").read_text(encoding="utf-8") == "hostname {{hostname}}\n"

    cp = run_cli(tmpproj, "scaffold", "plain.tpl", "--in-place")
    assert cp.returncode == 0, cp.stderr
    assert (tmpproj / "plain.tpl").read_text(encoding="utf-8").startswith("{% defaults %}\nhostname: \n")


def test_cli_check(tmpproj):
    cp = run_cli(tmpproj, "check", "router.tpl")
    assert cp.returncode == 0, cp.stderr
    assert cp.stdout == ""

    write(tmpproj / "bad.tpl", "{% if x %}A{% endfor %}\n{% if a == %}B{% endif %}\n")
    cp = run_cli(tmpproj, "check", "bad.tpl")
    assert cp.returncode == 1
    assert cp.stdout.splitlines() == [
        "1:12: Unexpected 'endfor' without matching 'for'",
        "1:1: Unclosed 'if' block",
        "2:1: invalid condition 'a ==': Unexpected end of expression",
    ]


def test_cli_version(tmpproj):
    cp = run_cli(tmpproj, "--version")
    assert cp.returncode == 0
    assert cp.stdout.startswith("cfgtpl ")
