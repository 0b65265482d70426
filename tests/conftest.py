import json
import os
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent

ROUTER_TEMPLATE = textwrap.dedent("""\
    {% defaults %}
    # базовые значения
    hostname: "R1"
    mgmt_vlan: 10
    {% enddefaults %}
    hostname {{hostname}}
    !
    {% for vlan in vlans %}vlan {{vlan.id}}
     name {{vlan.name}}
    {% endfor %}{% if ospf == "yes" %}router ospf 1
    {% endif %}interface Vlan{{mgmt_vlan}}
    """)


def write(p: Path, text: str) -> Path:
    """Записывает текст в файл, создавая родительские директории при необходимости."""
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


@pytest.fixture
def router_template() -> str:
    return ROUTER_TEMPLATE


@pytest.fixture
def tmpproj(tmp_path: Path):
    """Каталог с шаблоном маршрутизатора и файлом данных."""
    write(tmp_path / "router.tpl", ROUTER_TEMPLATE)
    write(
        tmp_path / "data.yaml",
        textwrap.dedent("""
        hostname: core-sw1
        ospf: "yes"
        vlans:
          - id: 10
            name: MGMT
          - id: 20
            name: USERS
        """).strip() + "\n",
    )
    return tmp_path


def run_cli(root: Path, *args: str, stdin: str | None = None) -> subprocess.CompletedProcess:
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(PROJECT_ROOT), env.get("PYTHONPATH", "")]))
    return subprocess.run(
        [sys.executable, "-m", "cfgtpl.cli", *args],
        cwd=root, env=env, capture_output=True, text=True, encoding="utf-8", input=stdin,
    )


def jload(s: str):
    return json.loads(s)
