from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .api_schema import build_inspect_report
from .conditions.parser import ConditionParser, ConditionSyntaxError
from .config import load_config, load_render_data, merge_data, parse_assignments
from .data import defaults_in_use, missing_values, scaffold_defaults
from .errors import CfgTplUserError, MissingValuesError
from .export import write_artifact
from .jsonic import dumps as jdumps
from .template.parser import ParseResult, parse_template
from .template.renderer import render_ast
from .version import tool_version

logger = logging.getLogger("cfgtpl")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose or os.environ.get("CFGTPL_DEBUG") else logging.WARNING
    logger.setLevel(level)
    if not logger.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="cfgtpl",
        description="Configuration generator from {{ }} / {% %} templates",
        add_help=True,
    )
    p.add_argument("-V", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("-v", "--verbose", action="store_true", help="подробный лог (DEBUG) в stderr")
    p.add_argument("--config", metavar="FILE", help="файл настроек (по умолчанию ./cfgtpl.yaml)")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_template(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("template", help="путь к шаблону или - для чтения из stdin")

    sp_inspect = sub.add_parser("inspect", help="JSON-отчёт: переменные, defaults, циклы, условия")
    add_template(sp_inspect)

    sp_render = sub.add_parser("render", help="Сгенерировать конфигурацию")
    add_template(sp_render)
    sp_render.add_argument("-d", "--data", metavar="FILE", help="данные рендеринга (YAML или JSON)")
    sp_render.add_argument(
        "--set",
        action="append",
        metavar="KEY=VALUE",
        help="значение переменной, перекрывает данные из файла (можно указать несколько)",
    )
    sp_render.add_argument("--no-defaults", action="store_true", help="не использовать блок defaults")
    sp_render.add_argument(
        "--require-values",
        action="store_true",
        help="ошибка, если у переменных нет ни значения, ни значения по умолчанию",
    )
    sp_render.add_argument("--strict", action="store_true", help="ошибка при некорректной вложенности блоков")
    out = sp_render.add_mutually_exclusive_group()
    out.add_argument("-o", "--output", metavar="FILE", help="записать результат в файл")
    out.add_argument(
        "--save",
        metavar="DIR",
        help="сохранить в DIR под именем <hostname>.cfg (или имя по умолчанию)",
    )

    sp_scaffold = sub.add_parser("scaffold", help="Добавить пустой блок defaults со всеми переменными")
    add_template(sp_scaffold)
    sp_scaffold.add_argument("--in-place", action="store_true", help="перезаписать файл шаблона")

    sp_check = sub.add_parser("check", help="Проверить вложенность блоков и синтаксис условий")
    add_template(sp_check)
    sp_check.add_argument("--strict", action="store_true", help="остановиться на первой ошибке вложенности")

    return p


def _read_template(arg: str) -> str:
    """Читает шаблон из файла или stdin (-)."""
    if arg == "-":
        return sys.stdin.read()

    path = Path(arg)
    if not path.is_file():
        raise CfgTplUserError(f"Template not found: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise CfgTplUserError(f"Failed to read template {path}: {e}")


def _line_col(text: str, position: int) -> str:
    line = text.count("\n", 0, position) + 1
    column = position - (text.rfind("\n", 0, position) + 1) + 1
    return f"{line}:{column}"


def _check_problems(result: ParseResult) -> List[str]:
    problems = [str(d) for d in result.diagnostics]
    parser = ConditionParser()
    for cond in result.conditionals:
        try:
            parser.parse(cond.expression)
        except ConditionSyntaxError as e:
            problems.append(f"{_line_col(result.body, cond.source_start)}: invalid condition {cond.expression!r}: {e.message}")
    return problems


def _run_render(ns: argparse.Namespace) -> int:
    cfg = load_config(Path(ns.config) if ns.config else None)
    result = parse_template(_read_template(ns.template), strict=ns.strict)

    data = load_render_data(Path(ns.data)) if ns.data else {}
    data = merge_data(data, parse_assignments(ns.set or []))

    apply_defaults = cfg.apply_defaults and not ns.no_defaults
    if not apply_defaults:
        result = dataclasses.replace(result, defaults={})

    if ns.require_values or cfg.require_values:
        missing = missing_values(result, data)
        if missing:
            raise MissingValuesError(missing)

    if cfg.warn_on_defaults:
        in_use = defaults_in_use(result, data)
        if in_use:
            logger.warning(
                "Using default values: %s",
                ", ".join(f"{name}={result.defaults[name]!r}" for name in in_use),
            )

    output = render_ast(result.ast, data, result.defaults)

    if ns.output:
        Path(ns.output).write_text(output, encoding="utf-8")
        return 0

    save_dir = ns.save or cfg.output_dir
    if save_dir:
        path = write_artifact(output, Path(save_dir), cfg.default_filename, cfg.artifact_suffix)
        sys.stdout.write(f"{path}\n")
        return 0

    sys.stdout.write(output)
    return 0


def _run_scaffold(ns: argparse.Namespace) -> int:
    text = _read_template(ns.template)
    scaffolded = scaffold_defaults(text)

    if ns.in_place:
        if ns.template == "-":
            raise CfgTplUserError("--in-place cannot be used with stdin")
        if scaffolded != text:
            Path(ns.template).write_text(scaffolded, encoding="utf-8")
        return 0

    sys.stdout.write(scaffolded)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(ns.verbose)

    try:
        if ns.cmd == "inspect":
            result = parse_template(_read_template(ns.template))
            report = build_inspect_report(result)
            sys.stdout.write(jdumps(report.model_dump(by_alias=True)) + "\n")
            return 0

        if ns.cmd == "render":
            return _run_render(ns)

        if ns.cmd == "scaffold":
            return _run_scaffold(ns)

        if ns.cmd == "check":
            result = parse_template(_read_template(ns.template), strict=ns.strict)
            problems = _check_problems(result)
            for problem in problems:
                sys.stdout.write(problem + "\n")
            return 1 if problems else 0

    except CfgTplUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
