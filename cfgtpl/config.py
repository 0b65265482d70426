from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .data import set_path
from .errors import ConfigLoadError, DataLoadError
from .export import DEFAULT_FILENAME, DEFAULT_SUFFIX

DEFAULT_CFG_FILE = "cfgtpl.yaml"

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# YAML loader (JSON является подмножеством YAML)
# --------------------------------------------------------------------------- #
_yaml = YAML(typ="safe")


class ToolConfig(BaseModel):
    """Настройки инструмента из cfgtpl.yaml."""
    model_config = ConfigDict(extra="forbid")

    output_dir: Optional[str] = None
    default_filename: str = DEFAULT_FILENAME
    artifact_suffix: str = DEFAULT_SUFFIX
    apply_defaults: bool = True
    require_values: bool = False
    warn_on_defaults: bool = True


# --------------------------------------------------------------------------- #
# HELPERS
# --------------------------------------------------------------------------- #
def _read_yaml_map(path: Path, error_cls: type) -> Dict[str, Any]:
    """Читает YAML/JSON файл и возвращает словарь верхнего уровня."""
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise error_cls(f"Cannot read {path}: {e}")
    except YAMLError as e:
        raise error_cls(f"Invalid YAML in {path}: {e}")

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise error_cls(f"YAML must be a mapping: {path}")
    return raw


# --------------------------------------------------------------------------- #
# PUBLIC API
# --------------------------------------------------------------------------- #
def load_config(path: Optional[Path] = None) -> ToolConfig:
    """
    Загрузить конфигурацию инструмента.

    • Если путь не указан — ищем cfgtpl.yaml в текущем каталоге.
    • Если файла нет — вернуть дефолты.
    • Неизвестные ключи и неверные типы — ConfigLoadError.
    """
    explicit = path is not None
    cfg_path = path if path is not None else Path.cwd() / DEFAULT_CFG_FILE

    if not cfg_path.is_file():
        if explicit:
            raise ConfigLoadError(f"Config file not found: {cfg_path}")
        return ToolConfig()

    raw = _read_yaml_map(cfg_path, ConfigLoadError)
    try:
        cfg = ToolConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid config {cfg_path}: {e}")

    logger.debug("Loaded config from %s", cfg_path)
    return cfg


def load_render_data(path: Path) -> Dict[str, Any]:
    """
    Загрузить данные рендеринга из YAML или JSON.

    Raises:
        DataLoadError: файл не читается или верхний уровень — не словарь
    """
    if not path.is_file():
        raise DataLoadError(f"Data file not found: {path}")
    return _read_yaml_map(path, DataLoadError)


def parse_assignments(assignments: Iterable[str]) -> Dict[str, Any]:
    """
    Разбирает значения вида `key=value` / `site.name=value` в словарь.
    """
    result: Dict[str, Any] = {}
    for item in assignments:
        key, sep, value = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise DataLoadError(f"Invalid assignment '{item}'. Expected 'key=value'")
        set_path(result, key, value)
    return result


def merge_data(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Глубокое слияние: значения override перекрывают base."""
    result: Dict[str, Any] = dict(base)
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = merge_data(current, value)
        else:
            result[key] = value
    return result


__all__ = [
    "DEFAULT_CFG_FILE",
    "ToolConfig",
    "load_config",
    "load_render_data",
    "parse_assignments",
    "merge_data",
]
