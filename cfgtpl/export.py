"""
Сохранение сгенерированной конфигурации.

Имя файла берётся из строки `hostname <имя>` в тексте конфигурации,
если она есть.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional

DEFAULT_FILENAME = "router-config.cfg"
DEFAULT_SUFFIX = ".cfg"

_HOSTNAME_RE = re.compile(r"hostname\s+(\S+)")
_UNSAFE_CHARS_RE = re.compile(r"[\\/:*?\"<>|]")

logger = logging.getLogger(__name__)


def extract_hostname(text: str) -> Optional[str]:
    """Возвращает первый токен после `hostname` или None."""
    match = _HOSTNAME_RE.search(text)
    return match.group(1) if match else None


def artifact_filename(
    text: str,
    default_filename: str = DEFAULT_FILENAME,
    suffix: str = DEFAULT_SUFFIX,
) -> str:
    """
    Имя файла для сохранения конфигурации.

    Символы, недопустимые в именах файлов, заменяются на "_".
    """
    hostname = extract_hostname(text)
    if not hostname:
        return default_filename
    return _UNSAFE_CHARS_RE.sub("_", hostname) + suffix


def write_artifact(
    text: str,
    directory: Path,
    default_filename: str = DEFAULT_FILENAME,
    suffix: str = DEFAULT_SUFFIX,
) -> Path:
    """
    Записывает конфигурацию в directory и возвращает путь к файлу.
    """
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / artifact_filename(text, default_filename, suffix)
    path.write_text(text, encoding="utf-8")
    logger.info("Configuration written to %s", path)
    return path


__all__ = ["DEFAULT_FILENAME", "DEFAULT_SUFFIX", "extract_hostname", "artifact_filename", "write_artifact"]
