"""ringkit._config
==================
Глобальные настройки по умолчанию и их загрузка из JSON.

Настройки влияют только на значения по умолчанию (`cached=None`,
`model=None`, `check=None`); явно переданные аргументы всегда важнее.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

__all__ = [
    "DEFAULT_CONFIG",
    "get_option",
    "configure",
    "reset_config",
    "load_config",
]

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "cache_parents": True,           # cached=None -> брать родителя из реестра
    "series_model": "capped_absolute",
    "check_exact": True,             # divexact(..., check=None)
    "check_sqrt": True,              # sqrt(check=None)
}

_current: Dict[str, Any] = dict(DEFAULT_CONFIG)


def get_option(name: str) -> Any:
    """Возвращает текущее значение настройки `name`."""
    try:
        return _current[name]
    except KeyError:
        raise KeyError(f"unknown ringkit option: {name!r}") from None


def configure(**overrides: Any) -> Dict[str, Any]:
    """Переопределяет настройки и возвращает предыдущие значения изменённых ключей."""
    unknown = set(overrides) - set(DEFAULT_CONFIG)
    if unknown:
        raise KeyError(f"unknown ringkit options: {sorted(unknown)}")
    previous = {k: _current[k] for k in overrides}
    _current.update(overrides)
    logger.debug("ringkit options updated: %s", overrides)
    return previous


def reset_config() -> None:
    _current.clear()
    _current.update(DEFAULT_CONFIG)


def load_config(path: str, base: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Загружает JSON-файл настроек и сливает его с `base` (поверхностно).

    :param path: путь к JSON-файлу
    :param base: исходный словарь (если None, берётся DEFAULT_CONFIG)
    :return: итоговый словарь; текущие настройки НЕ меняются, для этого
             передайте результат в `configure(**cfg)`
    """
    merged = dict(base) if base is not None else dict(DEFAULT_CONFIG)
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with p.open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    for k, v in data.items():
        merged[k] = v
    return merged
