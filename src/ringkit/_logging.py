"""ringkit._logging
===================
Вспомогательная настройка логирования для приложений.

Сама библиотека только пишет в логгеры `ringkit.*` и не настраивает
обработчики (на пакетном логгере висит NullHandler).
"""

import logging

__all__ = ["setup_basic_logger"]


def setup_basic_logger(name: str = "ringkit", level: int = logging.INFO) -> logging.Logger:
    """
    Возвращает логгер со StreamHandler и компактным форматтером.

    Повторный вызов не добавляет второй обработчик.
    """
    logger = logging.getLogger(name)
    if logger.handlers and not all(isinstance(h, logging.NullHandler) for h in logger.handlers):
        return logger
    logger.setLevel(level)
    ch = logging.StreamHandler()
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
    ch.setFormatter(fmt)
    logger.addHandler(ch)
    return logger
