"""
Logging — централизованные логгеры hypernum

Библиотека не настраивает handlers сама: корневой логгер пакета несёт
NullHandler. Приложение может вызвать configure_logging() для вывода в консоль.

Использование:
    from hypernum.logging_config import get_logger

    logger = get_logger(__name__)
    logger.debug("power overflow at step %d", step)
"""

import logging
import sys
from typing import Final

ROOT_LOGGER_NAME: Final[str] = "hypernum"

# Формат: [TIMESTAMP] [LEVEL] [COMPONENT] MESSAGE
LOG_FORMAT: Final[str] = "[%(asctime)s] [%(levelname)-8s] [%(name)s] %(message)s"
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """
    Логгер в пространстве имён hypernum.

    Args:
        name: Имя модуля (обычно __name__)

    Returns:
        logging.Logger с именем "hypernum.<...>"
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Подключение консольного handler к корневому логгеру пакета.

    Повторный вызов не дублирует handler, только меняет уровень.

    Args:
        level: Уровень логирования

    Returns:
        Корневой логгер hypernum
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)

    for handler in root.handlers:
        if getattr(handler, "_hypernum_console", False):
            handler.setLevel(level)
            return root

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    handler.setLevel(level)
    handler._hypernum_console = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    return root
