# agro_registry/utils/logger.py
# Logger único da aplicação: console + arquivo rotativo seguro entre processos.

import logging
import os
import sys

from concurrent_log_handler import ConcurrentRotatingFileHandler

LOGGER_NAME = "AgroRegistry"
LOG_FILE = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))), "logs", "app.log"
)
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d | %(funcName)s] - %(message)s'
LOG_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_BACKUP_COUNT = 10


def _resolve_level(level) -> int:
    numeric_level = logging.getLevelName(str(level).strip().upper())
    return numeric_level if isinstance(numeric_level, int) else logging.DEBUG


def _build_logger() -> logging.Logger:
    app_logger = logging.getLogger(LOGGER_NAME)
    # LOG_LEVEL é lido do ambiente aqui; o Config reaplica via configure_logger no create_app.
    app_logger.setLevel(_resolve_level(os.environ.get("LOG_LEVEL", "DEBUG")))
    if app_logger.handlers:
        return app_logger

    formatter = logging.Formatter(LOG_FORMAT)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    try:
        os.makedirs(os.path.dirname(LOG_FILE), exist_ok=True)
        file_handler = ConcurrentRotatingFileHandler(
            filename=LOG_FILE,
            mode='a',
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding='utf-8',
        )
        file_handler.setFormatter(formatter)
        app_logger.addHandler(file_handler)
    except OSError as e:
        app_logger.warning(f"Log em arquivo desativado ({LOG_FILE}): {e}")
    return app_logger


logger = _build_logger()


def configure_logger(level: str) -> int:
    """Reaplica o nível do logger global. Níveis desconhecidos caem para DEBUG."""
    numeric_level = _resolve_level(level)
    logger.setLevel(numeric_level)
    return numeric_level
