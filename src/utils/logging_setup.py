"""
Root logger configuration shared by the CLI and the API app.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

from config import get_settings


def setup_logging(level: Optional[Union[str, int]] = None, log_file: Optional[Path] = None) -> logging.Logger:
    """Console logging (plus an optional UTF-8 log file) on the root logger."""
    log_settings = get_settings().log
    level = level or log_settings.level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger()
    logger.setLevel(level)

    # 기존 핸들러 제거 (중복 방지)
    if logger.handlers:
        logger.handlers.clear()

    formatter = logging.Formatter(log_settings.format)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8", mode="w")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    return logger
