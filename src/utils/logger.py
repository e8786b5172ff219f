"""日志工具模块.

控制台彩色输出 + 数据目录下的轮转日志文件。根日志记录器只配置一次，
各模块通过 ``setup_logger(__name__)`` 获取自己的记录器。
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from src.utils.constants import LOG_DIR

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%H:%M:%S"

LOG_FILE_NAME = "composer.log"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024  # 5MB
LOG_FILE_BACKUP_COUNT = 3

_log_level: int = logging.INFO
_root_configured: bool = False


class ColoredFormatter(logging.Formatter):
    """按级别着色的控制台格式化器."""

    COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # 复制一份，避免彩色级别名写进文件日志
        colored = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelno, "")
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def _file_handler(log_dir: Path) -> Optional[logging.Handler]:
    """创建轮转文件处理器，目录不可写时返回 None."""
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError:
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    return handler


def _configure_root_logger() -> None:
    global _root_configured
    if _root_configured:
        return

    root = logging.getLogger()
    root.setLevel(_log_level)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(ColoredFormatter(LOG_FORMAT, DATE_FORMAT))
    root.addHandler(console)

    file_handler = _file_handler(LOG_DIR)
    if file_handler is not None:
        root.addHandler(file_handler)
    else:
        root.warning(f"日志目录不可写，仅输出到控制台: {LOG_DIR}")

    _root_configured = True


def setup_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """获取模块日志记录器.

    Args:
        name: 日志记录器名称，通常使用 __name__
        level: 日志级别，默认跟随全局级别

    Returns:
        日志记录器
    """
    _configure_root_logger()
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger


def set_log_level(level: int | str) -> None:
    """设置全局日志级别.

    Args:
        level: 级别数值或名称（如 "DEBUG"）
    """
    global _log_level
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    _log_level = level
    logging.getLogger().setLevel(level)
