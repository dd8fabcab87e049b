"""
chart.log
控制台日志：与采集脚本一致的 `[模块] 消息` 风格输出。
"""

from __future__ import annotations

import logging
import sys

LOGGER_NAMES = ("chart", "browser")
LOG_FORMAT = "[%(name)s] %(levelname)s %(message)s"


def setup_logging(verbose: bool = True) -> None:
    """为本项目的顶层 logger 安装同一个 stderr handler（重复调用只更新级别）。"""
    level = logging.INFO if verbose else logging.WARNING
    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        if not any(getattr(h, "_chart_handler", False) for h in logger.handlers):
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            handler._chart_handler = True  # type: ignore[attr-defined]
            logger.addHandler(handler)
        logger.propagate = False
