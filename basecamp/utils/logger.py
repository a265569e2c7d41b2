"""basecamp 日志配置

支持普通文本和结构化 JSON 两种输出格式，CLI 的 -v 计数映射到日志级别。
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

# -v 次数 -> 日志级别
_VERBOSITY_LEVELS = ("ERROR", "WARNING", "INFO", "DEBUG")


class JSONFormatter(logging.Formatter):
    """结构化 JSON 日志格式器

    输出格式:
        {
            "timestamp": "2024-01-01T12:00:00+00:00",
            "level": "INFO",
            "logger": "basecamp.services.install_service",
            "message": "log message",
            "thread": "ThreadPoolExecutor-0_1",
            "exception": "traceback..." (仅在有异常时)
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            # 并行克隆时用于区分 worker
            "thread": record.threadName,
        }
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


def level_from_verbosity(verbosity: int) -> str:
    """将 -v 次数映射为日志级别名

    0 -> ERROR, 1 -> WARNING, 2 -> INFO, 3 及以上 -> DEBUG
    """
    index = min(max(verbosity, 0), len(_VERBOSITY_LEVELS) - 1)
    return _VERBOSITY_LEVELS[index]


def setup_logging(level: str = "ERROR", json_output: bool = False) -> None:
    """配置根日志器

    参数:
        level: 日志级别字符串（DEBUG, INFO, WARNING, ERROR, CRITICAL）
        json_output: 为 True 时使用 JSON 格式，否则使用人类可读格式

    说明:
        - 输出到 stderr，不干扰 stdout 上的进度与表格
        - 自动清理已有 handlers，避免重复输出
    """
    root = logging.getLogger()

    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()

    root.setLevel(getattr(logging, level.upper(), logging.ERROR))

    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        fmt = "%(asctime)s [%(levelname)-7s] %(name)s (%(threadName)s): %(message)s"
        handler.setFormatter(logging.Formatter(fmt))

    root.addHandler(handler)
