from __future__ import annotations

import logging
import sys

import structlog


def resolve_level(name: str | int) -> int:
    """將等級名稱轉為 logging 數值。"""

    if isinstance(name, int):
        return name
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"未知的日誌等級：{name}")
    return level


def _stderr_logger(*_: object) -> structlog.PrintLogger:
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(level: str | int = logging.INFO) -> None:
    """設定結構化日誌格式。"""

    numeric_level = resolve_level(level)
    logging.basicConfig(
        level=numeric_level,
        format="%(message)s",
    )
    # stdout 保留給 CLI 的查詢輸出
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=_stderr_logger,
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
    )
