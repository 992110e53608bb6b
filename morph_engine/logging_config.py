"""
logging_config.py - 로깅 설정

환경 변수로 설정:
- LOG_LEVEL: 로그 레벨 (DEBUG, INFO, WARNING, ERROR). 기본값: INFO
- LOG_FORMAT: 출력 형식 ('text' 또는 'json'). 기본값: text

사용법:
    from morph_engine.logging_config import configure_logging
    configure_logging()  # 프로그램 시작 시 한 번 호출
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


NAMESPACE = "morph_engine"

# LogRecord 기본 속성 (extra 필드 구분용)
_RESERVED_ATTRS = frozenset({
    "name", "msg", "args", "created", "levelname", "levelno", "pathname",
    "filename", "module", "exc_info", "exc_text", "stack_info", "lineno",
    "funcName", "thread", "threadName", "processName", "process", "message",
    "msecs", "relativeCreated", "taskName",
})


class JSONFormatter(logging.Formatter):
    """한 줄짜리 JSON 로그"""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.levelno in (logging.DEBUG, logging.ERROR, logging.CRITICAL):
            log_data["source"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra_keys = set(record.__dict__) - _RESERVED_ATTRS
        if extra_keys:
            log_data["extra"] = {k: record.__dict__[k] for k in sorted(extra_keys)}

        return json.dumps(log_data, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """
    텍스트 로그
    형식: 시각 레벨 [로거] 메시지 (DEBUG/ERROR는 파일:줄 추가)
    """

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        level = record.levelname

        if self.use_colors:
            level_str = f"{self.LEVEL_COLORS.get(level, '')}{level:8s}{self.RESET}"
        else:
            level_str = f"{level:8s}"

        # 'morph_engine.' 접두사 생략
        logger_name = record.name
        if logger_name.startswith(NAMESPACE + "."):
            logger_name = logger_name[len(NAMESPACE) + 1:]

        parts = [f"{timestamp} {level_str} [{logger_name}] {record.getMessage()}"]

        if record.levelno in (logging.DEBUG, logging.ERROR, logging.CRITICAL):
            parts.append(f" ({record.filename}:{record.lineno})")

        if record.exc_info:
            parts.append(f"\n{self.formatException(record.exc_info)}")

        return "".join(parts)


def get_log_level() -> int:
    """LOG_LEVEL 환경 변수 -> logging 레벨 상수 (잘못된 값이면 INFO)"""
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "WARN": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return level_map.get(level_name, logging.INFO)


def get_log_format() -> str:
    """LOG_FORMAT 환경 변수 -> 'text' 또는 'json'"""
    format_name = os.environ.get("LOG_FORMAT", "text").lower()
    if format_name not in ("text", "json"):
        return "text"
    return format_name


def configure_logging(
    level: Optional[int] = None,
    format_type: Optional[str] = None,
    use_colors: bool = True
) -> logging.Logger:
    """
    morph_engine 네임스페이스 로거 설정

    Args:
        level: 로그 레벨 (None이면 LOG_LEVEL 사용)
        format_type: 'text' 또는 'json' (None이면 LOG_FORMAT 사용)
        use_colors: 텍스트 형식에서 색상 사용 (stderr가 TTY일 때만)

    Returns:
        설정된 네임스페이스 루트 로거
    """
    if level is None:
        level = get_log_level()
    if format_type is None:
        format_type = get_log_format()

    handler = logging.StreamHandler(sys.stderr)
    if format_type == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter(use_colors=use_colors))

    root_logger = logging.getLogger(NAMESPACE)
    root_logger.setLevel(level)
    # 중복 핸들러 방지
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False

    # matplotlib 폰트 탐색 로그 억제
    logging.getLogger("matplotlib").setLevel(logging.WARNING)

    root_logger.debug(
        "Logging configured: level=%s, format=%s",
        logging.getLevelName(level), format_type
    )
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """morph_engine 네임스페이스 아래 로거 반환"""
    if not name.startswith(NAMESPACE):
        name = f"{NAMESPACE}.{name}"
    return logging.getLogger(name)
