"""로깅 설정 테스트"""

import json
import logging

import pytest

from morph_engine.logging_config import (
    JSONFormatter,
    TextFormatter,
    configure_logging,
    get_log_format,
    get_log_level,
    get_logger,
)


@pytest.fixture(autouse=True)
def restore_namespace_logger():
    """테스트 후 morph_engine 로거 상태 복원"""
    root = logging.getLogger("morph_engine")
    handlers, level, propagate = list(root.handlers), root.level, root.propagate
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    root.propagate = propagate


def make_record(level: int = logging.INFO, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="morph_engine.segmenter",
        level=level,
        pathname=__file__,
        lineno=10,
        msg="Segmented %d tokens",
        args=(3,),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestEnvironment:
    """환경 변수 해석"""

    @pytest.mark.parametrize(
        "value, expected",
        [("DEBUG", logging.DEBUG), ("warn", logging.WARNING), ("error", logging.ERROR), ("bogus", logging.INFO)],
    )
    def test_get_log_level(self, monkeypatch, value, expected) -> None:
        monkeypatch.setenv("LOG_LEVEL", value)
        assert get_log_level() == expected

    def test_get_log_level_default(self, monkeypatch) -> None:
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        assert get_log_level() == logging.INFO

    @pytest.mark.parametrize("value, expected", [("JSON", "json"), ("text", "text"), ("xml", "text")])
    def test_get_log_format(self, monkeypatch, value, expected) -> None:
        monkeypatch.setenv("LOG_FORMAT", value)
        assert get_log_format() == expected


class TestFormatters:
    """포매터 출력"""

    def test_json_formatter(self) -> None:
        data = json.loads(JSONFormatter().format(make_record(request_id="abc")))
        assert data["level"] == "INFO"
        assert data["logger"] == "morph_engine.segmenter"
        assert data["message"] == "Segmented 3 tokens"
        assert data["extra"] == {"request_id": "abc"}
        assert "source" not in data

    def test_json_formatter_debug_has_source(self) -> None:
        data = json.loads(JSONFormatter().format(make_record(logging.DEBUG)))
        assert data["source"]["line"] == 10

    def test_text_formatter_strips_namespace(self) -> None:
        line = TextFormatter(use_colors=False).format(make_record())
        assert "[segmenter] Segmented 3 tokens" in line
        assert "INFO" in line


class TestConfigureLogging:
    """네임스페이스 로거 설정"""

    def test_configure_json(self) -> None:
        root = configure_logging(level=logging.DEBUG, format_type="json")
        assert root.name == "morph_engine"
        assert root.level == logging.DEBUG
        assert root.propagate is False
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_configure_twice_keeps_one_handler(self) -> None:
        configure_logging(format_type="text")
        root = configure_logging(format_type="text")
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_get_logger_prefixes_namespace(self) -> None:
        assert get_logger("cli").name == "morph_engine.cli"
        assert get_logger("morph_engine.api").name == "morph_engine.api"
