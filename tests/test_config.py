import json
import logging

import pydantic
import pytest

from attendance_analytics.config.logging import (
    CustomJsonFormatter,
    build_logging_config,
    setup_logging,
)
from attendance_analytics.config.settings import DEFAULT_RISK_LEVEL_COLORS, Settings
from attendance_analytics.schemas.common.enums import RiskLevel
from attendance_analytics.services.analytics.summary_aggregation_service import (
    SummaryAggregationService,
)


class TestSettings:
    def test_defaults(self):
        config = Settings()

        assert config.GOOD_ATTENDANCE_THRESHOLD == 85
        assert config.PATTERN_WINDOW_SIZE == 3
        assert config.CUSTOM_RANGE_MAX_POINTS == 365
        assert config.LATE_RATE_CEILING == 25
        assert config.LARGE_DATASET_THRESHOLD == 100
        assert config.risk_color("high") == "#ef4444"
        assert config.risk_color("none") == "#10b981"

    def test_values_are_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("ENVIRONMENT", "Production")
        monkeypatch.setenv("GOOD_ATTENDANCE_THRESHOLD", "90")

        config = Settings()

        assert config.LOG_LEVEL == "DEBUG"
        assert config.is_production()
        assert not config.is_development()
        assert config.GOOD_ATTENDANCE_THRESHOLD == 90

    def test_risk_colors_merge_with_defaults(self, monkeypatch):
        monkeypatch.setenv("RISK_LEVEL_COLORS", json.dumps({"high": "#000000"}))
        colors = Settings().RISK_LEVEL_COLORS

        assert colors["high"] == "#000000"
        assert colors["low"] == DEFAULT_RISK_LEVEL_COLORS["low"]

    @pytest.mark.parametrize(
        "colors",
        ['{"low": "blue"}', '{"high": "#12345"}', '{"none": "#10b981\\n"}'],
    )
    def test_risk_colors_must_be_hex(self, colors):
        with pytest.raises(pydantic.ValidationError):
            Settings(RISK_LEVEL_COLORS=colors)

    def test_custom_colors_reach_risk_buckets(self, make_record):
        config = Settings(RISK_LEVEL_COLORS='{"low": "#ABCDEF"}')
        snapshot = SummaryAggregationService(config).aggregate([make_record(risk_level="low")])
        assert snapshot.risk_bucket(RiskLevel.LOW).color == "#ABCDEF"

    @pytest.mark.parametrize("field,value", [("ENVIRONMENT", "moon"), ("LOG_LEVEL", "LOUD")])
    def test_unknown_values_are_rejected(self, field, value):
        with pytest.raises(pydantic.ValidationError):
            Settings(**{field: value})

    def test_threshold_bounds(self):
        with pytest.raises(pydantic.ValidationError):
            Settings(GOOD_ATTENDANCE_THRESHOLD=120)


class TestLoggingConfig:
    def test_console_only_by_default(self):
        config = build_logging_config(Settings(ENVIRONMENT="production", LOG_LEVEL="WARNING"))

        assert list(config["handlers"]) == ["console"]
        assert config["handlers"]["console"]["formatter"] == "standard"
        assert config["handlers"]["console"]["level"] == "WARNING"
        assert config["loggers"]["attendance_analytics"]["handlers"] == ["console"]

    def test_development_uses_colored_console(self):
        config = build_logging_config(Settings(ENVIRONMENT="development", DEBUG=True))

        assert config["handlers"]["console"]["formatter"] == "colored"
        assert config["handlers"]["console"]["level"] == "DEBUG"

    def test_file_handlers(self, tmp_path):
        config = build_logging_config(Settings(LOG_TO_FILE=True, LOG_DIR=str(tmp_path)))

        assert set(config["handlers"]) == {"console", "file", "json_file"}
        assert config["handlers"]["json_file"]["formatter"] == "json"
        assert config["handlers"]["file"]["filename"] == str(tmp_path / "analytics.log")

    def test_setup_creates_log_directory(self, tmp_path):
        log_dir = tmp_path / "logs"
        logger = setup_logging(Settings(LOG_TO_FILE=True, LOG_DIR=str(log_dir)))

        try:
            assert log_dir.is_dir()
            assert logger.name == "attendance_analytics"
            assert (log_dir / "analytics.json.log").exists()
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
            logger.propagate = True

    def test_json_log_reports_configured_environment(self, tmp_path):
        config = Settings(ENVIRONMENT="staging", LOG_TO_FILE=True, LOG_DIR=str(tmp_path))
        assert build_logging_config(config)["formatters"]["json"]["environment"] == "staging"

        logger = setup_logging(config)
        try:
            logging.getLogger("attendance_analytics.services").warning(
                "Custom range fallback", extra={"preset": "custom"}
            )
            for handler in logger.handlers:
                handler.flush()
            lines = (tmp_path / "analytics.json.log").read_text(encoding="utf8").splitlines()
            entries = [json.loads(line) for line in lines]
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
            logger.propagate = True

        fallback = [e for e in entries if e["message"] == "Custom range fallback"]
        assert fallback[0]["environment"] == "staging"
        assert fallback[0]["preset"] == "custom"


def test_json_formatter_includes_analytics_context():
    formatter = CustomJsonFormatter("%(message)s")
    record = logging.LogRecord(
        name="attendance_analytics.services",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Built dashboard",
        args=(),
        exc_info=None,
    )
    record.preset = "month"
    record.record_count = 12

    payload = json.loads(formatter.format(record))

    assert payload["message"] == "Built dashboard"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "attendance_analytics.services"
    assert payload["preset"] == "month"
    assert payload["record_count"] == 12
    assert "timestamp" in payload
