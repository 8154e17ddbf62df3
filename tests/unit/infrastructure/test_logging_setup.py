"""Tests for the structlog/uvicorn logging configuration builder."""

from __future__ import annotations

import structlog

from skyflix.infrastructure.config.schema import AppConfig
from skyflix.infrastructure.logging.setup import BASE_LOGGING_CONFIG, build_logging_config


class TestBuildLoggingConfig:
    def test_level_applied_to_uvicorn_and_root(self) -> None:
        cfg = build_logging_config(AppConfig(log_level="WARNING"))
        assert cfg["root"]["level"] == "WARNING"
        for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
            assert cfg["loggers"][name]["level"] == "WARNING"

    def test_handlers_render_through_structlog(self) -> None:
        cfg = build_logging_config(AppConfig())
        assert cfg["handlers"]["default"]["formatter"] == "structlog"
        assert cfg["handlers"]["access"]["formatter"] == "structlog"
        assert cfg["formatters"]["structlog"]["()"] is structlog.stdlib.ProcessorFormatter

    def test_json_renderer_in_prod(self) -> None:
        cfg = build_logging_config(AppConfig(environment="prod"))
        renderer = cfg["formatters"]["structlog"]["processors"][-1]
        assert isinstance(renderer, structlog.processors.JSONRenderer)

    def test_console_renderer_in_dev(self) -> None:
        cfg = build_logging_config(AppConfig(environment="dev"))
        renderer = cfg["formatters"]["structlog"]["processors"][-1]
        assert isinstance(renderer, structlog.dev.ConsoleRenderer)

    def test_base_config_not_mutated(self) -> None:
        build_logging_config(AppConfig(log_level="DEBUG"))
        assert "structlog" not in BASE_LOGGING_CONFIG["formatters"]
        assert BASE_LOGGING_CONFIG["loggers"]["uvicorn"]["level"] == "INFO"
