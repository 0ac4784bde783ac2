"""Tests for configure_logging."""

from collections.abc import Iterator

import pytest
import structlog

from cobalt.core.errors import InvalidLogFormatError
from cobalt.core.logging import configure_logging


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    def test_console_renderer_is_last_processor(self) -> None:
        configure_logging("console")

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_json_renderer_is_last_processor(self) -> None:
        configure_logging("json")

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_unknown_format_raises(self) -> None:
        with pytest.raises(InvalidLogFormatError) as exc_info:
            configure_logging("xml")

        assert exc_info.value.log_format == "xml"
