"""Base exception classes for all cobalt-specific errors."""


class CobaltError(Exception):
    """Base class for all cobalt errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigurationError(CobaltError):
    """Base class for pre-flight errors that abort an experiment before scheduling."""


class InvalidLogFormatError(ConfigurationError):
    """Raised when an unknown structlog renderer is requested."""

    def __init__(self, log_format: str) -> None:
        self.log_format = log_format
        super().__init__(
            f"Failed to configure logging: invalid log format {log_format!r},"
            " must be 'console' or 'json'"
        )
