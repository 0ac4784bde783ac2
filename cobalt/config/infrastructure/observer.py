"""Structlog implementation of the ConfigObserver port."""

import structlog


class StructlogConfigObserver:
    """Delegates config domain events to structlog.

    Satisfies the ConfigObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def config_loaded(
        self, path: str, judge_model: str, concurrency: int, plugins: int
    ) -> None:
        self._log.info(
            "config.loaded",
            path=path,
            judge_model=judge_model,
            concurrency=concurrency,
            plugins=plugins,
        )

    def config_judge_temperature_warning(self, temperature: float) -> None:
        self._log.warning(
            "config.judge_temperature_warning",
            temperature=temperature,
            message="Judge scores may vary between runs when temperature > 0.0",
        )
