"""Fake ConfigObserver for use in tests — records events without mocking."""

from typing import Any


class FakeConfigObserver:
    def __init__(self) -> None:
        self.loaded: list[dict[str, Any]] = []
        self.warnings: list[dict[str, str]] = []

    def config_loaded(
        self, path: str, judge_model: str, concurrency: int, plugins: int
    ) -> None:
        self.loaded.append(
            {
                "path": path,
                "judge_model": judge_model,
                "concurrency": concurrency,
                "plugins": plugins,
            }
        )

    def config_judge_temperature_warning(self, temperature: float) -> None:
        self.warnings.append({"temperature": str(temperature)})
