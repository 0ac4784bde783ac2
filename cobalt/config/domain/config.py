"""CobaltConfig — project-wide defaults for experiments."""

from pydantic import BaseModel, Field

from cobalt.ci.domain.threshold import ThresholdMetric
from cobalt.config.domain.cache import CacheConfig
from cobalt.config.domain.judge import JudgeConfig


class CobaltConfig(BaseModel, frozen=True):
    """Top-level configuration; every field has a default.

    Per-experiment options override ``concurrency``, ``timeout_seconds`` and
    ``thresholds``.
    """

    judge: JudgeConfig = Field(default_factory=JudgeConfig)
    concurrency: int = Field(default=5, ge=1)
    timeout_seconds: float = Field(default=30.0, gt=0)
    output_dir: str = Field(default=".cobalt", min_length=1)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    ci_mode: bool = False
    thresholds: dict[str, ThresholdMetric] = Field(default_factory=dict)
    plugins: list[str] = Field(default_factory=list)
