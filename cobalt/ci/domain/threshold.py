"""Threshold configuration and CI gate result models."""

from typing import TypeAlias

from pydantic import BaseModel, ConfigDict, Field


class ThresholdMetric(BaseModel, frozen=True):
    """Per-evaluator thresholds. ``max`` is a ceiling, every other score metric a floor."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    avg: float | None = None
    min: float | None = None
    max: float | None = None
    p50: float | None = None
    p95: float | None = None
    p99: float | None = None
    pass_rate: float | None = Field(default=None, alias="passRate", ge=0.0, le=1.0)
    min_score: float | None = Field(default=None, alias="minScore", ge=0.0, le=1.0)


ThresholdConfig: TypeAlias = dict[str, ThresholdMetric]


class ThresholdViolation(BaseModel, frozen=True):
    evaluator: str
    metric: str
    expected: float
    actual: float
    message: str


class CIResult(BaseModel, frozen=True):
    passed: bool
    violations: list[ThresholdViolation] = Field(default_factory=list)
    summary: str
