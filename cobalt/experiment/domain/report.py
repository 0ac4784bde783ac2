"""ExperimentOptions and ExperimentReport — the orchestrator's input and output."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, field_validator

from cobalt.ci.domain.threshold import CIResult, ThresholdMetric
from cobalt.evaluation.domain.result import ItemResult
from cobalt.evaluation.domain.summary import ExperimentSummary
from cobalt.evaluator.domain.spec import EvaluatorSpec, parse_evaluator_spec


class ExperimentOptions(BaseModel, frozen=True):
    """Per-experiment settings; unset fields fall back to CobaltConfig."""

    evaluators: list[EvaluatorSpec]
    runs: int = Field(default=1, ge=1)
    concurrency: int | None = Field(default=None, ge=1)
    timeout_seconds: float | None = Field(default=None, gt=0)
    tags: list[str] = Field(default_factory=list)
    name: str | None = None
    thresholds: dict[str, ThresholdMetric] | None = None

    @field_validator("evaluators", mode="before")
    @classmethod
    def _parse_evaluators(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        return [
            parse_evaluator_spec(entry) if isinstance(entry, Mapping) else entry
            for entry in value
        ]


class ReportConfig(BaseModel, frozen=True):
    """The effective settings an experiment ran with."""

    runs: int
    concurrency: int
    timeout_seconds: float
    evaluators: list[str]


class ExperimentReport(BaseModel, frozen=True):
    id: str
    name: str
    timestamp: str
    tags: list[str] = Field(default_factory=list)
    config: ReportConfig
    summary: ExperimentSummary
    items: list[ItemResult]
    ci_status: CIResult | None = None
