"""EvalContext and EvalResult — the input and output of one evaluator call."""

import math
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator


class EvalContext(BaseModel, frozen=True):
    """Everything an evaluator may look at: the dataset item and the agent output."""

    item: dict[str, Any]
    output: str | dict[str, Any]
    metadata: dict[str, Any] = Field(default_factory=dict)


class EvalResult(BaseModel, frozen=True):
    """Score in [0, 1] plus optional explanations.

    Scores are clamped on construction, so an out-of-range value can never
    leave an evaluator. NaN is treated as 0.
    """

    score: float
    reason: str | None = None
    chain_of_thought: str | None = Field(
        default=None,
        validation_alias=AliasChoices("chain_of_thought", "chainOfThought"),
    )

    @field_validator("score")
    @classmethod
    def _clamp_score(cls, value: float) -> float:
        if math.isnan(value):
            return 0.0
        return min(1.0, max(0.0, value))
