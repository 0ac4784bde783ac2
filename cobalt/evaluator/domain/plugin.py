"""PluginDefinition — a named, versioned bundle of evaluator types."""

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EvaluatorPlugin(BaseModel, frozen=True):
    """One evaluator type contributed by a plugin."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    type: str = Field(min_length=1)
    name: str
    evaluate: Callable[..., Any]


class PluginDefinition(BaseModel, frozen=True):
    name: str = Field(min_length=1)
    version: str
    evaluators: list[EvaluatorPlugin]
