"""EvaluatorSpec — tagged union of evaluator configurations keyed by ``type``."""

import json
from collections.abc import Callable, Mapping
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

DEFAULT_EVALUATOR_TYPE = "llm-judge"


class EvaluatorSpec(BaseModel):
    """Base evaluator configuration.

    Used directly for plugin-registered types: any extra keys are kept and
    handed to the plugin handler untouched.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    name: str = Field(min_length=1)
    type: str = Field(default=DEFAULT_EVALUATOR_TYPE, min_length=1)

    def cache_material(self) -> str | None:
        """Return the string the scoring cache keys on, or None if not cacheable."""
        return None


class LLMJudgeSpec(EvaluatorSpec):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["llm-judge"] = "llm-judge"
    prompt: str = Field(min_length=1)
    model: str | None = None
    scoring: Literal["boolean", "scale"] = "boolean"
    chain_of_thought: bool | None = None

    def cache_material(self) -> str | None:
        return json.dumps(
            {
                "prompt": self.prompt,
                "model": self.model,
                "scoring": self.scoring,
                "chain_of_thought": self.chain_of_thought,
            },
            sort_keys=True,
        )


class FunctionSpec(EvaluatorSpec):
    """Scores with an in-process callable; never cached since code is opaque."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["function"] = "function"
    fn: Callable[..., Any]


class ExactMatchSpec(EvaluatorSpec):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["exact-match"] = "exact-match"
    field: str = Field(min_length=1)
    case_sensitive: bool = True


class SimilaritySpec(EvaluatorSpec):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["similarity"] = "similarity"
    field: str = Field(min_length=1)
    threshold: float | None = Field(default=None, ge=0.0, le=1.0)
    model: str = "text-embedding-3-small"

    def cache_material(self) -> str | None:
        return json.dumps(
            {"field": self.field, "threshold": self.threshold, "model": self.model},
            sort_keys=True,
        )


class AutoevalsSpec(EvaluatorSpec):
    """Delegates scoring to a named scorer from the ``autoevals`` package."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["autoevals"] = "autoevals"
    evaluator_type: Literal[
        "Levenshtein",
        "Factuality",
        "ContextRecall",
        "ContextPrecision",
        "AnswerRelevancy",
        "Json",
        "Battle",
        "Humor",
        "Embedding",
        "ClosedQA",
        "Security",
    ] = Field(validation_alias=AliasChoices("evaluator_type", "evaluatorType"))
    expected_field: str = Field(
        default="expectedOutput",
        min_length=1,
        validation_alias=AliasChoices("expected_field", "expectedField"),
    )
    options: dict[str, Any] = Field(default_factory=dict)

    def cache_material(self) -> str | None:
        return json.dumps(
            {
                "evaluator_type": self.evaluator_type,
                "expected_field": self.expected_field,
                "options": self.options,
            },
            sort_keys=True,
            default=str,
        )


_BUILTIN_SPECS: dict[str, type[EvaluatorSpec]] = {
    "llm-judge": LLMJudgeSpec,
    "function": FunctionSpec,
    "exact-match": ExactMatchSpec,
    "similarity": SimilaritySpec,
    "autoevals": AutoevalsSpec,
}


def parse_evaluator_spec(data: Mapping[str, Any] | EvaluatorSpec) -> EvaluatorSpec:
    """Validate raw evaluator config into the spec class matching its ``type``.

    Unknown types validate as the open EvaluatorSpec so plugins can define them.

    Raises:
        pydantic.ValidationError: if the data does not satisfy the chosen spec.
    """
    if isinstance(data, EvaluatorSpec):
        return data
    evaluator_type = data.get("type", DEFAULT_EVALUATOR_TYPE)
    spec_class = _BUILTIN_SPECS.get(evaluator_type, EvaluatorSpec)
    return spec_class.model_validate({**data, "type": evaluator_type})
