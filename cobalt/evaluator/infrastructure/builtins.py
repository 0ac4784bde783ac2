"""Installs the built-in evaluator types into a registry."""

from cobalt.evaluator.infrastructure.autoevals import AutoevalsHandler
from cobalt.evaluator.infrastructure.exact_match import evaluate_exact_match
from cobalt.evaluator.infrastructure.function import evaluate_function
from cobalt.evaluator.infrastructure.llm_judge import (
    DEFAULT_JUDGE_MODEL,
    LiteLLMJudgeHandler,
)
from cobalt.evaluator.infrastructure.registry import EvaluatorRegistry
from cobalt.evaluator.infrastructure.similarity import EmbeddingSimilarityHandler


def register_builtin_evaluators(
    registry: EvaluatorRegistry,
    judge_temperature: float = 0.2,
    judge_model: str = DEFAULT_JUDGE_MODEL,
) -> None:
    """Register llm-judge, function, exact-match, similarity and autoevals."""
    registry.register(
        "llm-judge",
        LiteLLMJudgeHandler(temperature=judge_temperature, default_model=judge_model),
    )
    registry.register("function", evaluate_function)
    registry.register("exact-match", evaluate_exact_match)
    registry.register("similarity", EmbeddingSimilarityHandler())
    registry.register("autoevals", AutoevalsHandler())
