"""AutoevalsHandler — the ``autoevals`` evaluator type backed by Braintrust's autoevals scorers."""

import json
from typing import Any

import autoevals

from cobalt.evaluator.domain.result import EvalContext, EvalResult
from cobalt.evaluator.domain.spec import AutoevalsSpec, EvaluatorSpec
from cobalt.evaluator.infrastructure.errors import EvaluatorError

# Config names that differ from the scorer class exported by the package.
_SCORER_CLASSES: dict[str, str] = {
    "Json": "JSONDiff",
    "Embedding": "EmbeddingSimilarity",
}

_TAKES_EXPECTED = frozenset(
    {
        "Levenshtein",
        "Factuality",
        "ContextRecall",
        "ContextPrecision",
        "AnswerRelevancy",
        "Json",
    }
)
_TAKES_INPUT = frozenset(
    {"ContextRecall", "ContextPrecision", "AnswerRelevancy", "ClosedQA"}
)


class AutoevalsHandler:
    """Runs one autoevals scorer against the agent output.

    ``expected`` is read from ``item[expected_field]`` for scorers that compare
    against a reference, and ``input`` from ``item["input"]`` (or the whole
    item) for question-based scorers. ``options`` are passed through as extra
    scorer arguments. LLM-backed scorers read their API key from the
    environment, as the autoevals package does.

    Satisfies the EvaluatorHandler protocol structurally.
    """

    async def __call__(
        self, spec: EvaluatorSpec, context: EvalContext, api_key: str | None
    ) -> EvalResult:
        """Score the output with the configured scorer.

        Raises:
            EvaluatorError: if the scorer is unknown or fails.
        """
        autoevals_spec = (
            spec
            if isinstance(spec, AutoevalsSpec)
            else AutoevalsSpec.model_validate(spec.model_dump())
        )
        name = autoevals_spec.evaluator_type
        scorer_class = getattr(autoevals, _SCORER_CLASSES.get(name, name), None)
        if scorer_class is None:
            raise EvaluatorError(
                evaluator=spec.name,
                reason=f"autoevals has no scorer named '{name}'",
            )

        output = (
            context.output
            if isinstance(context.output, str)
            else json.dumps(context.output)
        )
        arguments: dict[str, Any] = dict(autoevals_spec.options)
        expected = context.item.get(autoevals_spec.expected_field)
        if name in _TAKES_EXPECTED and expected is not None:
            arguments["expected"] = expected
        if name in _TAKES_INPUT:
            arguments["input"] = context.item.get("input", context.item)

        try:
            score = await scorer_class().eval_async(output=output, **arguments)
        except Exception as exc:
            raise EvaluatorError(
                evaluator=spec.name, reason=f"autoevals {name} failed: {exc}"
            ) from exc

        return _to_result(name=name, score=score)


def _to_result(name: str, score: Any) -> EvalResult:
    value = getattr(score, "score", None)
    value = 0.0 if value is None else float(value)
    # Some scorers report percentages.
    if value > 1:
        value = value / 100

    metadata = getattr(score, "metadata", None) or {}
    error = getattr(score, "error", None)
    value = min(1.0, max(0.0, value))
    reason = metadata.get("rationale") or (str(error) if error else None)
    return EvalResult(
        score=value, reason=reason or f"Autoevals {name} score: {value:.3f}"
    )
