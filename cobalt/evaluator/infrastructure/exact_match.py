"""The ``exact-match`` evaluator type."""

import json

from cobalt.evaluator.domain.result import EvalContext, EvalResult
from cobalt.evaluator.domain.spec import EvaluatorSpec, ExactMatchSpec


def evaluate_exact_match(
    spec: EvaluatorSpec, context: EvalContext, api_key: str | None
) -> EvalResult:
    match_spec = (
        spec
        if isinstance(spec, ExactMatchSpec)
        else ExactMatchSpec.model_validate(spec.model_dump())
    )
    expected = context.item.get(match_spec.field)
    if expected is None:
        return EvalResult(
            score=0.0, reason=f'Field "{match_spec.field}" not found in item'
        )

    actual = (
        context.output
        if isinstance(context.output, str)
        else json.dumps(context.output)
    ).strip()
    expected_text = str(expected).strip()

    if match_spec.case_sensitive:
        matches = actual == expected_text
    else:
        matches = actual.lower() == expected_text.lower()

    if matches:
        return EvalResult(score=1.0, reason="Output matches expected value")
    return EvalResult(
        score=0.0,
        reason=f'Output "{actual}" does not match expected "{expected_text}"',
    )
