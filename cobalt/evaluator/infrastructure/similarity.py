"""EmbeddingSimilarityHandler — the ``similarity`` evaluator type backed by LiteLLM."""

import asyncio
import json
import math
from collections.abc import Sequence

import litellm

from cobalt.evaluator.domain.result import EvalContext, EvalResult
from cobalt.evaluator.domain.spec import EvaluatorSpec, SimilaritySpec
from cobalt.evaluator.infrastructure.errors import EvaluatorError


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity clamped to [0, 1]; 0.0 when either vector has zero norm."""
    if len(a) != len(b):
        raise ValueError(f"vectors differ in length: {len(a)} != {len(b)}")
    dot = sum(x * y for x, y in zip(a, b, strict=True))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return max(0.0, min(1.0, dot / (norm_a * norm_b)))


class EmbeddingSimilarityHandler:
    """Compares output and expected text by embedding cosine similarity.

    Satisfies the EvaluatorHandler protocol structurally.
    """

    async def __call__(
        self, spec: EvaluatorSpec, context: EvalContext, api_key: str | None
    ) -> EvalResult:
        """Embed both texts and score their similarity.

        Raises:
            EvaluatorError: if the expected field is missing or embedding fails.
        """
        similarity_spec = (
            spec
            if isinstance(spec, SimilaritySpec)
            else SimilaritySpec.model_validate(spec.model_dump())
        )
        if similarity_spec.field not in context.item:
            raise EvaluatorError(
                evaluator=spec.name,
                reason=f'field "{similarity_spec.field}" not found in dataset item',
            )

        output = (
            context.output
            if isinstance(context.output, str)
            else json.dumps(context.output)
        )
        expected = str(context.item[similarity_spec.field])
        if not output.strip() or not expected.strip():
            return EvalResult(
                score=0.0, reason="Cannot calculate similarity for empty text"
            )

        try:
            output_vector, expected_vector = await asyncio.gather(
                self._embed(output, similarity_spec.model, api_key),
                self._embed(expected, similarity_spec.model, api_key),
            )
        except Exception as exc:
            raise EvaluatorError(
                evaluator=spec.name, reason=f"embedding request failed: {exc}"
            ) from exc

        similarity = cosine_similarity(output_vector, expected_vector)
        threshold = similarity_spec.threshold
        if threshold is None:
            return EvalResult(
                score=similarity, reason=f"Cosine similarity: {similarity:.3f}"
            )
        if similarity >= threshold:
            return EvalResult(
                score=1.0,
                reason=f"Similarity {similarity:.3f} meets threshold {threshold}",
            )
        return EvalResult(
            score=0.0,
            reason=f"Similarity {similarity:.3f} below threshold {threshold}",
        )

    async def _embed(self, text: str, model: str, api_key: str | None) -> list[float]:
        response = await litellm.aembedding(model=model, input=[text], api_key=api_key)
        return list(response.data[0]["embedding"])
