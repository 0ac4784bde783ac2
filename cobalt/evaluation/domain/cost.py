"""CostEstimator port — model-keyed pricing of token usage."""

from typing import Protocol

from cobalt.evaluation.domain.summary import TokenUsage


class CostEstimator(Protocol):
    """Prices token usage for a model, in USD."""

    def estimate(self, usage: TokenUsage, model: str) -> float: ...
