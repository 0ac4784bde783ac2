"""LiteLLMCostEstimator — prices token usage from LiteLLM's model cost map."""

import litellm

from cobalt.evaluation.domain.summary import TokenUsage
from cobalt.experiment.domain.observer import ExperimentObserver

FALLBACK_MODEL = "gpt-4o-mini"


class LiteLLMCostEstimator:
    """Estimates USD cost with ``litellm.cost_per_token``.

    Models LiteLLM does not know are priced as FALLBACK_MODEL, with one
    warning per model. Satisfies the CostEstimator protocol structurally.
    """

    def __init__(
        self, observer: ExperimentObserver, fallback_model: str = FALLBACK_MODEL
    ) -> None:
        self._observer = observer
        self._fallback_model = fallback_model
        self._warned: set[str] = set()

    def estimate(self, usage: TokenUsage, model: str) -> float:
        try:
            prompt_cost, completion_cost = litellm.cost_per_token(
                model=model,
                prompt_tokens=usage.input_tokens,
                completion_tokens=usage.output_tokens,
            )
        except Exception:
            if model not in self._warned:
                self._warned.add(model)
                self._observer.cost_model_unknown(
                    model=model, fallback_model=self._fallback_model
                )
            prompt_cost, completion_cost = litellm.cost_per_token(
                model=self._fallback_model,
                prompt_tokens=usage.input_tokens,
                completion_tokens=usage.output_tokens,
            )
        return float(prompt_cost + completion_cost)
