"""Error types raised by evaluator infrastructure."""

from cobalt.core.errors import CobaltError, ConfigurationError


class EvaluatorError(CobaltError):
    """Raised when a single evaluator call cannot produce a score.

    Never escapes Evaluator.evaluate(): the wrapper turns it into a zero score.
    """

    def __init__(self, evaluator: str, reason: str) -> None:
        self.evaluator = evaluator
        self.reason = reason
        super().__init__(f"Failed to evaluate with '{evaluator}': {reason}")


class EvaluatorTypeNotRegisteredError(EvaluatorError):
    """Raised when a spec names a type that has no registered handler."""

    def __init__(self, evaluator: str, evaluator_type: str) -> None:
        self.evaluator_type = evaluator_type
        super().__init__(
            evaluator=evaluator,
            reason=f"evaluator type '{evaluator_type}' is not registered",
        )


class InvalidScoreError(EvaluatorError):
    """Raised when a custom function returns a score outside [0, 1]."""

    def __init__(self, evaluator: str, score: float) -> None:
        self.score = score
        super().__init__(
            evaluator=evaluator,
            reason=f"score must be between 0 and 1, got {score}",
        )


class JudgeResponseError(EvaluatorError):
    """Raised when the LLM judge cannot be invoked or returns an unusable response."""


class PluginLoadError(ConfigurationError):
    """Raised when a plugin module cannot be imported or does not define a plugin."""

    def __init__(self, reference: str, reason: str) -> None:
        self.reference = reference
        self.reason = reason
        super().__init__(f"Failed to load plugin '{reference}': {reason}")
