"""Error types raised while running agent units."""

from cobalt.core.errors import CobaltError


class AgentInvocationError(CobaltError):
    """Raised when the agent callback fails or returns an unusable value.

    Contained per unit: the runner records the message in SingleRun.error.
    """

    def __init__(self, item_index: int, run_index: int, reason: str) -> None:
        self.item_index = item_index
        self.run_index = run_index
        self.reason = reason
        super().__init__(
            f"Failed to run agent for item #{item_index} (run {run_index}): {reason}"
        )


class AgentTimeoutError(AgentInvocationError):
    """Raised when the agent callback does not settle within the unit timeout."""

    def __init__(self, item_index: int, run_index: int, timeout_seconds: float) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(
            item_index=item_index,
            run_index=run_index,
            reason=f"timed out after {timeout_seconds:g}s",
        )
