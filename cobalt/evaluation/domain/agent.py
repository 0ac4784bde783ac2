"""AgentFn — the caller-supplied agent callback the runner drives."""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeAlias

from cobalt.evaluation.domain.result import AgentOutput

AgentReturn: TypeAlias = AgentOutput | Mapping[str, Any] | str

# Called as agent(item, item_index, run_index).
AgentFn: TypeAlias = Callable[[Mapping[str, Any], int, int], Awaitable[AgentReturn]]
