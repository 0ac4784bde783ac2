"""UnitProgress — per-unit completion notification handed to progress callbacks."""

from collections.abc import Callable
from typing import TypeAlias

from pydantic import BaseModel


class UnitProgress(BaseModel, frozen=True):
    item_index: int
    run_index: int
    completed: int
    total: int


ProgressCallback: TypeAlias = Callable[[UnitProgress], None]
