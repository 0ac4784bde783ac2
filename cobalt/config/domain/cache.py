"""Scoring cache configuration model."""

from pydantic import BaseModel, Field


class CacheConfig(BaseModel, frozen=True):
    enabled: bool = True
    ttl: str = "7d"
    flush_every: int = Field(default=10, ge=1)
