"""Judge configuration model."""

from pydantic import BaseModel, Field


class JudgeConfig(BaseModel, frozen=True):
    """Defaults for llm-judge evaluators that do not name their own model."""

    model: str = Field(default="gpt-4o-mini", min_length=1)
    api_key_env: str = "OPENAI_API_KEY"
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
