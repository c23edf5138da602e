"""Pydantic models for thoth configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

SUPPORTED_LOCATIONS: tuple[str, ...] = (
    "us-central1",
    "us-east4",
    "us-west1",
    "us-west4",
    "europe-west1",
    "europe-west4",
    "asia-northeast1",
    "asia-southeast1",
    "asia-south1",
    "global",
)


class VertexConfig(BaseModel):
    """Cloud account and region used for every provider call."""

    project_id: str | None = None
    project_id_env: str = "GOOGLE_CLOUD_PROJECT"
    location: str = "us-central1"
    location_env: str = "GCP_LOCATION"
    # Claude models are region-limited; "global" unless overridden
    anthropic_location: str = "global"
    anthropic_location_envs: list[str] = Field(
        default_factory=lambda: [
            "ANTHROPIC_LOCATION",
            "CLAUDE_LOCATION",
            "GCP_LOCATION",
        ]
    )


class ConsensusConfig(BaseModel):
    """Models queried per question and the judge that reconciles them."""

    models: list[str] = Field(
        default_factory=lambda: [
            "googleai/gemini-3.0-flash-lite",
            "anthropic/claude-haiku-4.5",
        ]
    )
    judge_model: str = "gemini-2.5-flash-lite"
    answer_temperature: float = 0.0
    answer_top_k: int = 1
    judge_temperature: float = 0.5
    min_valid_answers: int = Field(default=2, ge=1)

    @field_validator("models")
    @classmethod
    def _models_not_empty(cls, value: list[str]) -> list[str]:
        cleaned = [m.strip() for m in value if m.strip()]
        if not cleaned:
            msg = "at least one model must be configured"
            raise ValueError(msg)
        return cleaned

    @field_validator("judge_model")
    @classmethod
    def _judge_not_blank(cls, value: str) -> str:
        if not value.strip():
            msg = "judge_model must not be blank"
            raise ValueError(msg)
        return value.strip()


class TimeoutConfig(BaseModel):
    """Deadlines in seconds. Zero or negative disables a deadline."""

    per_model_seconds: float = 60.0
    judge_seconds: float = 60.0
    http_seconds: float = 120.0


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "WARNING"
    file: str = ""


class HistoryConfig(BaseModel):
    """Local history of answered questions."""

    enabled: bool = True
    path: str = ""
    max_entries: int = Field(default=50, ge=1)


class ThothConfig(BaseModel):
    """Top-level configuration for thoth."""

    vertex: VertexConfig = Field(default_factory=VertexConfig)
    consensus: ConsensusConfig = Field(default_factory=ConsensusConfig)
    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
