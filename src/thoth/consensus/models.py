"""Answer, verdict, and result types for the golden-truth protocol."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

SENTINEL_ANSWER = "Model unavailable for this query."


class ConfidenceLabel(enum.StrEnum):
    """Categorical agreement verdict."""

    STRONG_AGREEMENT = "Strong agreement"
    PARTIAL_AGREEMENT = "Partial agreement"
    DISAGREEMENT = "Disagreement"
    ERROR = "Error"


@dataclass(frozen=True, slots=True)
class ModelAnswer:
    """One configured model's answer, or the sentinel when it failed."""

    model_name: str
    answer: str

    @property
    def is_valid(self) -> bool:
        return self.answer != SENTINEL_ANSWER

    def to_dict(self) -> dict[str, str]:
        return {"modelName": self.model_name, "answer": self.answer}


class ConsensusVerdict(BaseModel):
    """Structured judgment over a set of answers.

    Field aliases match the JSON object the judge model is asked to
    return, so the same model parses judge output and serialises it.
    ``confidence_score`` is only meaningful when the label is not
    ``Error``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    golden_truth_answer: str = Field(alias="goldenTruthAnswer")
    confidence_score: float = Field(alias="confidenceScore", ge=0.0, le=1.0)
    confidence_label: ConfidenceLabel = Field(alias="confidenceLabel")
    summary: str

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


@dataclass(frozen=True, slots=True)
class GoldenTruthResult:
    """Complete record for one question."""

    id: str
    question: str
    golden_truth_answer: str
    confidence_score: float
    confidence_label: ConfidenceLabel
    summary: str
    model_answers: tuple[ModelAnswer, ...]
    timestamp: datetime

    @property
    def verdict(self) -> ConsensusVerdict:
        return ConsensusVerdict(
            golden_truth_answer=self.golden_truth_answer,
            confidence_score=self.confidence_score,
            confidence_label=self.confidence_label,
            summary=self.summary,
        )

    def to_dict(self) -> dict[str, Any]:
        """camelCase record as exchanged with presentation layers."""
        return {
            "id": self.id,
            "question": self.question,
            "goldenTruthAnswer": self.golden_truth_answer,
            "confidenceScore": self.confidence_score,
            "confidenceLabel": self.confidence_label.value,
            "summary": self.summary,
            "modelAnswers": [a.to_dict() for a in self.model_answers],
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class HistoryItem:
    """Trimmed projection of a result kept in local history."""

    id: str
    question: str
    golden_truth_answer: str
    confidence_label: str
    timestamp: str

    @classmethod
    def from_result(cls, result: GoldenTruthResult) -> HistoryItem:
        return cls(
            id=result.id,
            question=result.question,
            golden_truth_answer=result.golden_truth_answer,
            confidence_label=result.confidence_label.value,
            timestamp=result.timestamp.isoformat(),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HistoryItem:
        return cls(
            id=str(data["id"]),
            question=str(data["question"]),
            golden_truth_answer=str(data["goldenTruthAnswer"]),
            confidence_label=str(data["confidenceLabel"]),
            timestamp=str(data["timestamp"]),
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "question": self.question,
            "goldenTruthAnswer": self.golden_truth_answer,
            "confidenceLabel": self.confidence_label,
            "timestamp": self.timestamp,
        }


def utc_now() -> datetime:
    return datetime.now(UTC)
