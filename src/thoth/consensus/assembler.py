"""Result assembly: answers + verdict -> GoldenTruthResult."""

from __future__ import annotations

from typing import TYPE_CHECKING

from thoth.consensus.models import (
    ConfidenceLabel,
    ConsensusVerdict,
    GoldenTruthResult,
    utc_now,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from thoth.consensus.models import ModelAnswer

MIN_VALID_ANSWERS = 2

INSUFFICIENT_VERDICT = ConsensusVerdict(
    golden_truth_answer="Not enough model responses to determine a golden truth.",
    confidence_score=0.0,
    confidence_label=ConfidenceLabel.DISAGREEMENT,
    summary="Most models failed to provide an answer.",
)


def valid_answers(model_answers: Sequence[ModelAnswer]) -> list[str]:
    """Answer texts of every model that did not fail."""
    return [a.answer for a in model_answers if a.is_valid]


def needs_judge(
    model_answers: Sequence[ModelAnswer],
    min_valid: int = MIN_VALID_ANSWERS,
) -> bool:
    """True when enough models answered for a judgment to mean anything."""
    return len(valid_answers(model_answers)) >= min_valid


def assemble(
    id: str,
    question: str,
    model_answers: Sequence[ModelAnswer],
    verdict: ConsensusVerdict | None,
    *,
    min_valid: int = MIN_VALID_ANSWERS,
    now: datetime | None = None,
) -> GoldenTruthResult:
    """Build the final record for a question.

    With fewer than *min_valid* valid answers the fixed low-confidence
    verdict is used and *verdict* is ignored. Otherwise *verdict* is
    copied verbatim. Every answer, sentinel entries included, is kept.
    """
    if not needs_judge(model_answers, min_valid) or verdict is None:
        verdict = INSUFFICIENT_VERDICT

    return GoldenTruthResult(
        id=id,
        question=question,
        golden_truth_answer=verdict.golden_truth_answer,
        confidence_score=verdict.confidence_score,
        confidence_label=verdict.confidence_label,
        summary=verdict.summary,
        model_answers=tuple(model_answers),
        timestamp=now or utc_now(),
    )
