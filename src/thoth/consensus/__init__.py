"""Golden-truth consensus: fan-out, judgment, and result assembly."""

from thoth.consensus.assembler import INSUFFICIENT_VERDICT, assemble, needs_judge
from thoth.consensus.collector import build_answer_prompt, collect_answers
from thoth.consensus.engine import GoldenTruthEngine, get_answer
from thoth.consensus.judge import (
    DISAGREEMENT_ANSWER,
    ERROR_VERDICT,
    build_judge_prompt,
    judge,
    parse_verdict,
)
from thoth.consensus.models import (
    SENTINEL_ANSWER,
    ConfidenceLabel,
    ConsensusVerdict,
    GoldenTruthResult,
    HistoryItem,
    ModelAnswer,
)

__all__ = [
    "DISAGREEMENT_ANSWER",
    "ERROR_VERDICT",
    "INSUFFICIENT_VERDICT",
    "SENTINEL_ANSWER",
    "ConfidenceLabel",
    "ConsensusVerdict",
    "GoldenTruthEngine",
    "GoldenTruthResult",
    "HistoryItem",
    "ModelAnswer",
    "assemble",
    "build_answer_prompt",
    "build_judge_prompt",
    "collect_answers",
    "get_answer",
    "judge",
    "needs_judge",
    "parse_verdict",
]
