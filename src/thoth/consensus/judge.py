"""Consensus judge: one meta-model call that rules on agreement.

The judge sees the question and every valid answer and must reply with
a JSON object holding the golden-truth answer, a confidence score, a
matching label, and a summary. How scores map to labels is left to the
judge model; the prompt only requires that the two agree.

Any failure (transport, provider, timeout, malformed JSON) yields the
fixed error verdict instead of an exception.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from pydantic import ValidationError

from thoth.consensus.json_extract import extract_json
from thoth.consensus.models import ConfidenceLabel, ConsensusVerdict
from thoth.core.deadline import with_deadline
from thoth.core.errors import ConfigError, ParseError
from thoth.providers.base import GenerationOptions, ResponseFormat

if TYPE_CHECKING:
    from collections.abc import Sequence

    from thoth.providers.router import ProviderRouter

logger = logging.getLogger(__name__)

DISAGREEMENT_ANSWER = (
    "Models disagree in meaningful ways. "
    "There is no single golden truth answer for this question."
)

JUDGE_OPTIONS = GenerationOptions(
    temperature=0.5,
    response_format=ResponseFormat.JSON,
)

ERROR_VERDICT = ConsensusVerdict(
    golden_truth_answer="Error determining consensus.",
    confidence_score=0.0,
    confidence_label=ConfidenceLabel.ERROR,
    summary="Failed to process model answers.",
)

# Labels the judge may choose; "Error" is reserved for local failures.
_JUDGE_LABELS = (
    ConfidenceLabel.STRONG_AGREEMENT,
    ConfidenceLabel.PARTIAL_AGREEMENT,
    ConfidenceLabel.DISAGREEMENT,
)

# Extremes at which a label clearly contradicts the score
_HIGH_SCORE = 0.7
_LOW_SCORE = 0.3


def build_judge_prompt(question: str, answers: Sequence[str]) -> str:
    """Build the meta-model prompt for *question* and its *answers*."""
    bullets = "\n".join(f"- {a}" for a in answers)
    return f"""You are an AI expert in determining consensus among different AI models.

You will be given a question and an array of answers from different AI models.

Your goal is to determine if there is a strong agreement among the answers and to provide a single, 'golden truth' answer if the confidence is high enough.

If the models disagree, you should clearly indicate that there is no single golden truth answer.

Question: {question}
Model Answers:
{bullets}

Consider these answers and provide a JSON object with exactly the following fields:

- "goldenTruthAnswer": A single string representing the agreed-upon answer when models strongly agree. If models disagree, return "{DISAGREEMENT_ANSWER}"
- "confidenceScore": A number between 0 and 1 representing the confidence in the golden truth answer.
- "confidenceLabel": A string which is exactly one of "Strong agreement", "Partial agreement", or "Disagreement". It must be consistent with "confidenceScore": higher scores mean stronger agreement, and a high score must never be paired with "Disagreement".
- "summary": A string which summarizes the overall consensus among the models.

Please ensure the "goldenTruthAnswer" directly answers the "question" based on the "modelAnswers".
"""


def _warn_if_inconsistent(verdict: ConsensusVerdict) -> None:
    """Log label/score pairings that contradict each other.

    Cutoffs stay with the judge model; only the plainly contradictory
    extremes are reported.
    """
    label, score = verdict.confidence_label, verdict.confidence_score
    if (label is ConfidenceLabel.DISAGREEMENT and score >= _HIGH_SCORE) or (
        label is ConfidenceLabel.STRONG_AGREEMENT and score < _LOW_SCORE
    ):
        logger.warning(
            "Judge paired label %r with confidence score %.2f",
            label.value,
            score,
        )


def parse_verdict(text: str) -> ConsensusVerdict:
    """Parse judge output as a JSON verdict object.

    The object may be wrapped in a markdown fence or surrounding prose;
    its fields are then validated strictly.

    Raises:
        ParseError: If *text* holds no JSON object, the object lacks one
            of the four required fields, the score is outside [0, 1], or
            the label is not one of the judge labels.
    """
    data = extract_json(text)
    try:
        verdict = ConsensusVerdict.model_validate(data)
    except ValidationError as e:
        msg = f"Judge output is not a valid verdict: {e}"
        raise ParseError(msg) from e
    if verdict.confidence_label not in _JUDGE_LABELS:
        msg = f"Judge returned reserved label {verdict.confidence_label.value!r}"
        raise ParseError(msg)
    _warn_if_inconsistent(verdict)
    return verdict


async def judge(
    question: str,
    answers: Sequence[str],
    router: ProviderRouter,
    *,
    judge_model: str,
    options: GenerationOptions = JUDGE_OPTIONS,
    timeout: float | None = None,
) -> ConsensusVerdict:
    """Ask *judge_model* whether *answers* agree.

    Args:
        question: The original question.
        answers: Valid (non-sentinel) answer texts.
        router: Resolves the judge model to its adapter.
        judge_model: Designated meta-model identifier.
        options: Generation options; JSON output is always requested.
        timeout: Deadline in seconds for the judge call.

    Returns:
        The parsed verdict, or :data:`ERROR_VERDICT` on any failure.
    """
    prompt = build_judge_prompt(question, answers)
    options = replace(options, response_format=ResponseFormat.JSON)
    try:
        provider = router.route(judge_model)
        text = await with_deadline(
            provider.generate(judge_model, prompt, options),
            timeout,
        )
        return parse_verdict(text)
    except ConfigError:
        raise
    except Exception:
        logger.exception("Error generating golden truth answer with %s", judge_model)
        return ERROR_VERDICT
