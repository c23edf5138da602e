"""Fan-out collector: ask every configured model the same question.

All calls run concurrently and the collector waits for every one of
them to settle. A failed, blank, or timed-out call becomes the sentinel
answer for that model; it never cancels or hides the others.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from thoth.consensus.models import SENTINEL_ANSWER, ModelAnswer
from thoth.core.deadline import with_deadline
from thoth.core.errors import ConfigError
from thoth.providers.base import GenerationOptions
from thoth.providers.router import display_name

if TYPE_CHECKING:
    from collections.abc import Sequence

    from thoth.providers.router import ProviderRouter

logger = logging.getLogger(__name__)

ANSWER_OPTIONS = GenerationOptions(temperature=0.0, top_k=1)


def build_answer_prompt(question: str) -> str:
    """Instruction sent to every model for a question."""
    return (
        "You are an AI Model. In one or two sentences, provide the best possible "
        "answer for the following question. Be direct and concise. "
        f"Question: {question}"
    )


async def _collect_one(
    question: str,
    model: str,
    router: ProviderRouter,
    options: GenerationOptions,
    timeout: float | None,
) -> ModelAnswer:
    """Ask one model; return its answer or the sentinel."""
    name = display_name(model)
    try:
        provider = router.route(model)
        text = await with_deadline(
            provider.generate(model, build_answer_prompt(question), options),
            timeout,
        )
    except ConfigError:
        raise
    except TimeoutError:
        logger.warning("Model %s did not answer within %ss", model, timeout)
        return ModelAnswer(model_name=name, answer=SENTINEL_ANSWER)
    except Exception as exc:
        logger.warning("Answer failed for %s: %s", model, exc)
        return ModelAnswer(model_name=name, answer=SENTINEL_ANSWER)

    if not text.strip():
        logger.warning("Model %s returned an empty answer", model)
        return ModelAnswer(model_name=name, answer=SENTINEL_ANSWER)
    return ModelAnswer(model_name=name, answer=text)


async def collect_answers(
    question: str,
    models: Sequence[str],
    router: ProviderRouter,
    *,
    options: GenerationOptions = ANSWER_OPTIONS,
    timeout: float | None = None,
) -> list[ModelAnswer]:
    """Fan *question* out to every model in *models*.

    Args:
        question: The user's question.
        models: Model identifiers, possibly provider-prefixed.
        router: Resolves each model to its adapter.
        options: Sampling options for every call.
        timeout: Per-model deadline in seconds. ``None`` or non-positive
            means no deadline beyond the transport's own.

    Returns:
        Exactly one :class:`ModelAnswer` per entry of *models*, in the
        same order.

    Raises:
        ConfigError: If any call hits a configuration problem. The
            remaining calls are cancelled first.
    """
    try:
        async with asyncio.TaskGroup() as tg:
            tasks = [
                tg.create_task(_collect_one(question, m, router, options, timeout))
                for m in models
            ]
    except ExceptionGroup as eg:
        # Only ConfigError escapes _collect_one
        raise eg.exceptions[0] from None
    return [task.result() for task in tasks]
