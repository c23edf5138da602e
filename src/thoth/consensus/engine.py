"""Golden-truth engine: the single inbound entry point.

``get_answer`` runs the whole protocol for one question:

    collect answers (parallel) -> judge (if >= 2 valid) -> assemble

Provider and judge failures never escape; they show up as sentinel
answers, the low-confidence verdict, or the ``Error`` label. Only
``ConfigError`` propagates, and only from construction.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from thoth.consensus.assembler import assemble, needs_judge, valid_answers
from thoth.consensus.collector import ANSWER_OPTIONS, collect_answers
from thoth.consensus.judge import JUDGE_OPTIONS, judge

if TYPE_CHECKING:
    from thoth.config.schema import ThothConfig
    from thoth.consensus.models import GoldenTruthResult
    from thoth.providers.credentials import CredentialProvider
    from thoth.providers.router import ProviderRouter

logger = logging.getLogger(__name__)


class GoldenTruthEngine:
    """Answers questions by polling models and judging their agreement.

    Holds configuration and a :class:`ProviderRouter`; keeps no state
    between questions. Use as an async context manager so the shared
    HTTP client is closed.
    """

    def __init__(
        self,
        config: ThothConfig,
        *,
        router: ProviderRouter | None = None,
        credentials: CredentialProvider | None = None,
    ) -> None:
        self._config = config
        if router is None:
            from thoth.providers.router import ProviderRouter

            if credentials is None:
                from thoth.providers.credentials import GoogleCredentials

                credentials = GoogleCredentials()
            router = ProviderRouter(config, credentials=credentials)
        self._router = router

        cons = config.consensus
        self._answer_options = replace(
            ANSWER_OPTIONS, temperature=cons.answer_temperature, top_k=cons.answer_top_k
        )
        self._judge_options = replace(JUDGE_OPTIONS, temperature=cons.judge_temperature)

    @property
    def models(self) -> list[str]:
        return list(self._config.consensus.models)

    @property
    def judge_model(self) -> str:
        return self._config.consensus.judge_model

    async def get_answer(
        self,
        question: str,
        id: str,
        *,
        models: list[str] | None = None,
        judge_model: str | None = None,
    ) -> GoldenTruthResult:
        """Run the golden-truth protocol for *question*.

        Args:
            question: The user's question.
            id: Caller-chosen identifier stamped on the result.
            models: Override the configured model list.
            judge_model: Override the configured judge model.
        """
        cons = self._config.consensus
        timeouts = self._config.timeouts
        model_list = models or self.models

        answers = await collect_answers(
            question,
            model_list,
            self._router,
            options=self._answer_options,
            timeout=timeouts.per_model_seconds,
        )

        verdict = None
        if needs_judge(answers, cons.min_valid_answers):
            verdict = await judge(
                question,
                valid_answers(answers),
                self._router,
                judge_model=judge_model or self.judge_model,
                options=self._judge_options,
                timeout=timeouts.judge_seconds,
            )
        else:
            logger.info(
                "Skipping judge for %s: %d of %d models answered",
                id,
                len(valid_answers(answers)),
                len(answers),
            )

        return assemble(id, question, answers, verdict, min_valid=cons.min_valid_answers)

    async def aclose(self) -> None:
        await self._router.aclose()

    async def __aenter__(self) -> GoldenTruthEngine:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()


async def get_answer(
    question: str,
    id: str,
    config: ThothConfig | None = None,
) -> GoldenTruthResult:
    """One-shot convenience wrapper around :class:`GoldenTruthEngine`.

    Raises:
        ConfigError: If the configuration cannot be loaded or lacks a
            cloud project, or no credentials are available.
    """
    if config is None:
        from thoth.config.loader import load_config

        config = load_config()
    async with GoldenTruthEngine(config) as engine:
        return await engine.get_answer(question, id)
