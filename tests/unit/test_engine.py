"""End-to-end tests for the golden-truth engine over mock providers."""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest

from tests.fixtures.providers import MockProvider, MockRouter
from thoth.config.schema import ThothConfig
from thoth.consensus.engine import GoldenTruthEngine, get_answer
from thoth.consensus.judge import DISAGREEMENT_ANSWER, build_judge_prompt
from thoth.consensus.models import SENTINEL_ANSWER, ConfidenceLabel
from thoth.core.errors import ConfigError, TransportError
from thoth.providers.base import ResponseFormat

GEMINI = "googleai/gemini-3.0-flash-lite"
CLAUDE = "anthropic/claude-haiku-4.5"
JUDGE = "gemini-2.5-flash-lite"


def _verdict(answer: str, score: float, label: str, summary: str) -> str:
    return json.dumps(
        {
            "goldenTruthAnswer": answer,
            "confidenceScore": score,
            "confidenceLabel": label,
            "summary": summary,
        }
    )


@pytest.fixture
def config(make_config):
    return make_config(consensus={"models": [GEMINI, CLAUDE], "judge_model": JUDGE})


class TestGetAnswer:
    async def test_strong_agreement(self, config):
        provider = MockProvider(
            responses={
                GEMINI: "Paris is the capital of France.",
                CLAUDE: "The capital of France is Paris.",
                JUDGE: _verdict(
                    "Paris is the capital of France.",
                    0.98,
                    "Strong agreement",
                    "Both models name Paris.",
                ),
            }
        )
        engine = GoldenTruthEngine(config, router=MockRouter(provider))
        result = await engine.get_answer("What is the capital of France?", "q-1")

        assert result.id == "q-1"
        assert result.question == "What is the capital of France?"
        assert result.golden_truth_answer == "Paris is the capital of France."
        assert result.confidence_score == 0.98
        assert result.confidence_label is ConfidenceLabel.STRONG_AGREEMENT
        assert [a.model_name for a in result.model_answers] == [
            "gemini-3.0-flash-lite",
            "claude-haiku-4.5",
        ]
        judge_call = provider.calls_for(JUDGE)[0]
        assert judge_call["prompt"] == build_judge_prompt(
            "What is the capital of France?",
            ["Paris is the capital of France.", "The capital of France is Paris."],
        )

    async def test_identical_answers_pass_verdict_unchanged(self, make_config):
        llama = "meta/llama-4-scout"
        config = make_config(
            consensus={"models": [GEMINI, CLAUDE, llama], "judge_model": JUDGE}
        )
        stub = _verdict("Paris.", 0.95, "Strong agreement", "All models agree.")
        provider = MockProvider(
            responses={GEMINI: "Paris.", CLAUDE: "Paris.", llama: "Paris.", JUDGE: stub}
        )
        engine = GoldenTruthEngine(config, router=MockRouter(provider))
        result = await engine.get_answer("What is the capital of France?", "q-0")

        assert len(provider.calls_for(JUDGE)) == 1
        assert provider.calls_for(JUDGE)[0]["prompt"] == build_judge_prompt(
            "What is the capital of France?", ["Paris.", "Paris.", "Paris."]
        )
        assert result.verdict.to_dict() == json.loads(stub)
        assert len(result.model_answers) == 3

    async def test_disagreement_passes_through(self, config):
        provider = MockProvider(
            responses={
                GEMINI: "17% of 240 is 40.8.",
                CLAUDE: "It is 42.",
                JUDGE: _verdict(DISAGREEMENT_ANSWER, 0.1, "Disagreement", "40.8 vs 42."),
            }
        )
        engine = GoldenTruthEngine(config, router=MockRouter(provider))
        result = await engine.get_answer("What is 17% of 240?", "q-2")
        assert result.confidence_label is ConfidenceLabel.DISAGREEMENT
        assert result.golden_truth_answer == DISAGREEMENT_ANSWER
        assert result.confidence_score == 0.1

    async def test_single_valid_answer_skips_judge(self, config):
        provider = MockProvider(
            responses={GEMINI: "Paris."},
            failures={CLAUDE: TransportError("anthropic", "down")},
        )
        engine = GoldenTruthEngine(config, router=MockRouter(provider))
        result = await engine.get_answer("Capital?", "q-3")

        assert provider.calls_for(JUDGE) == []
        assert result.confidence_label is ConfidenceLabel.DISAGREEMENT
        assert result.confidence_score == 0.0
        assert result.golden_truth_answer == (
            "Not enough model responses to determine a golden truth."
        )
        assert result.model_answers[1].answer == SENTINEL_ANSWER

    async def test_all_models_fail(self, config):
        err = TransportError("google", "down")
        provider = MockProvider(failures={GEMINI: err, CLAUDE: err})
        engine = GoldenTruthEngine(config, router=MockRouter(provider))
        result = await engine.get_answer("Capital?", "q-4")
        assert len(result.model_answers) == 2
        assert all(not a.is_valid for a in result.model_answers)
        assert result.summary == "Most models failed to provide an answer."
        assert provider.calls_for(JUDGE) == []

    async def test_judge_failure_gives_error_label(self, config):
        provider = MockProvider(
            responses={GEMINI: "Paris.", CLAUDE: "Paris."},
            failures={JUDGE: TransportError("google", "judge down")},
        )
        engine = GoldenTruthEngine(config, router=MockRouter(provider))
        result = await engine.get_answer("Capital?", "q-5")
        assert result.confidence_label is ConfidenceLabel.ERROR
        assert result.golden_truth_answer == "Error determining consensus."
        assert result.summary == "Failed to process model answers."
        assert [a.answer for a in result.model_answers] == ["Paris.", "Paris."]

    async def test_sampling_options_from_config(self, make_config):
        config = make_config(
            consensus={
                "models": [GEMINI, CLAUDE],
                "judge_model": JUDGE,
                "answer_temperature": 0.2,
                "answer_top_k": 3,
                "judge_temperature": 0.7,
            }
        )
        provider = MockProvider(
            responses={JUDGE: _verdict("x", 0.5, "Partial agreement", "s")}
        )
        engine = GoldenTruthEngine(config, router=MockRouter(provider))
        await engine.get_answer("Q", "q-6")

        answer_opts = provider.calls_for(GEMINI)[0]["options"]
        assert answer_opts.temperature == 0.2
        assert answer_opts.top_k == 3
        judge_opts = provider.calls_for(JUDGE)[0]["options"]
        assert judge_opts.temperature == 0.7
        assert judge_opts.response_format is ResponseFormat.JSON

    async def test_per_call_overrides(self, config):
        provider = MockProvider(responses={"other-judge": _verdict("x", 0.5, "Partial agreement", "s")})
        router = MockRouter(provider)
        engine = GoldenTruthEngine(config, router=router)
        await engine.get_answer(
            "Q", "q-7", models=["meta/llama-4-scout", "openai/gpt-oss-20b-maas"], judge_model="other-judge"
        )
        assert router.routed == ["meta/llama-4-scout", "openai/gpt-oss-20b-maas", "other-judge"]

    async def test_context_manager_closes_router(self, config):
        router = MockRouter()
        async with GoldenTruthEngine(config, router=router) as engine:
            assert engine.models == [GEMINI, CLAUDE]
            assert engine.judge_model == JUDGE
        assert router.closed


class TestModuleGetAnswer:
    async def test_builds_router_from_config(self, config):
        provider = MockProvider(
            responses={GEMINI: "Paris.", CLAUDE: "Paris.", JUDGE: _verdict("Paris", 0.9, "Strong agreement", "s")}
        )
        router = MockRouter(provider)
        with (
            patch("thoth.providers.router.ProviderRouter", return_value=router) as router_cls,
            patch(
                "thoth.providers.credentials.google.auth.default",
                return_value=(MagicMock(valid=True, token="t"), "p"),
            ),
        ):
            result = await get_answer("Capital?", "q-8", config)
        assert result.golden_truth_answer == "Paris"
        assert router_cls.call_args.args[0] is config
        assert router.closed

    def test_missing_project_raises(self):
        with pytest.raises(ConfigError):
            GoldenTruthEngine(ThothConfig(), credentials=MagicMock())
