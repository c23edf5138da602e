"""Rich display for golden-truth results.

Renders the golden-truth answer, a confidence meter, and the individual
model answers with styled panels. Used by the ``ask`` command.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from thoth.consensus.models import ConfidenceLabel

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rich.status import Status

    from thoth.consensus.models import GoldenTruthResult, ModelAnswer

_TRUNCATE_LEN = 500
_METER_WIDTH = 20

_LABEL_STYLES: dict[ConfidenceLabel, str] = {
    ConfidenceLabel.STRONG_AGREEMENT: "green",
    ConfidenceLabel.PARTIAL_AGREEMENT: "yellow",
    ConfidenceLabel.DISAGREEMENT: "red",
    ConfidenceLabel.ERROR: "magenta",
}


def _truncate(text: str, limit: int = _TRUNCATE_LEN) -> str:
    """Truncate text to *limit* characters with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + " ..."


def confidence_meter(score: float, width: int = _METER_WIDTH) -> str:
    """Text bar for a score in [0, 1]."""
    filled = round(max(0.0, min(score, 1.0)) * width)
    return "█" * filled + "░" * (width - filled)


class GoldenTruthDisplay:
    """Rich display for golden-truth results.

    Accepts an optional :class:`~rich.console.Console` for dependency
    injection in tests.
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def status(self, model_count: int) -> Status:
        """Spinner shown while models are being asked."""
        return self._console.status(
            f"[bold cyan]Asking {model_count} models[/bold cyan] ...",
            spinner="dots",
        )

    def show_golden_truth(self, result: GoldenTruthResult) -> None:
        """Display the golden-truth answer (full, untruncated)."""
        style = _LABEL_STYLES[result.confidence_label]
        self._console.print()
        self._console.print(
            Panel(
                result.golden_truth_answer,
                title="[bold bright_white]Golden Truth[/bold bright_white]",
                subtitle=result.question,
                border_style=style,
            )
        )

    def show_confidence(self, result: GoldenTruthResult) -> None:
        """Display the confidence meter, label, and summary."""
        style = _LABEL_STYLES[result.confidence_label]
        line = Text()
        line.append(result.confidence_label.value, style=f"bold {style}")
        if result.confidence_label is not ConfidenceLabel.ERROR:
            line.append("  ")
            line.append(confidence_meter(result.confidence_score), style=style)
            line.append(f" {result.confidence_score:.0%}")
        self._console.print(line)
        if result.summary:
            self._console.print(result.summary, style="dim")

    def show_model_answers(self, answers: Sequence[ModelAnswer]) -> None:
        """Display each model's answer in a single panel."""
        parts: list[Text] = []
        for i, answer in enumerate(answers):
            if i > 0:
                parts.append(Text())
            parts.append(Text(answer.model_name, style="bold"))
            style = "" if answer.is_valid else "dim italic"
            parts.append(Text(_truncate(answer.answer), style=style))

        self._console.print(
            Panel(
                Text("\n").join(parts),
                title=f"[bold cyan]MODEL ANSWERS[/bold cyan] ({len(answers)})",
                border_style="cyan",
            )
        )

    def show_result(self, result: GoldenTruthResult) -> None:
        self.show_golden_truth(result)
        self.show_confidence(result)
        self._console.print()
        self.show_model_answers(result.model_answers)
