"""Main CLI application.

Click commands for thoth: ask, history, models.
"""

from __future__ import annotations

import asyncio
import json as json_mod
import logging
import sys
import uuid
from typing import TYPE_CHECKING

import click
from pydantic import ValidationError

from thoth import __version__
from thoth.config.loader import load_config
from thoth.config.schema import ConsensusConfig
from thoth.core.errors import ConfigError, ThothError

if TYPE_CHECKING:
    from thoth.config.schema import ThothConfig
    from thoth.consensus.models import GoldenTruthResult


# ── Helpers ──────────────────────────────────────────────────────


def _error(msg: str) -> None:
    """Print an error message to stderr and exit."""
    click.echo(f"Error: {msg}", err=True)
    sys.exit(1)


def _load_config(config_path: str | None) -> ThothConfig:
    """Load config with user-friendly error handling."""
    try:
        return load_config(path=config_path)
    except ConfigError as e:
        _error(str(e))
        raise  # unreachable, keeps mypy happy


def _with_overrides(
    config: ThothConfig,
    models: tuple[str, ...],
    judge: str | None,
) -> ThothConfig:
    """Return *config* with command-line model choices applied and validated."""
    update: dict[str, object] = {}
    if models:
        update["models"] = list(models)
    if judge is not None:
        update["judge_model"] = judge
    if not update:
        return config
    try:
        consensus = ConsensusConfig.model_validate(
            {**config.consensus.model_dump(), **update}
        )
    except ValidationError as e:
        _error(f"Invalid model options: {e}")
        raise  # unreachable, keeps mypy happy
    return config.model_copy(update={"consensus": consensus})


def _setup_logging(config: ThothConfig) -> None:
    """Apply the ``[logging]`` section to the root logger."""
    level = getattr(logging, config.logging.level.upper(), logging.WARNING)
    kwargs: dict[str, object] = {
        "level": level,
        "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
    }
    if config.logging.file:
        kwargs["filename"] = config.logging.file
    logging.basicConfig(**kwargs)  # type: ignore[arg-type]


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="thoth")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True),
    default=None,
    help="Path to config file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None) -> None:
    """thoth - Multi-model golden truth.

    Ask several LLMs the same question and see whether they agree.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ── ask ──────────────────────────────────────────────────────────


@cli.command()
@click.argument("question")
@click.option(
    "--model",
    "models",
    multiple=True,
    help="Model to query (repeatable; overrides config).",
)
@click.option("--judge", default=None, help="Judge model (overrides config).")
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the result as JSON.",
)
@click.option(
    "--no-history",
    is_flag=True,
    default=False,
    help="Do not record this question in local history.",
)
@click.pass_context
def ask(
    ctx: click.Context,
    question: str,
    models: tuple[str, ...],
    judge: str | None,
    as_json: bool,
    no_history: bool,
) -> None:
    """Ask QUESTION to every configured model.

    The answers are compared by a judge model, which produces a single
    golden-truth answer when they agree.
    """
    config = _load_config(ctx.obj["config_path"])
    config = _with_overrides(config, models, judge)
    _setup_logging(config)

    from thoth.cli.display import GoldenTruthDisplay

    display = GoldenTruthDisplay()
    try:
        if as_json:
            result = asyncio.run(_ask_async(question, config))
        else:
            with display.status(len(config.consensus.models)):
                result = asyncio.run(_ask_async(question, config))
    except ThothError as e:
        _error(str(e))
        return  # unreachable

    if config.history.enabled and not no_history:
        from thoth.history import HistoryStore

        try:
            HistoryStore.from_config(config.history).record(result)
        except OSError as e:
            click.echo(f"Warning: could not save history: {e}", err=True)

    if as_json:
        click.echo(json_mod.dumps(result.to_dict(), indent=2))
        return
    display.show_result(result)


async def _ask_async(question: str, config: ThothConfig) -> GoldenTruthResult:
    """Async implementation for the ask command."""
    from thoth.consensus.engine import GoldenTruthEngine

    async with GoldenTruthEngine(config) as engine:
        return await engine.get_answer(question, uuid.uuid4().hex)


# ── history ──────────────────────────────────────────────────────


@cli.command()
@click.option("--limit", type=int, default=20, help="Max results.")
@click.pass_context
def history(ctx: click.Context, limit: int) -> None:
    """List recently asked questions."""
    from thoth.history import HistoryStore

    config = _load_config(ctx.obj["config_path"])
    entries = HistoryStore.from_config(config.history).load()[:limit]

    if not entries:
        click.echo("No history yet.")
        return

    for item in entries:
        created = item.timestamp[:16].replace("T", " ")
        snippet = item.question[:60].replace("\n", " ")
        click.echo(f"  {item.id[:8]}  [{item.confidence_label}]  {created}  {snippet}")


# ── models ───────────────────────────────────────────────────────


@cli.command()
@click.pass_context
def models(ctx: click.Context) -> None:
    """List configured models and the provider each routes to."""
    from thoth.providers.router import detect_provider, display_name

    config = _load_config(ctx.obj["config_path"])

    click.echo("models:")
    for model in config.consensus.models:
        click.echo(f"  {display_name(model)} ({model})  -> {detect_provider(model)}")
    judge_model = config.consensus.judge_model
    click.echo()
    click.echo(f"judge: {judge_model}  -> {detect_provider(judge_model)}")
