"""Configuration loading: TOML files, env var overrides, merge logic.

Discovery order (later overrides earlier):
    1. Built-in defaults (Pydantic model defaults)
    2. User config: ``~/.config/thoth/config.toml``
    3. Project-local config: ``./thoth.toml``
    4. ``$THOTH_CONFIG`` environment variable (explicit path)
    5. Programmatic overrides (passed to ``load_config``)

Cloud account settings are resolved from the environment after
validation: ``GOOGLE_CLOUD_PROJECT`` fills a missing project id,
``GCP_LOCATION`` overrides the region and the first of
``ANTHROPIC_LOCATION`` / ``CLAUDE_LOCATION`` / ``GCP_LOCATION`` that is
set overrides the Claude region.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from thoth.core.errors import ConfigError

from .schema import SUPPORTED_LOCATIONS, ThothConfig

logger = logging.getLogger(__name__)

_PROJECT_HELP = (
    "Set it to your Google Cloud project ID:\n"
    "  export GOOGLE_CLOUD_PROJECT=your-project-id\n"
    "or add [vertex] project_id to thoth.toml, then authenticate with\n"
    "  gcloud auth application-default login"
)


def _user_config_path() -> Path:
    """Return XDG-compliant user config path."""
    xdg = os.environ.get("XDG_CONFIG_HOME", "")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "thoth" / "config.toml"


def _project_config_path() -> Path:
    """Return project-local config path."""
    return Path.cwd() / "thoth.toml"


def _discover_config_files() -> list[Path]:
    """Return config files in merge order (first = lowest priority)."""
    paths: list[Path] = []

    user = _user_config_path()
    if user.is_file():
        paths.append(user)

    project = _project_config_path()
    if project.is_file():
        paths.append(project)

    env_path = os.environ.get("THOTH_CONFIG")
    if env_path:
        p = Path(env_path)
        if not p.is_file():
            msg = f"THOTH_CONFIG points to non-existent file: {env_path}"
            raise ConfigError(msg)
        paths.append(p)

    return paths


def _read_toml(path: Path) -> dict[str, Any]:
    """Read and parse a TOML file."""
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise ConfigError(msg) from e
    except OSError as e:
        msg = f"Cannot read config file {path}: {e}"
        raise ConfigError(msg) from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base. Override wins on conflicts."""
    merged = base.copy()
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _resolve_environment(config: ThothConfig) -> None:
    """Fill cloud account settings from environment variables (in-place)."""
    vertex = config.vertex
    if not vertex.project_id and vertex.project_id_env:
        vertex.project_id = os.environ.get(vertex.project_id_env) or None

    location = os.environ.get(vertex.location_env, "") if vertex.location_env else ""
    if location:
        vertex.location = location

    for name in vertex.anthropic_location_envs:
        value = os.environ.get(name, "")
        if value:
            vertex.anthropic_location = value
            break

    for loc in (vertex.location, vertex.anthropic_location):
        if loc not in SUPPORTED_LOCATIONS:
            logger.warning("Location %r is not a known Vertex AI region", loc)


def require_vertex_project(config: ThothConfig) -> str:
    """Return the configured project id.

    Raises:
        ConfigError: If no project id is configured. Providers cannot be
            reached at all without one.
    """
    project = config.vertex.project_id
    if not project:
        msg = f"{config.vertex.project_id_env} is required.\n{_PROJECT_HELP}"
        raise ConfigError(msg)
    return project


def load_config(
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> ThothConfig:
    """Load and validate configuration.

    Args:
        path: Explicit config file path (highest file priority).
        overrides: Dict of overrides merged last (highest overall priority).

    Returns:
        Validated ThothConfig instance.

    Raises:
        ConfigError: On invalid TOML, missing files, or validation failure.
    """
    merged: dict[str, Any] = {}

    files = _discover_config_files()

    if path is not None:
        p = Path(path)
        if not p.is_file():
            msg = f"Config file not found: {path}"
            raise ConfigError(msg)
        files.append(p)

    for config_file in files:
        data = _read_toml(config_file)
        merged = _deep_merge(merged, data)

    if overrides:
        merged = _deep_merge(merged, overrides)

    try:
        config = ThothConfig.model_validate(merged)
    except Exception as e:
        msg = f"Configuration validation failed: {e}"
        raise ConfigError(msg) from e

    _resolve_environment(config)

    return config
