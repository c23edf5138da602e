"""Configuration loading and validation."""

from thoth.config.loader import load_config, require_vertex_project
from thoth.config.schema import (
    ConsensusConfig,
    HistoryConfig,
    LoggingConfig,
    ThothConfig,
    TimeoutConfig,
    VertexConfig,
)

__all__ = [
    "ConsensusConfig",
    "HistoryConfig",
    "LoggingConfig",
    "ThothConfig",
    "TimeoutConfig",
    "VertexConfig",
    "load_config",
    "require_vertex_project",
]
