"""Config module exports."""

from feathers_docs.config.loader import load_config
from feathers_docs.config.models import (
    DocsServerConfig,
    LimitsConfig,
    LoggingConfig,
    RepoConfig,
    ServerConfig,
)

__all__ = [
    "load_config",
    "DocsServerConfig",
    "LimitsConfig",
    "LoggingConfig",
    "RepoConfig",
    "ServerConfig",
]
