"""Application context for MCP handlers.

Single object passed to all tool handlers with access to the docs index.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from feathers_docs.config.models import DocsServerConfig
    from feathers_docs.docs.index import DocsIndex
    from feathers_docs.git.sync import RepoSync


@dataclass
class AppContext:
    """Context object passed to all MCP tool handlers."""

    config: DocsServerConfig
    repo_sync: RepoSync
    docs_index: DocsIndex

    @classmethod
    def create(
        cls,
        config: DocsServerConfig,
        repo_sync: RepoSync | None = None,
    ) -> AppContext:
        """Factory to create context with the syncer and index wired together.

        Args:
            config: Loaded server configuration
            repo_sync: Optional existing syncer (tests pass a fake)
        """
        from feathers_docs.docs.index import DocsIndex
        from feathers_docs.git.sync import RepoSync as RS

        if repo_sync is None:
            repo_sync = RS(
                config.repo.url,
                config.repo.branch,
                config.repo.repo_dir,
                depth=config.repo.depth,
            )

        return cls(
            config=config,
            repo_sync=repo_sync,
            docs_index=DocsIndex(config, repo_sync),
        )
