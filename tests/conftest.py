"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of feathers_docs modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("feathers_docs"):
        del sys.modules[module_name]

from feathers_docs.config.models import DocsServerConfig, RepoConfig  # noqa: E402
from feathers_docs.git.errors import GitError  # noqa: E402
from feathers_docs.git.sync import SyncResult  # noqa: E402


class FakeSync:
    """Stands in for RepoSync; tests populate the docs dir themselves."""

    def __init__(self, commit: str = "a" * 40) -> None:
        self.commit = commit
        self.calls = 0
        self.error: GitError | None = None
        self._last_commit: str | None = None

    def sync(self) -> SyncResult:
        self.calls += 1
        if self.error is not None:
            raise self.error
        changed = self._last_commit != self.commit
        self._last_commit = self.commit
        return SyncResult(commit=self.commit, changed=changed)


@pytest.fixture(autouse=True)
def _isolate_config_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep user env vars and the global config file out of every test."""
    for key in list(os.environ):
        if key.startswith("FEATHERS_DOCS__"):
            monkeypatch.delenv(key)
    monkeypatch.setattr(
        "feathers_docs.config.loader.GLOBAL_CONFIG_PATH",
        tmp_path / "no-global-config.yaml",
    )


@pytest.fixture
def config(tmp_path: Path) -> DocsServerConfig:
    return DocsServerConfig(repo=RepoConfig(cache_dir=str(tmp_path / "cache")))


@pytest.fixture
def docs_dir(config: DocsServerConfig) -> Path:
    """Docs root path. Not created; tests decide whether it exists."""
    return config.repo.docs_dir


@pytest.fixture
def write_page(docs_dir: Path) -> Callable[[str, str], Path]:
    """Write a markdown page under the docs root."""

    def _write(relative_path: str, content: str) -> Path:
        path = docs_dir / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def fake_sync() -> FakeSync:
    return FakeSync()
