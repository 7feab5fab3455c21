"""Test fixtures for git module."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pygit2
import pytest

SIG = pygit2.Signature("Test User", "test@example.com")


def commit_files(
    repo: pygit2.Repository,
    files: dict[str, str],
    message: str = "update docs",
    *,
    remove: tuple[str, ...] = (),
) -> str:
    """Write files into the working tree and commit them on HEAD."""
    workdir = Path(repo.workdir)
    for rel, content in files.items():
        path = workdir / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    for rel in remove:
        (workdir / rel).unlink()
        repo.index.remove(rel)
    repo.index.add_all()
    repo.index.write()
    tree = repo.index.write_tree()
    parents = [] if repo.head_is_unborn else [repo.head.target]
    return str(repo.create_commit("HEAD", SIG, SIG, message, tree, parents))


@pytest.fixture
def upstream(tmp_path: Path) -> pygit2.Repository:
    """Upstream repository on branch ``dove`` with a small docs tree."""
    repo = pygit2.init_repository(str(tmp_path / "upstream"), initial_head="dove")
    commit_files(
        repo,
        {
            "README.md": "# Feathers\n",
            "docs/index.md": "# Welcome\n",
            "docs/api/hooks.md": "# Hooks\n",
        },
        "Initial commit",
    )
    return repo


@pytest.fixture
def commit(upstream: pygit2.Repository) -> Callable[..., str]:
    """Commit to the upstream repository."""

    def _commit(files: dict[str, str], message: str = "update docs", **kwargs: object) -> str:
        return commit_files(upstream, files, message, **kwargs)  # type: ignore[arg-type]

    return _commit


@pytest.fixture
def repo_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache" / "feathers-repo"
