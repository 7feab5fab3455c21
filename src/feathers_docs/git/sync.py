"""Mirror a remote branch into the local docs cache via pygit2.

First run performs a shallow, single-branch clone. Later runs fetch the
branch and hard-reset the working tree to the fetched tip, discarding any
local divergence.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

import pygit2
import structlog

from feathers_docs.git.credentials import DocsRemoteCallbacks
from feathers_docs.git.errors import (
    AuthenticationError,
    BranchNotFoundError,
    CacheDirectoryError,
    GitError,
    NotARepositoryError,
    RemoteError,
)

log = structlog.get_logger(__name__)

REMOTE_NAME = "origin"


@dataclass(frozen=True, slots=True)
class SyncResult:
    """Outcome of one synchronization."""

    commit: str
    changed: bool


class RepoSync:
    """Keeps ``repo_dir`` aligned with ``repo_url@branch``."""

    def __init__(
        self,
        repo_url: str,
        branch: str,
        repo_dir: Path,
        *,
        depth: int = 1,
        callbacks: pygit2.RemoteCallbacks | None = None,
    ) -> None:
        self.repo_url = repo_url
        self.branch = branch
        self.repo_dir = Path(repo_dir)
        self.depth = depth
        self._callbacks = callbacks

    @property
    def refspec(self) -> str:
        return f"+refs/heads/{self.branch}:refs/remotes/{REMOTE_NAME}/{self.branch}"

    def sync(self) -> SyncResult:
        """Clone or fetch-and-reset. Blocking; run off the event loop.

        Raises:
            GitError: Any clone, fetch or checkout failure, including
                filesystem errors on the cache directory.
        """
        try:
            self.repo_dir.parent.mkdir(parents=True, exist_ok=True)
            if not (self.repo_dir / ".git").exists():
                return self._clone()
            return self._update()
        except OSError as e:
            raise CacheDirectoryError(str(self.repo_dir), e.strerror or str(e)) from e

    # =========================================================================
    # Internals
    # =========================================================================

    def _callbacks_or_default(self) -> pygit2.RemoteCallbacks:
        return self._callbacks or DocsRemoteCallbacks()

    def _clone(self) -> SyncResult:
        if self.repo_dir.exists() and any(self.repo_dir.iterdir()):
            raise NotARepositoryError(str(self.repo_dir))

        log.info("repo_clone_started", url=self.repo_url, branch=self.branch, depth=self.depth)

        def make_remote(repo: pygit2.Repository, name: str, url: str) -> pygit2.Remote:
            return repo.remotes.create(name, url, self.refspec)

        try:
            repo = pygit2.clone_repository(
                self.repo_url,
                str(self.repo_dir),
                remote=make_remote,
                checkout_branch=self.branch,
                callbacks=self._callbacks_or_default(),
                depth=self.depth,
            )
        except (pygit2.GitError, KeyError, ValueError, OSError) as e:
            shutil.rmtree(self.repo_dir, ignore_errors=True)
            raise self._map_error(e, "clone") from e

        commit = str(repo.head.target)
        log.info("repo_cloned", commit=commit, repo_dir=str(self.repo_dir))
        return SyncResult(commit=commit, changed=True)

    def _update(self) -> SyncResult:
        try:
            repo = pygit2.Repository(str(self.repo_dir))
        except pygit2.GitError as e:
            raise NotARepositoryError(str(self.repo_dir)) from e

        before = "" if repo.head_is_unborn else str(repo.head.target)
        remote = self._ensure_remote(repo)

        log.debug("repo_fetch_started", url=self.repo_url, branch=self.branch)
        try:
            remote.fetch(
                [self.refspec],
                callbacks=self._callbacks_or_default(),
                prune=pygit2.enums.FetchPrune.PRUNE,
                depth=self.depth,
            )
        except (pygit2.GitError, OSError) as e:
            raise self._map_error(e, "fetch") from e

        tracking = repo.references.get(f"refs/remotes/{REMOTE_NAME}/{self.branch}")
        if tracking is None:
            raise BranchNotFoundError(self.branch)
        target = tracking.resolve().target

        try:
            repo.create_reference(f"refs/heads/{self.branch}", target, force=True)
            repo.set_head(f"refs/heads/{self.branch}")
            repo.reset(target, pygit2.enums.ResetMode.HARD)
        except pygit2.GitError as e:
            raise GitError(f"Failed to reset working tree to {target}: {e}") from e

        after = str(repo.head.target)
        changed = before != after
        log.info("repo_synced", commit=after, previous=before or None, changed=changed)
        return SyncResult(commit=after, changed=changed)

    def _ensure_remote(self, repo: pygit2.Repository) -> pygit2.Remote:
        names = [r.name for r in repo.remotes]
        if REMOTE_NAME not in names:
            return repo.remotes.create(REMOTE_NAME, self.repo_url, self.refspec)
        remote = repo.remotes[REMOTE_NAME]
        if remote.url != self.repo_url:
            log.info("repo_remote_url_changed", old=remote.url, new=self.repo_url)
            repo.remotes.set_url(REMOTE_NAME, self.repo_url)
            remote = repo.remotes[REMOTE_NAME]
        return remote

    def _map_error(self, error: Exception, operation: str) -> GitError:
        msg = str(error).lower()
        if "authentication" in msg or "credential" in msg:
            return AuthenticationError(REMOTE_NAME, operation)
        if self.branch.lower() in msg and ("not found" in msg or "reference" in msg):
            return BranchNotFoundError(self.branch)
        return RemoteError(REMOTE_NAME, f"{operation} failed: {error}")
