"""Git mirroring of the docs repository."""

from feathers_docs.git.credentials import DocsRemoteCallbacks
from feathers_docs.git.errors import (
    AuthenticationError,
    BranchNotFoundError,
    CacheDirectoryError,
    GitError,
    NotARepositoryError,
    RemoteError,
)
from feathers_docs.git.sync import RepoSync, SyncResult

__all__ = [
    "RepoSync",
    "SyncResult",
    "DocsRemoteCallbacks",
    # Errors
    "GitError",
    "NotARepositoryError",
    "BranchNotFoundError",
    "RemoteError",
    "AuthenticationError",
    "CacheDirectoryError",
]
