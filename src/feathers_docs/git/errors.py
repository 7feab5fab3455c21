"""Git module error types."""


class GitError(Exception):
    """Base error for git operations."""

    pass


class NotARepositoryError(GitError):
    """Path is not a git repository."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Not a git repository: {path}")
        self.path = path


class BranchNotFoundError(GitError):
    """Branch not found on the remote."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Branch not found: {name}")
        self.name = name


class RemoteError(GitError):
    """Error communicating with remote."""

    def __init__(self, remote: str, message: str) -> None:
        super().__init__(f"Remote error ({remote}): {message}")
        self.remote = remote


class AuthenticationError(GitError):
    """Authentication failed for remote operation."""

    def __init__(self, remote: str, operation: str | None = None) -> None:
        op_part = f" during {operation}" if operation else ""
        super().__init__(f"Authentication failed for remote {remote!r}{op_part}")
        self.remote = remote
        self.operation = operation


class CacheDirectoryError(GitError):
    """Local checkout directory could not be created or inspected."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cache directory error at {path}: {reason}")
        self.path = path
        self.reason = reason
