"""Remote callbacks for cloning and fetching the docs repository."""

from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING
from urllib.parse import urlparse

import pygit2
import structlog

if TYPE_CHECKING:
    from pygit2.enums import CredentialType

log = structlog.get_logger(__name__)


class DocsRemoteCallbacks(pygit2.RemoteCallbacks):
    """
    RemoteCallbacks for anonymous or credentialed mirrors.

    Public HTTPS remotes need no credentials. When the remote asks:
    - SSH uses the system SSH agent
    - HTTPS queries the configured git credential helper
    """

    def credentials(  # type: ignore[override]
        self,
        url: str,
        username_from_url: str | None,
        allowed_types: CredentialType,
    ) -> pygit2.UserPass | pygit2.Keypair:
        if allowed_types & pygit2.enums.CredentialType.SSH_KEY:
            return pygit2.KeypairFromAgent(username_from_url or "git")

        if allowed_types & pygit2.enums.CredentialType.USERPASS_PLAINTEXT:
            creds = _query_credential_helper(url)
            if creds:
                return pygit2.UserPass(creds["username"], creds["password"])

        # Let libgit2 report the authentication failure
        raise pygit2.Passthrough

    def transfer_progress(self, stats: pygit2.remotes.TransferProgress) -> None:
        if stats.total_objects and stats.received_objects == stats.total_objects:
            log.debug(
                "repo_transfer_complete",
                objects=stats.total_objects,
                bytes=stats.received_bytes,
            )


def _query_credential_helper(url: str) -> dict[str, str] | None:
    """Ask ``git credential fill`` for a username/password pair."""
    parsed = urlparse(url)
    lines = [f"protocol={parsed.scheme}", f"host={parsed.hostname or parsed.netloc}"]
    if parsed.path:
        lines.append(f"path={parsed.path.lstrip('/')}")
    lines.append("")

    try:
        result = subprocess.run(
            ["git", "credential", "fill"],
            input="\n".join(lines),
            capture_output=True,
            text=True,
            timeout=30,
            check=False,
        )
    except (subprocess.TimeoutExpired, OSError):
        # git missing or helper hung; fall back to anonymous access
        return None
    if result.returncode != 0:
        return None

    creds = dict(line.split("=", 1) for line in result.stdout.splitlines() if "=" in line)
    if "username" in creds and "password" in creds:
        return creds
    return None
