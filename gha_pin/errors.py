"""
Error taxonomy for gha-pin.

Library code raises these; the CLI turns them into messages and exit codes.
"""

from typing import Optional


class GhaPinError(Exception):
    """Base class for every error gha-pin reports to the user."""


class WorkflowReadError(GhaPinError):
    """A workflow file (or the workflows directory) could not be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"failed to read {path}: {reason}")


class WorkflowWriteError(GhaPinError):
    """A workflow file could not be written back."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"failed to write {path}: {reason}")


class RegistryError(GhaPinError):
    """The GitHub API request failed."""


class ReleaseNotFoundError(RegistryError):
    """The repository has no published release."""

    def __init__(self, owner: str, repo: str):
        self.owner = owner
        self.repo = repo
        super().__init__(f"no release found for {owner}/{repo}")


class UnresolvableRefError(RegistryError):
    """No tag or branch matches the requested ref."""

    def __init__(self, owner: str, repo: str, ref: str):
        self.owner = owner
        self.repo = repo
        self.ref = ref
        super().__init__(f"could not resolve ref {ref} for {owner}/{repo}")


class RateLimitError(RegistryError):
    """The API rate limit is exhausted."""

    def __init__(self, reset_at: Optional[int] = None):
        self.reset_at = reset_at
        msg = "GitHub API rate limit exceeded"
        if reset_at:
            msg += f" (resets at epoch {reset_at})"
        super().__init__(msg)


class VerificationError(GhaPinError):
    """One or more references are not pinned to a commit SHA."""

    def __init__(self, unpinned: list[str]):
        self.unpinned = unpinned
        super().__init__(f"found {len(unpinned)} unpinned action(s)")


class BackupError(GhaPinError):
    """A backup copy could not be created; nothing was modified."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"failed to create backup for {path}: {reason}")
