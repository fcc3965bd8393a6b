"""Exception types raised by commit-helper."""

from typing import List, Optional


class CommitHelperError(Exception):
    """Base class for all commit-helper errors."""


class RepositoryError(CommitHelperError):
    """A git query or mutation failed, or a working-tree file could not be read."""

    def __init__(self, message: str, command: Optional[List[str]] = None,
                 returncode: Optional[int] = None, stderr: str = "") -> None:
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr

    def __str__(self) -> str:
        base = super().__str__()
        detail = self.stderr.strip()
        return f"{base}: {detail}" if detail else base


class GitUnavailableError(RepositoryError):
    """The git executable is not installed or not on the search path."""


class GenerationError(CommitHelperError):
    """The text-generation service could not produce a commit message."""
