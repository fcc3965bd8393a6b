"""Repository inspection and mutation for commit-helper.

Every git invocation goes through a runner exposing ``run_query(args)``, so the
inspector can be driven by a canned transcript in tests instead of a real git
binary.
"""

import os
import shutil
from pathlib import Path
from typing import List, Optional, Protocol

from commit_helper.config import Config, default_config
from commit_helper.errors import GitUnavailableError, RepositoryError
from commit_helper.utils import ClassifiedPaths, SubprocessHandler

__all__ = [
    "QueryRunner",
    "GitCommandRunner",
    "RepositoryInspector",
    "DIRECTORY_PLACEHOLDER",
    "unquote_path",
]

DIRECTORY_PLACEHOLDER = "Directory: {path} (skipped)"

# Report non-ASCII paths verbatim instead of as octal escapes.
GIT_OPTIONS = ["-c", "core.quotePath=false"]

_ESCAPES = {
    "a": 0x07, "b": 0x08, "t": 0x09, "n": 0x0A, "v": 0x0B,
    "f": 0x0C, "r": 0x0D, '"': 0x22, "\\": 0x5C,
}
_OCTAL_DIGITS = "01234567"


def unquote_path(path: str) -> str:
    """Undo git's C-style path quoting, e.g. ``"caf\\303\\251.txt"`` -> ``café.txt``.

    Paths that are not wrapped in double quotes are returned unchanged.
    """
    if len(path) < 2 or not path[0] == path[-1] == '"':
        return path

    body = path[1:-1]
    raw = bytearray()
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            octal = body[i + 1:i + 4]
            if len(octal) == 3 and all(c in _OCTAL_DIGITS for c in octal):
                raw.append(int(octal, 8))
                i += 4
                continue
            if body[i + 1] in _ESCAPES:
                raw.append(_ESCAPES[body[i + 1]])
                i += 2
                continue
        raw.extend(ch.encode("utf-8"))
        i += 1
    return raw.decode("utf-8", errors="replace")


class QueryRunner(Protocol):
    def run_query(self, args: List[str]) -> str:
        ...


class GitCommandRunner:
    """Runs git sub-commands and turns failures into repository errors."""

    def __init__(self, config: Config = default_config,
                 handler: Optional[SubprocessHandler] = None) -> None:
        self.config = config
        self.handler = handler or SubprocessHandler(timeout=config.command_timeout)

    def run_query(self, args: List[str]) -> str:
        """Run ``git <args>`` and return its standard output.

        Raises:
            GitUnavailableError: If the git executable cannot be launched.
            RepositoryError: If git exits with a non-zero status or times out.
        """
        command = [self.config.git_command, *GIT_OPTIONS, *args]
        try:
            stdout, stderr, returncode = self.handler.run_command(command)
        except FileNotFoundError as e:
            raise GitUnavailableError(
                f"{self.config.git_command} is not available", command=command
            ) from e
        except (TimeoutError, OSError) as e:
            raise RepositoryError(f"{' '.join(command)} failed: {e}", command=command) from e

        if returncode != 0:
            raise RepositoryError(
                f"{' '.join(command)} failed with exit code {returncode}",
                command=command,
                returncode=returncode,
                stderr=stderr,
            )
        return stdout


class RepositoryInspector:
    """Classifies working-tree paths and performs per-file git operations.

    Paths reported by git are relative to the top of the working tree, so the
    caller is expected to run from :meth:`toplevel`.
    """

    def __init__(self, config: Config = default_config,
                 runner: Optional[QueryRunner] = None) -> None:
        self.config = config
        self.runner: QueryRunner = runner or GitCommandRunner(config)

    def ensure_available(self) -> None:
        """Fail fast when the git executable is not on the search path."""
        if shutil.which(self.config.git_command) is None:
            raise GitUnavailableError(
                f"{self.config.git_command} is not available in the PATH. "
                f"Please install {self.config.git_command} and try again."
            )

    def toplevel(self) -> str:
        """Return the absolute path of the working tree's top directory.

        Raises:
            RepositoryError: If the current directory is not inside a repository.
        """
        return self.runner.run_query(["rev-parse", "--show-toplevel"]).strip()

    # Classification

    def list_modified(self) -> List[str]:
        """Return tracked paths with unstaged changes, in git's order."""
        output = self.runner.run_query(
            [self.config.diff_command, self.config.name_only_flag]
        ).strip()
        if not output:
            return []
        return [
            self._normalize(unquote_path(line.strip()))
            for line in output.splitlines() if line.strip()
        ]

    def list_untracked(self) -> List[str]:
        """Return paths git does not track yet (untracked directories end with "/")."""
        prefix = self.config.untracked_prefix
        paths = []
        for line in self._status_lines():
            if line.startswith(prefix):
                path = self._status_path(line[len(prefix):])
                if path:
                    paths.append(self._normalize(path))
        return paths

    def list_deleted(self) -> List[str]:
        """Return paths whose index or worktree status column reads deleted."""
        marker = self.config.deleted_marker
        paths = []
        for line in self._status_lines():
            if len(line) < 4 or marker not in (line[0], line[1]):
                continue
            path = self._status_path(line[3:])
            if path:
                paths.append(self._normalize(path))
        return paths

    def classify(self) -> ClassifiedPaths:
        """Run all three listings and return disjoint path lists.

        ``git diff --name-only`` also reports paths deleted from the worktree;
        those are kept in the deleted list only.
        """
        modified = self.list_modified()
        new = self.list_untracked()
        deleted = self.list_deleted()

        deleted_set = set(deleted)
        new_set = set(new)
        modified = [p for p in modified if p not in deleted_set and p not in new_set]
        return ClassifiedPaths(modified=modified, new=new, deleted=deleted)

    # Reading

    def read_diff(self, path: str) -> str:
        """Return the unstaged diff of one tracked path.

        Raises:
            RepositoryError: If git cannot diff the path.
        """
        return self.runner.run_query([self.config.diff_command, "--", path])

    def read_content(self, path: str) -> str:
        """Return the text of a new file, or a placeholder for a directory.

        Raises:
            RepositoryError: If the path does not exist or cannot be read.
        """
        file_path = Path(path)
        try:
            if file_path.is_dir():
                return DIRECTORY_PLACEHOLDER.format(path=path)
            return file_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise RepositoryError(f"reading file {path} failed: {e}") from e

    # Mutations

    def stage(self, path: str) -> None:
        """Add the path's current content to the index."""
        self.runner.run_query(["add", "--", path])

    def remove(self, path: str) -> None:
        """Record the path's deletion in the index.

        A deletion that is already staged leaves nothing to remove, which is
        not an error.
        """
        self.runner.run_query(["rm", "--cached", "--ignore-unmatch", "--", path])

    def commit(self, path: str, message: str) -> None:
        """Commit only this path, leaving other staged changes in the index."""
        self.runner.run_query(["commit", "-m", message, "--", path])

    def last_commit_hash(self) -> str:
        """Return the abbreviated hash of HEAD."""
        return self.runner.run_query(["rev-parse", "--short", "HEAD"]).strip()

    # Helpers

    def _status_lines(self) -> List[str]:
        # Leading spaces are significant in porcelain output, so no strip() here.
        output = self.runner.run_query(
            [self.config.status_command, self.config.porcelain_flag]
        )
        return output.splitlines()

    @staticmethod
    def _status_path(raw: str) -> str:
        path = raw.strip()
        if " -> " in path:
            path = path.split(" -> ", 1)[1]
        return unquote_path(path)

    def _normalize(self, path: str) -> str:
        path = path.strip()
        if self.config.normalize_paths and os.sep != "/":
            return path.replace("/", os.sep)
        return path
