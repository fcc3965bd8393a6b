import os
import subprocess
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple

from rich.console import Console

__all__ = [
    "console",
    "error_console",
    "configure_consoles",
    "SubprocessHandler",
    "ChangeKind",
    "ClassifiedPaths",
    "CommitRequest",
    "ProcessingReport",
]

console = Console()

error_console = Console(stderr=True)

ChangeKind = Literal["modified", "new", "deleted"]


def configure_consoles(no_color: bool = False) -> None:
    """Replace the shared consoles, e.g. to disable colours for the whole run."""
    global console, error_console
    if no_color:
        console = Console(force_terminal=False, color_system=None)
        error_console = Console(stderr=True, force_terminal=False, color_system=None)
    else:
        console = Console()
        error_console = Console(stderr=True)


@dataclass
class ClassifiedPaths:
    """Working-tree paths split into three disjoint, ordered lists."""

    modified: List[str] = field(default_factory=list)
    new: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.modified) + len(self.new) + len(self.deleted)

    def is_empty(self) -> bool:
        return len(self) == 0


@dataclass
class CommitRequest:
    path: str
    kind: ChangeKind
    text: str


@dataclass
class ProcessingReport:
    committed: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    def merge(self, other: "ProcessingReport") -> None:
        self.committed.extend(other.committed)
        self.failed.extend(other.failed)


class SubprocessHandler:
    """Runs external commands and always releases their pipes.

    Output is read as bytes and decoded as UTF-8 with replacement, so diffs of
    files in other encodings never abort a run.
    """

    def __init__(self, timeout: Optional[float] = None,
                 max_termination_retries: Optional[int] = None,
                 termination_wait: Optional[float] = None) -> None:
        """Initialize the handler.

        Args:
            timeout: Seconds to wait for a process, or None to wait until it exits.
            max_termination_retries: Polls after terminate() before falling back to kill().
            termination_wait: Seconds between those polls.
        """
        self.timeout: Optional[float] = timeout
        self.max_termination_retries: int = max_termination_retries or 3
        self.termination_wait: float = termination_wait or 0.5

    @staticmethod
    def create_env() -> Dict[str, str]:
        env = os.environ.copy()
        env["PYTHONIOENCODING"] = "utf-8"
        return env

    def run_command(self, command: List[str], encoding: str = "utf-8",
                    errors: str = "replace") -> Tuple[str, str, int]:
        """Execute a command and wait for it to complete.

        Args:
            command: Command to execute as a list of strings.
            encoding: Encoding used to decode stdout and stderr.
            errors: How undecodable bytes are handled.

        Returns:
            Tuple[str, str, int]: stdout, stderr, and return code.

        Raises:
            FileNotFoundError: If the executable does not exist.
            TimeoutError: If a timeout is configured and the process exceeds it.
        """
        process: Optional[subprocess.Popen[Any]] = None
        try:
            process = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=self.create_env(),
            )
            stdout_bytes, stderr_bytes = process.communicate(timeout=self.timeout)
            return (
                stdout_bytes.decode(encoding, errors=errors),
                stderr_bytes.decode(encoding, errors=errors),
                process.returncode,
            )
        except subprocess.TimeoutExpired:
            self._terminate_process(process)
            raise TimeoutError(
                f"Command timed out after {self.timeout} seconds: {' '.join(command)}"
            )
        finally:
            self._cleanup_process(process)

    def _terminate_process(self, process: Optional[subprocess.Popen[Any]]) -> None:
        if process is None or process.poll() is not None:
            return

        try:
            process.terminate()
            for _ in range(self.max_termination_retries):
                if process.poll() is not None:
                    return
                time.sleep(self.termination_wait)

            if process.poll() is None:
                process.kill()
                process.wait()
        except OSError:
            # Process already gone
            pass

    def _cleanup_process(self, process: Optional[subprocess.Popen[Any]]) -> None:
        if process is None:
            return

        for stream in (process.stdout, process.stderr):
            if stream is not None:
                try:
                    stream.close()
                except OSError:
                    pass

        self._terminate_process(process)
