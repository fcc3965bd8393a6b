import shutil
from pathlib import Path
from typing import Callable, Dict, Generator, List, Tuple, Union

import git
import pytest
from rich.console import Console

from commit_helper.config import Config
from commit_helper.errors import GenerationError, RepositoryError
from commit_helper.repository import RepositoryInspector

Reply = Union[str, Exception]


class FakeRunner:
    """Answers git queries from a canned transcript and records every call."""

    def __init__(self, transcript: Dict[Tuple[str, ...], Reply]) -> None:
        self.transcript = transcript
        self.calls: List[List[str]] = []

    def run_query(self, args: List[str]) -> str:
        self.calls.append(list(args))
        reply = self.transcript.get(tuple(args), "")
        if isinstance(reply, Exception):
            raise reply
        return reply

    def mutations(self) -> List[List[str]]:
        return [c for c in self.calls if c[0] in ("add", "rm", "commit")]


class StubGenerator:
    """Returns canned messages; texts listed in ``fail_on`` raise GenerationError."""

    def __init__(self, message: str = "chore: update file", fail_on=(), fail_all: bool = False) -> None:
        self.message = message
        self.fail_on = set(fail_on)
        self.fail_all = fail_all
        self.prompts: List[str] = []

    def generate(self, text: str) -> str:
        self.prompts.append(text)
        if self.fail_all or text in self.fail_on:
            raise GenerationError("service unavailable")
        return self.message


@pytest.fixture
def make_inspector() -> Callable[..., Tuple[RepositoryInspector, FakeRunner]]:
    """Build an inspector driven by a fake transcript."""

    def _make(transcript: Dict[Tuple[str, ...], Reply] = None,
              config: Config = None) -> Tuple[RepositoryInspector, FakeRunner]:
        runner = FakeRunner(transcript or {})
        return RepositoryInspector(config or Config(), runner=runner), runner

    return _make


@pytest.fixture
def stub_generator_cls():
    return StubGenerator


@pytest.fixture
def repository_error():
    return RepositoryError("git failed", command=["git"], returncode=128, stderr="fatal: boom")


@pytest.fixture
def quiet_consoles() -> Tuple[Console, Console]:
    """Consoles that record output instead of writing to the terminal."""
    out = Console(record=True, force_terminal=False, color_system=None, width=200)
    err = Console(record=True, force_terminal=False, color_system=None, width=200)
    return out, err


@pytest.fixture
def temp_git_repo(tmp_path_factory) -> Generator[Path, None, None]:
    """Create a temporary Git repository with one initial commit."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    repo_dir = tmp_path_factory.mktemp("git_repo")
    repo = git.Repo.init(repo_dir)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()
    repo.config_writer().set_value("commit", "gpgsign", "false").release()

    (repo_dir / "tracked.py").write_text("def add(a, b):\n    return a + b\n")
    (repo_dir / "obsolete.txt").write_text("no longer needed\n")
    repo.index.add(["tracked.py", "obsolete.txt"])
    repo.index.commit("Initial commit")

    yield repo_dir
    shutil.rmtree(repo_dir, ignore_errors=True)
