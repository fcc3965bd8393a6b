"""Per-file commit processing for commit-helper.

Each classified path is handled on its own: its text is read, a message is
generated for it, and it is committed alone. A failure on one path is logged
and the loop moves on; nothing already staged is rolled back.
"""

from typing import List, Optional, Protocol

from rich.console import Console
from rich.markup import escape

from commit_helper import utils
from commit_helper.base import Processor
from commit_helper.errors import CommitHelperError, GenerationError, RepositoryError
from commit_helper.repository import RepositoryInspector
from commit_helper.utils import ClassifiedPaths, CommitRequest, ProcessingReport

DELETION_NOTICE = "File deleted: {path}"
DELETION_FALLBACK = "Delete file: {path}"


class TextGenerator(Protocol):
    def generate(self, text: str) -> str:
        ...


class CommitProcessor(Processor):
    """Commits modified, new and deleted files one at a time."""

    def __init__(self, inspector: RepositoryInspector, generator: TextGenerator,
                 console: Optional[Console] = None,
                 error_console: Optional[Console] = None) -> None:
        """Initialize the processor.

        Args:
            inspector: Source of file text and target of git mutations.
            generator: Produces a commit message from a diff or file content.
            console: Console for progress output; defaults to the shared one.
            error_console: Console for per-file errors; defaults to the shared one.
        """
        self.inspector = inspector
        self.generator = generator
        self.console = console or utils.console
        self.error_console = error_console or utils.error_console

    def process_all(self, classified: ClassifiedPaths) -> ProcessingReport:
        report = ProcessingReport()
        report.merge(self.process_modified(classified.modified))
        report.merge(self.process_new(classified.new))
        report.merge(self.process_deleted(classified.deleted))
        return report

    def process_modified(self, paths: List[str]) -> ProcessingReport:
        report = ProcessingReport()
        for path in paths:
            try:
                diff = self.inspector.read_diff(path)
            except RepositoryError as e:
                self._error(f"Error getting diff for modified file {path}", e)
                report.failed.append(path)
                continue
            self._commit_with_generated_message(CommitRequest(path, "modified", diff), report)
        return report

    def process_new(self, paths: List[str]) -> ProcessingReport:
        report = ProcessingReport()
        for path in paths:
            try:
                content = self.inspector.read_content(path)
            except RepositoryError as e:
                self._error(f"Error getting content for new file {path}", e)
                report.failed.append(path)
                continue
            self._commit_with_generated_message(CommitRequest(path, "new", content), report)
        return report

    def process_deleted(self, paths: List[str]) -> ProcessingReport:
        """Commit each deletion, falling back to a fixed message if generation fails."""
        report = ProcessingReport()
        for path in paths:
            request = CommitRequest(path, "deleted", DELETION_NOTICE.format(path=path))
            try:
                message = self.generator.generate(request.text)
            except GenerationError as e:
                self.error_console.print(
                    f"[yellow]Using default message for deleted file {escape(path)}: "
                    f"{escape(str(e))}[/yellow]"
                )
                message = DELETION_FALLBACK.format(path=path)

            try:
                self.inspector.remove(path)
                self.inspector.commit(path, message)
            except RepositoryError as e:
                self._error(f"Error committing deleted file {path}", e)
                report.failed.append(path)
                continue

            self._success("Successfully committed deleted file", path)
            report.committed.append(path)
        return report

    def _commit_with_generated_message(self, request: CommitRequest,
                                       report: ProcessingReport) -> None:
        try:
            message = self.generator.generate(request.text)
        except GenerationError as e:
            self._error(f"Error getting commit message for {request.kind} file {request.path}", e)
            report.failed.append(request.path)
            return

        try:
            self.inspector.stage(request.path)
            self.inspector.commit(request.path, message)
        except RepositoryError as e:
            self._error(f"Error committing file {request.path}", e)
            report.failed.append(request.path)
            return

        self._success("Successfully committed file", request.path)
        report.committed.append(request.path)

    def _success(self, label: str, path: str) -> None:
        try:
            commit_hash = self.inspector.last_commit_hash()
        except RepositoryError:
            commit_hash = ""
        suffix = f" [dim]({escape(commit_hash)})[/dim]" if commit_hash else ""
        self.console.print(f"[green]{label}: {escape(path)}[/green]{suffix}")

    def _error(self, context: str, error: CommitHelperError) -> None:
        self.error_console.print(f"[red]{escape(context)}: {escape(str(error))}[/red]")
