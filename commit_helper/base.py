"""Base classes shared by commit-helper processors."""

from abc import ABC, abstractmethod

from commit_helper.utils import ClassifiedPaths, ProcessingReport


class Processor(ABC):
    """Turns classified working-tree paths into commits."""

    @abstractmethod
    def process_all(self, classified: ClassifiedPaths) -> ProcessingReport:
        """Process every classified path and report what was committed."""
