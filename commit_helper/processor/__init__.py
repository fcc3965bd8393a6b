"""Processors that turn classified paths into commits."""

from commit_helper.processor.commit_processor import CommitProcessor

__all__ = ["CommitProcessor"]
