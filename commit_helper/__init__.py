"""
Commit-Helper: One Commit Per Changed File

Key Features:
    - Detection of modified, new and deleted files in a git working tree
    - AI-generated Conventional Commits message for each file
    - One commit per file, so every message describes a single change
    - Deleted files are always committed, with a default message if needed
    - Per-file failures are reported and skipped without stopping the run

Usage:
    Run the command inside a Git repository:
    $ commit-helper

    The tool will:
    1. Classify changed paths into modified, new and deleted
    2. Read each file's diff or content
    3. Ask the text-generation service for a commit message
    4. Stage (or remove) and commit the file on its own
"""

__version__ = "1.0.0"

from .cli import main_cli

__all__ = ['main_cli', '__version__']
