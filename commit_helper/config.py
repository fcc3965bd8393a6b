"""Configuration module for commit-helper.

This module provides a configuration class that holds the git command names,
status markers and message-generation settings used by the tool.
"""

from typing import List, Optional, Union

import g4f  # type: ignore

# Type alias for the supported model types
MODEL_TYPE = Union[g4f.Model, str]


class Config:
    """Configuration class for commit-helper.

    The repository inspector and the message generator receive an instance of
    this class instead of reading module-level constants, so tests can swap
    any command, flag or marker.

    Attributes:
        git_command: Name (or path) of the git executable.
        diff_command: Sub-command used to list and read modified files.
        status_command: Sub-command used to list untracked and deleted files.
        name_only_flag: Flag restricting diff output to path names.
        porcelain_flag: Flag requesting machine-readable status output.
        untracked_prefix: Status prefix identifying untracked paths.
        deleted_marker: Status code identifying deleted paths in either column.
        model: The AI model used for commit messages. Can be a g4f.Model
              object or a model name.
        api_key_env: Environment variable holding the service's API key.
        command_timeout: Seconds to wait for a git invocation, or None to wait
              until it finishes.
        normalize_paths: Whether to convert "/" in reported paths to the host
              separator.
    """

    def __init__(
        self,
        git_command: str = "git",
        diff_command: str = "diff",
        status_command: str = "status",
        name_only_flag: str = "--name-only",
        porcelain_flag: str = "--porcelain",
        untracked_prefix: str = "?? ",
        deleted_marker: str = "D",
        model: MODEL_TYPE = g4f.models.gpt_4o_mini,
        api_key_env: str = "OPENAI_API_KEY",
        command_timeout: Optional[float] = None,
        normalize_paths: bool = True,
    ):
        self.git_command: str = git_command
        self.diff_command: str = diff_command
        self.status_command: str = status_command
        self.name_only_flag: str = name_only_flag
        self.porcelain_flag: str = porcelain_flag
        self.untracked_prefix: str = untracked_prefix
        self.deleted_marker: str = deleted_marker
        self.model: MODEL_TYPE = model
        self.api_key_env: str = api_key_env
        self.command_timeout: Optional[float] = command_timeout
        self.normalize_paths: bool = normalize_paths

        errors = self.validate()
        if errors:
            raise ValueError(f"Invalid configuration: {'; '.join(errors)}")

    def validate(self) -> List[str]:
        """Return a list of problems with the current values (empty when valid)."""
        errors = []
        for name in ("git_command", "diff_command", "status_command",
                     "name_only_flag", "porcelain_flag", "api_key_env"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                errors.append(f"{name} must be a non-empty string")

        if not isinstance(self.untracked_prefix, str) or not self.untracked_prefix.strip():
            errors.append("untracked_prefix must be a non-empty string")

        if not isinstance(self.deleted_marker, str) or len(self.deleted_marker) != 1:
            errors.append("deleted_marker must be a single character")

        if not isinstance(self.model, (g4f.Model, str)) or not str(self.model):
            errors.append("model must be a g4f.Model or a model name")

        timeout = self.command_timeout
        if timeout is not None and (
            isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0
        ):
            errors.append("command_timeout must be a positive number or None")

        if not isinstance(self.normalize_paths, bool):
            errors.append("normalize_paths must be a boolean value")

        return errors

    def is_valid(self) -> bool:
        return not self.validate()

    def model_name(self) -> str:
        """Return the model identifier as a plain string."""
        if isinstance(self.model, g4f.Model):
            return self.model.name
        return str(self.model)


# Default configuration instance
default_config = Config()
