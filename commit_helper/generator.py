"""Commit message generation through a chat-completion service."""

import json
import os
import re
from typing import Any, Optional

from g4f.client import Client  # type: ignore

from commit_helper.config import Config, default_config
from commit_helper.errors import GenerationError

__all__ = ["MessageGenerator", "SYSTEM_PROMPT", "extract_commit_message"]

SYSTEM_PROMPT = (
    "You are an assistant that receives a DIFF or the content of a new file and "
    "returns a commit message for it following the Conventional Commits standard "
    "(feat:, fix:, chore:, docs:, refactor:, test:, ...). "
    "Reply with a single-line subject only, as JSON in the form "
    '{"commit_message": "<message>"}.'
)

_FENCE_RE = re.compile(r"^```[\w-]*\s*|\s*```$")


def extract_commit_message(content: Optional[str]) -> str:
    """Pull a single-line commit subject out of a model reply.

    Accepts the requested JSON shape, JSON wrapped in a code fence, or plain
    text (first non-empty line). Returns "" when nothing usable is present.
    """
    if not content:
        return ""

    text = _FENCE_RE.sub("", content.strip()).strip()
    try:
        data = json.loads(text)
    except ValueError:
        data = None

    if isinstance(data, dict):
        text = str(data.get("commit_message") or "")
    elif isinstance(data, str):
        text = data

    for line in text.splitlines():
        line = line.strip().strip("`").strip()
        if line:
            return line
    return ""


class MessageGenerator:
    """Generates a commit subject for one file's diff or content.

    The chat client can be injected; otherwise one is built from the API key
    found in ``config.api_key_env``. Without a key every call to
    :meth:`generate` fails with :class:`GenerationError`.
    """

    def __init__(self, config: Config = default_config, client: Optional[Any] = None) -> None:
        self.config = config
        self.api_key = os.environ.get(config.api_key_env)
        if client is None and self.api_key:
            client = Client(api_key=self.api_key)
        self.client = client

    def generate(self, text: str) -> str:
        """Return a commit message for ``text``.

        Raises:
            GenerationError: If no client is configured, the request fails, or
                the reply holds no usable message.
        """
        if self.client is None:
            raise GenerationError(f"{self.config.api_key_env} is not set")

        try:
            response = self.client.chat.completions.create(
                model=self.config.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": text},
                ],
            )
        # g4f providers raise anything from their own error types to plain
        # HTTP/JSON errors, and every one of them means "no message".
        except Exception as e:
            raise GenerationError(f"request to {self.config.model_name()} failed: {e}") from e

        if not response or not getattr(response, "choices", None):
            raise GenerationError("no response received")

        message = extract_commit_message(response.choices[0].message.content)
        if not message:
            raise GenerationError("response did not contain a commit message")
        return message
