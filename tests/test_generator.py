"""Tests for MessageGenerator and reply parsing."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import g4f  # type: ignore
import pytest

from commit_helper.config import Config
from commit_helper.errors import GenerationError
from commit_helper.generator import SYSTEM_PROMPT, MessageGenerator, extract_commit_message


def make_response(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.chat.completions.create.return_value = make_response(
        '{"commit_message": "feat: add greeting helper"}'
    )
    return client


@pytest.mark.parametrize(
    "content,expected",
    [
        ('{"commit_message": "fix: handle empty input"}', "fix: handle empty input"),
        ('```json\n{"commit_message": "docs: update readme"}\n```', "docs: update readme"),
        ("chore: bump version\n\nMore details here", "chore: bump version"),
        ("  \n`feat: add cli`\n", "feat: add cli"),
        ('"refactor: split module"', "refactor: split module"),
        ('{"other": "x"}', ""),
        ("", ""),
        (None, ""),
    ],
)
def test_extract_commit_message(content, expected):
    assert extract_commit_message(content) == expected


class TestMessageGenerator:

    def test_generate_sends_text_as_prompt(self, mock_client):
        generator = MessageGenerator(Config(), client=mock_client)

        assert generator.generate("+def greet(): ...") == "feat: add greeting helper"

        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == g4f.models.gpt_4o_mini
        assert kwargs["messages"] == [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": "+def greet(): ..."},
        ]

    def test_missing_api_key_fails_every_call(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        generator = MessageGenerator(Config())

        assert generator.client is None
        for _ in range(2):
            with pytest.raises(GenerationError, match="OPENAI_API_KEY"):
                generator.generate("diff")

    def test_client_built_from_api_key(self, monkeypatch):
        monkeypatch.setenv("COMMIT_KEY", "secret")
        with patch("commit_helper.generator.Client") as client_cls:
            generator = MessageGenerator(Config(api_key_env="COMMIT_KEY"))

        client_cls.assert_called_once_with(api_key="secret")
        assert generator.client is client_cls.return_value

    def test_request_error(self, mock_client):
        mock_client.chat.completions.create.side_effect = RuntimeError("rate limited")
        generator = MessageGenerator(Config(), client=mock_client)

        with pytest.raises(GenerationError, match="rate limited"):
            generator.generate("diff")

    def test_no_choices(self, mock_client):
        mock_client.chat.completions.create.return_value = SimpleNamespace(choices=[])
        generator = MessageGenerator(Config(), client=mock_client)

        with pytest.raises(GenerationError):
            generator.generate("diff")

    def test_blank_message(self, mock_client):
        mock_client.chat.completions.create.return_value = make_response('{"commit_message": ""}')
        generator = MessageGenerator(Config(), client=mock_client)

        with pytest.raises(GenerationError):
            generator.generate("diff")

    def test_custom_model(self, mock_client):
        generator = MessageGenerator(Config(model="gpt-4o"), client=mock_client)
        generator.generate("diff")
        assert mock_client.chat.completions.create.call_args.kwargs["model"] == "gpt-4o"
