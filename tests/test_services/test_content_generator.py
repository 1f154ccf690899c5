"""Tests for the LiteLLM content generator (litellm is always mocked)."""

from unittest.mock import MagicMock, patch

import pytest

from src.domain.errors import GenerationFailure
from src.domain.interfaces import ContentGenerator
from src.services.content_generator import LiteLLMContentGenerator


def _response(text):
    return MagicMock(choices=[MagicMock(message=MagicMock(content=text))])


@pytest.fixture
def generator():
    return LiteLLMContentGenerator(
        api_key="test-key", model="gpt-4.1-mini", max_output_tokens=500, timeout_seconds=15
    )


def test_satisfies_protocol(generator):
    assert isinstance(generator, ContentGenerator)


async def test_generate_single_completion_call(generator):
    with patch("src.services.content_generator.litellm") as mock_litellm:
        mock_litellm.completion.return_value = _response("  Hello there  ")
        text = await generator.generate("Say hello")

    assert text == "Hello there"
    mock_litellm.completion.assert_called_once()
    kwargs = mock_litellm.completion.call_args.kwargs
    assert kwargs["model"] == "gpt-4.1-mini"
    assert kwargs["max_tokens"] == 500
    assert kwargs["timeout"] == 15
    assert kwargs["messages"] == [{"role": "user", "content": "Say hello"}]


@pytest.mark.parametrize("prompt", ["", "   "])
async def test_blank_prompt_rejected_before_call(generator, prompt):
    with patch("src.services.content_generator.litellm") as mock_litellm:
        with pytest.raises(GenerationFailure):
            await generator.generate(prompt)
    mock_litellm.completion.assert_not_called()


async def test_missing_api_key_rejected_before_call():
    generator = LiteLLMContentGenerator(api_key=None)
    with patch("src.services.content_generator.litellm") as mock_litellm:
        with pytest.raises(GenerationFailure, match="API key"):
            await generator.generate("hi")
    mock_litellm.completion.assert_not_called()


async def test_provider_error_becomes_generation_failure(generator):
    with patch("src.services.content_generator.litellm") as mock_litellm:
        mock_litellm.completion.side_effect = TimeoutError("slow")
        with pytest.raises(GenerationFailure):
            await generator.generate("hi")
    # No retries
    assert mock_litellm.completion.call_count == 1


@pytest.mark.parametrize("text", [None, "", "  \n"])
async def test_empty_output_is_failure(generator, text):
    with patch("src.services.content_generator.litellm") as mock_litellm:
        mock_litellm.completion.return_value = _response(text)
        with pytest.raises(GenerationFailure):
            await generator.generate("hi")


async def test_malformed_response_is_failure(generator):
    with patch("src.services.content_generator.litellm") as mock_litellm:
        mock_litellm.completion.return_value = MagicMock(choices=[])
        with pytest.raises(GenerationFailure):
            await generator.generate("hi")
