"""LLM factory and the text-generation wrapper. No network calls."""
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from langchain_core.messages import AIMessage

from src.config import settings
from src.core.errors import LLMProviderError, PatentAppError
from src.llm.client import generate_text
from src.llm.factory import _create_model, get_drafting_llm, get_extraction_llm


def create(provider):
    return _create_model(
        provider,
        ollama_model="gpt-oss:120b-128k",
        openai_model="gpt-4o",
        anthropic_model="claude-3-5-sonnet-latest",
        temperature=0.3,
    )


def test_unknown_provider():
    with pytest.raises(ValueError, match="Unknown provider"):
        create("gemini")


@pytest.mark.parametrize("provider, key", [("openai", "OPENAI_API_KEY"), ("anthropic", "ANTHROPIC_API_KEY")])
def test_missing_api_key(provider, key):
    with patch.object(settings, key, ""):
        with pytest.raises(ValueError, match=key):
            create(provider)


def test_ollama_model_uses_drafting_parameters():
    llm = get_drafting_llm()
    assert llm.model == "gpt-oss:120b-128k"
    assert llm.temperature == 0.9
    assert llm.top_k == 40
    assert llm.top_p == 0.95
    assert get_drafting_llm() is llm


def test_extraction_and_drafting_are_cached_separately():
    assert get_extraction_llm() is not get_drafting_llm()
    assert get_extraction_llm().temperature == 0.3


@pytest.mark.asyncio
async def test_generate_text_accepts_chat_messages():
    llm = MagicMock()
    llm.ainvoke = AsyncMock(return_value=AIMessage(content="초안"))
    assert await generate_text(llm, "prompt") == "초안"


@pytest.mark.asyncio
async def test_generate_text_empty_output():
    llm = MagicMock()
    llm.ainvoke = AsyncMock(return_value="")
    with pytest.raises(PatentAppError) as exc:
        await generate_text(llm, "prompt", empty_message="비어 있음")
    assert exc.value.message == "비어 있음"


@pytest.mark.asyncio
async def test_generate_text_maps_status_errors():
    error = Exception("forbidden")
    error.status_code = 403
    llm = MagicMock()
    llm.ainvoke = AsyncMock(side_effect=error)
    with pytest.raises(LLMProviderError) as exc:
        await generate_text(llm, "prompt")
    assert exc.value.status_code == 403
