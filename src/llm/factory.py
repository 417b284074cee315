from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from src.config import settings

if TYPE_CHECKING:
    from langchain_core.language_models import BaseLanguageModel

# Valid provider identifiers
VALID_PROVIDERS = ("ollama", "openai", "anthropic")

# Module-level cache, cleared by clear_llm_cache()
_llm_cache: dict[str, BaseLanguageModel] = {}


def clear_llm_cache() -> None:
    """Drop all cached LLM instances so they're recreated on next call."""
    _llm_cache.clear()


# ---------------------------------------------------------------------------
# Internal constructors (lazy imports to avoid hard dep on unused packages)
# ---------------------------------------------------------------------------

def _create_model(
    provider: str,
    *,
    ollama_model: str,
    openai_model: str,
    anthropic_model: str,
    temperature: float,
    top_k: Optional[int] = None,
    top_p: Optional[float] = None,
    max_tokens: int = 8192,
) -> BaseLanguageModel:
    if provider == "ollama":
        # OllamaLLM talks to the plain /api/generate text-generation endpoint
        from langchain_ollama import OllamaLLM

        kwargs: dict = dict(
            base_url=settings.OLLAMA_BASE_URL,
            model=ollama_model,
            temperature=temperature,
            num_predict=max_tokens,
            client_kwargs={"timeout": settings.LLM_REQUEST_TIMEOUT},
        )
        if top_k is not None:
            kwargs["top_k"] = top_k
        if top_p is not None:
            kwargs["top_p"] = top_p
        return OllamaLLM(**kwargs)

    if provider == "openai":
        from langchain_openai import ChatOpenAI

        if not settings.OPENAI_API_KEY:
            raise ValueError("OPENAI_API_KEY is required when using the openai provider")
        kwargs = dict(
            model=openai_model,
            temperature=temperature,
            max_tokens=max_tokens,
            api_key=settings.OPENAI_API_KEY,
            timeout=settings.LLM_REQUEST_TIMEOUT,
        )
        if top_p is not None:
            kwargs["top_p"] = top_p
        return ChatOpenAI(**kwargs)

    if provider == "anthropic":
        from langchain_anthropic import ChatAnthropic

        if not settings.ANTHROPIC_API_KEY:
            raise ValueError("ANTHROPIC_API_KEY is required when using the anthropic provider")
        kwargs = dict(
            model=anthropic_model,
            temperature=temperature,
            max_tokens=max_tokens,
            api_key=settings.ANTHROPIC_API_KEY,
            timeout=settings.LLM_REQUEST_TIMEOUT,
        )
        if top_k is not None:
            kwargs["top_k"] = top_k
        return ChatAnthropic(**kwargs)

    raise ValueError(f"Unknown provider: {provider!r}. Valid: {VALID_PROVIDERS}")


# ---------------------------------------------------------------------------
# Public factory functions
# ---------------------------------------------------------------------------

def get_extraction_llm() -> BaseLanguageModel:
    """Extraction Engine. Used for: keyword / field / problem / feature extraction."""
    key = "extraction"
    if key not in _llm_cache:
        _llm_cache[key] = _create_model(
            settings.LLM_PROVIDER_EXTRACTION,
            ollama_model=settings.OLLAMA_MODEL_EXTRACTION,
            openai_model=settings.OPENAI_MODEL_EXTRACTION,
            anthropic_model=settings.ANTHROPIC_MODEL_EXTRACTION,
            temperature=settings.EXTRACTION_TEMPERATURE,
            max_tokens=settings.MAX_OUTPUT_TOKENS,
        )
    return _llm_cache[key]


def get_drafting_llm() -> BaseLanguageModel:
    """Drafting Engine. Used for: specification drafts and revisions."""
    key = "drafting"
    if key not in _llm_cache:
        _llm_cache[key] = _create_model(
            settings.LLM_PROVIDER_DRAFTING,
            ollama_model=settings.OLLAMA_MODEL_DRAFTING,
            openai_model=settings.OPENAI_MODEL_DRAFTING,
            anthropic_model=settings.ANTHROPIC_MODEL_DRAFTING,
            temperature=settings.DRAFTING_TEMPERATURE,
            top_k=settings.DRAFTING_TOP_K,
            top_p=settings.DRAFTING_TOP_P,
            max_tokens=settings.MAX_OUTPUT_TOKENS,
        )
    return _llm_cache[key]
