import logging
from typing import Any, Optional

import httpx

from src.core.errors import ErrorType, LLMProviderError, PatentAppError

logger = logging.getLogger(__name__)


def _to_text(output: Any) -> str:
    """Completion models return str, chat models return a message with .content."""
    if isinstance(output, str):
        return output
    content = getattr(output, "content", output)
    if isinstance(content, list):
        # Anthropic content blocks
        return "".join(
            block.get("text", "") if isinstance(block, dict) else str(block)
            for block in content
        )
    return content if isinstance(content, str) else str(content or "")


def _retry_after(exc: Exception) -> Optional[str]:
    response = getattr(exc, "response", None)
    headers = getattr(response, "headers", None)
    if headers and headers.get("retry-after"):
        return f"{headers['retry-after']}s"
    return None


async def generate_text(
    llm: Any, prompt: str, empty_message: str = "생성된 텍스트가 없습니다."
) -> str:
    """Send a single prompt to the model and return the generated text."""
    try:
        output = await llm.ainvoke(prompt)
    except httpx.HTTPError:
        raise
    except Exception as e:
        status_code = getattr(e, "status_code", None)
        if isinstance(status_code, int):
            logger.error("[llm] API error: status=%s error=%s", status_code, str(e)[:200])
            raise LLMProviderError(status_code, str(e)[:200], _retry_after(e)) from e
        raise

    text = _to_text(output)
    if not text or not text.strip():
        logger.error("[llm] No generated text in response")
        raise PatentAppError(empty_message, ErrorType.SERVER_ERROR, 500)
    return text
