import logging
from typing import Optional

from src.agents.draft.agent import draft_agent
from src.agents.state import DraftAgentState
from src.core.errors import ErrorType, PatentAppError
from src.drafting.parser import parse_draft_sections, parse_structured_summary
from src.drafting.schemas import (
    GenerateDraftRequest,
    GenerateDraftResponse,
    ParseDraftResponse,
)

logger = logging.getLogger(__name__)


class DraftingService:
    async def generate(self, request: GenerateDraftRequest) -> GenerateDraftResponse:
        """
        Builds the Korean specification prompt for the request (revision,
        memo-with-structured-data, or keywords-only) and returns the draft text.
        """
        if not request.input_text.strip():
            raise PatentAppError.bad_request("키워드 또는 설명이 필요합니다.")

        initial_state: DraftAgentState = {
            "request": request,
            "prompt_kind": None,
            "prompt": None,
            "result": None,
            "error_kind": None,
            "errors": [],
        }
        final_state = await draft_agent.ainvoke(initial_state)

        error_kind = final_state.get("error_kind")
        if error_kind == "timeout":
            raise PatentAppError(
                "특허 명세서 생성 시간이 초과되었습니다. 내용을 간략히 하거나 잠시 후 다시 시도해주세요.",
                ErrorType.TIMEOUT,
                504,
            )
        if error_kind == "invalid_response":
            raise PatentAppError(
                "서버에서 예상치 못한 응답을 받았습니다. 잠시 후 다시 시도해주세요.",
                ErrorType.INVALID_RESPONSE,
                500,
            )

        return GenerateDraftResponse(result=final_state["result"])

    def parse(self, content: Optional[str], invention_title: Optional[str] = None) -> ParseDraftResponse:
        if not content or not content.strip():
            raise PatentAppError.bad_request("초안 내용이 필요합니다.")
        return ParseDraftResponse(
            sections=parse_draft_sections(content),
            summary=parse_structured_summary(content, invention_title or ""),
        )
