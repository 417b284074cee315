import logging
from typing import Optional

from fastapi import UploadFile

from src.agents.extraction.agent import extraction_agent
from src.agents.state import ExtractionAgentState
from src.core.errors import ErrorType, PatentAppError
from src.extraction.schemas import ExtractedData, ExtractedMemoResponse
from src.ingestion.service import IngestionService

logger = logging.getLogger(__name__)


class KeywordExtractionService:
    def __init__(self, ingestion: Optional[IngestionService] = None):
        self.ingestion = ingestion or IngestionService()

    async def extract(self, text: Optional[str]) -> ExtractedData:
        """
        Runs the extraction agent over the memo text and returns the
        keywords / technical fields / problems / features it recovered.
        """
        if not text or not text.strip():
            raise PatentAppError.bad_request("텍스트가 필요합니다.")

        initial_state: ExtractionAgentState = {
            "text": text,
            "raw_response": None,
            "extracted_data": None,
            "errors": [],
        }
        final_state = await extraction_agent.ainvoke(initial_state)

        if final_state.get("errors") or final_state.get("extracted_data") is None:
            raise PatentAppError("데이터 파싱에 실패했습니다.", ErrorType.PARSE_ERROR, 500)

        extracted: ExtractedData = final_state["extracted_data"]
        logger.info(
            "[extract-keywords] %d keywords, %d fields, %d problems, %d features",
            len(extracted.keywords),
            len(extracted.technical_field),
            len(extracted.problems),
            len(extracted.features),
        )
        return extracted

    async def extract_from_upload(self, file: UploadFile) -> ExtractedMemoResponse:
        content = await file.read()
        if not content:
            raise PatentAppError.bad_request("업로드된 파일이 비어 있습니다.")
        try:
            text = self.ingestion.extract_text(content, file.filename or "")
        except ValueError as e:
            logger.warning("[extract-keywords] Memo upload rejected: %s", e)
            raise PatentAppError.bad_request("지원하지 않는 파일 형식입니다.") from e

        extracted = await self.extract(text)
        return ExtractedMemoResponse(
            **extracted.model_dump(),
            memo_text=text,
            filename=file.filename,
        )
