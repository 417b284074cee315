import logging
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import ValidationError

from src.core.errors import ErrorType, PatentAppError
from src.sessions.schemas import (
    SavedSession,
    SavedSessionListResponse,
    SavedSessionSummary,
    SaveSessionRequest,
    SaveSessionResponse,
    Step3Data,
)
from src.sessions.store import JsonFileSessionStore, new_session_id

logger = logging.getLogger(__name__)


class SessionService:
    def __init__(self, store: Optional[JsonFileSessionStore] = None):
        self.store = store or JsonFileSessionStore()

    def save(self, request: SaveSessionRequest) -> SaveSessionResponse:
        if (
            request.step1_data is None
            or request.step2_data is None
            or request.step3_data is None
            or request.draft_versions is None
        ):
            raise PatentAppError.bad_request("필수 데이터가 누락되었습니다.")

        known = {p.patent_number for p in request.step2_data.similar_patents}
        selected = request.step3_data.selected_patents
        valid = [n for n in selected if n in known]
        if len(valid) < len(selected):
            invalid = [n for n in selected if n not in known]
            logger.warning(
                "[save-session] Some selected patents are not in similarPatents: %s", ", ".join(invalid)
            )

        session = SavedSession(
            id=new_session_id(),
            created_at=datetime.now(timezone.utc),
            title=request.step1_data.invention_title or "제목 없음",
            step1_data=request.step1_data,
            step2_data=request.step2_data,
            # All-invalid selections are kept as sent so the file still shows them
            step3_data=Step3Data(selected_patents=valid or list(selected)),
            draft_versions=request.draft_versions,
        )
        self.store.write(session.id, session.model_dump(mode="json", by_alias=True))
        return SaveSessionResponse(id=session.id, message="저장되었습니다.")

    def list(self) -> SavedSessionListResponse:
        summaries: List[SavedSessionSummary] = []
        for data in self.store.read_all():
            try:
                step2 = data.get("step2Data") or {}
                summaries.append(
                    SavedSessionSummary(
                        id=data["id"],
                        title=data.get("title") or "제목 없음",
                        created_at=data["createdAt"],
                        draft_count=len(data.get("draftVersions") or []),
                        keywords=(step2.get("selectedKeywords") or [])[:3],
                    )
                )
            except (KeyError, TypeError, ValueError) as e:
                logger.error("[save-session] Skipping malformed session %s: %s", data.get("id"), e)

        summaries.sort(key=lambda s: s.created_at.timestamp(), reverse=True)
        return SavedSessionListResponse(patents=summaries, count=len(summaries))

    def get(self, session_id: str) -> SavedSession:
        data = self.store.read(session_id)
        try:
            return SavedSession.model_validate(data)
        except ValidationError as e:
            logger.error("[save-session] Invalid session file %s: %s", session_id, e)
            raise PatentAppError(
                "저장된 기록을 읽을 수 없습니다.",
                ErrorType.FILE_READ_ERROR,
                500,
                details=str(e),
            )

    def delete(self, session_id: str) -> None:
        self.store.delete(session_id)
