import io
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from src.sessions.export import ExportService
from src.sessions.schemas import (
    SavedSession,
    SavedSessionListResponse,
    SaveSessionRequest,
    SaveSessionResponse,
)
from src.sessions.service import SessionService
from src.shared.schemas import MessageResponse

router = APIRouter(prefix="/patent", tags=["sessions"])


def get_session_service() -> SessionService:
    return SessionService()


@router.post("/save", response_model=SaveSessionResponse)
async def save_session(
    request: SaveSessionRequest,
    service: SessionService = Depends(get_session_service),
):
    return service.save(request)


@router.get("/saved", response_model=SavedSessionListResponse)
async def list_sessions(service: SessionService = Depends(get_session_service)):
    return service.list()


@router.get("/saved/{session_id}", response_model=SavedSession)
async def get_session(session_id: str, service: SessionService = Depends(get_session_service)):
    return service.get(session_id)


@router.delete("/saved/{session_id}", response_model=MessageResponse)
async def delete_session(session_id: str, service: SessionService = Depends(get_session_service)):
    service.delete(session_id)
    return MessageResponse(message="삭제되었습니다.")


@router.get("/saved/{session_id}/export")
async def export_session(
    session_id: str,
    version: Optional[int] = Query(None, ge=1),
    fmt: Literal["txt", "docx"] = Query("txt", alias="format"),
    service: SessionService = Depends(get_session_service),
):
    session = service.get(session_id)
    body, filename, media_type = ExportService().export(session, version, fmt)
    return StreamingResponse(
        io.BytesIO(body),
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
