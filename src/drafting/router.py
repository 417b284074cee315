from fastapi import APIRouter

from src.drafting.schemas import (
    GenerateDraftRequest,
    GenerateDraftResponse,
    ParseDraftRequest,
    ParseDraftResponse,
)
from src.drafting.service import DraftingService

router = APIRouter(prefix="/patent", tags=["drafting"])


@router.post("/generate", response_model=GenerateDraftResponse)
async def generate_draft(request: GenerateDraftRequest):
    service = DraftingService()
    return await service.generate(request)


@router.post("/draft/parse", response_model=ParseDraftResponse)
async def parse_draft(request: ParseDraftRequest):
    """Split a draft into display sections plus a short structured summary."""
    service = DraftingService()
    return service.parse(request.content, request.invention_title)
