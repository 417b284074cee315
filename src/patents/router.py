from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.patents.schemas import (
    PatentDetailRequest,
    PatentDetailResponse,
    PatentSearchRequest,
    PatentSearchResponse,
    ReloadResponse,
)
from src.patents.service import PatentSearchService

router = APIRouter(prefix="/patent", tags=["patents"])


def get_patent_service() -> PatentSearchService:
    return PatentSearchService()


@router.post("/search", response_model=PatentSearchResponse)
async def search_patents(
    request: PatentSearchRequest,
    service: PatentSearchService = Depends(get_patent_service),
):
    return await service.search(request.keywords)


@router.post("/detail", response_model=PatentDetailResponse)
async def patent_detail(
    request: PatentDetailRequest,
    service: PatentSearchService = Depends(get_patent_service),
):
    return await service.detail(request.idx, request.apply_number)


@router.get("/reload", response_model=ReloadResponse)
async def reload_patents(service: PatentSearchService = Depends(get_patent_service)):
    result = await service.reload()
    if not result.success:
        return JSONResponse(result.model_dump(by_alias=True), status_code=500)
    return result
