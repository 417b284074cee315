from fastapi import APIRouter, UploadFile, File

from src.extraction.schemas import ExtractKeywordsRequest, ExtractedData, ExtractedMemoResponse
from src.extraction.service import KeywordExtractionService

router = APIRouter(tags=["extraction"])


@router.post("/extract-keywords", response_model=ExtractedData)
@router.post("/patent/extract-keywords", response_model=ExtractedData)
async def extract_keywords(request: ExtractKeywordsRequest):
    service = KeywordExtractionService()
    return await service.extract(request.text)


@router.post("/extract-keywords/upload", response_model=ExtractedMemoResponse)
async def extract_keywords_from_file(file: UploadFile = File(...)):
    """Extract invention data from an uploaded memo (.txt, .md, .docx, .pdf)."""
    service = KeywordExtractionService()
    return await service.extract_from_upload(file)
