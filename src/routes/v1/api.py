from fastapi import APIRouter

from src.extraction.router import router as extraction_router
from src.drafting.router import router as drafting_router
from src.patents.router import router as patents_router
from src.sessions.router import router as sessions_router

api_router = APIRouter()

api_router.include_router(extraction_router)
api_router.include_router(drafting_router)
api_router.include_router(patents_router)
api_router.include_router(sessions_router)
