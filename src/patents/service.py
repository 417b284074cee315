import logging
from typing import Any, List, Optional, Protocol

import httpx

from src.config import settings
from src.core.errors import ErrorType, PatentAppError
from src.patents.client import BiznaviClient
from src.patents.local_store import FlatFilePatentSource
from src.patents.schemas import (
    PatentDetailResponse,
    PatentRecord,
    PatentSearchResponse,
    ReloadResponse,
)

logger = logging.getLogger(__name__)


class PatentSource(Protocol):
    async def search(self, keywords: List[str], page: int = 1, count: int = 10) -> List[PatentRecord]: ...

    async def detail(self, apply_number: Optional[str]) -> Optional[PatentRecord]: ...

    async def reload(self) -> ReloadResponse: ...


def get_patent_source() -> PatentSource:
    if settings.PATENT_SOURCE == "file":
        return FlatFilePatentSource()
    return BiznaviClient()


class PatentSearchService:
    def __init__(self, source: Optional[PatentSource] = None):
        self.source = source or get_patent_source()

    async def search(self, keywords: Any) -> PatentSearchResponse:
        """
        Searches with every keyword first. When nothing matches, the last
        keyword is dropped and the search repeated, down to a single keyword.
        """
        if not isinstance(keywords, list) or not keywords:
            raise PatentAppError.bad_request("키워드가 필요합니다.")

        terms = [str(k).strip() for k in keywords if k is not None and str(k).strip()]
        if not terms:
            raise PatentAppError.bad_request("키워드가 필요합니다.")

        for n in range(len(terms), 0, -1):
            used = terms[:n]
            patents = await self.source.search(used, count=settings.PATENT_SEARCH_PAGE_SIZE)
            if patents:
                logger.info(
                    "[patent-search] %d results with %d/%d keywords", len(patents), n, len(terms)
                )
                return PatentSearchResponse(
                    patents=patents, used_keywords=used, total_keywords=len(terms)
                )
            if n > 1:
                logger.info("[patent-search] No results with %d keywords, retrying with %d", n, n - 1)

        raise PatentAppError(
            "검색 결과가 없습니다. 다른 키워드로 다시 시도해주세요.",
            ErrorType.NO_RESULTS,
            404,
            extra={"patents": []},
        )

    async def detail(self, idx: Optional[int], apply_number: Optional[str]) -> PatentDetailResponse:
        if not idx and not apply_number:
            raise PatentAppError.bad_request("idx 또는 applyNumber가 필요합니다.")

        try:
            patent = await self.source.detail(apply_number)
        except httpx.HTTPError as e:
            logger.error("[patent-detail] Upstream failure for %s: %s", apply_number, e)
            raise PatentAppError(
                "특허 상세 정보 조회 중 오류가 발생했습니다.",
                ErrorType.API_ERROR,
                500,
                details=str(e),
            )

        if patent is None:
            raise PatentAppError.not_found("특허 상세 정보를 찾을 수 없습니다.")
        return PatentDetailResponse(patent=patent)

    async def reload(self) -> ReloadResponse:
        try:
            return await self.source.reload()
        except PatentAppError as e:
            logger.error("[patent-reload] Reload failed: %s", e.message)
            return ReloadResponse(success=False, count=0, message=e.message)
