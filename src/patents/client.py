import asyncio
import logging
from typing import List, Optional
from urllib.parse import quote

import httpx

from src.config import settings
from src.core.errors import ErrorType, PatentAppError
from src.patents.normalizer import (
    extract_detail_item,
    extract_items,
    normalize_detail_item,
    normalize_search_item,
)
from src.patents.schemas import PatentRecord, ReloadResponse

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
MISSING_TOKEN_MESSAGE = (
    "API 토큰이 설정되지 않았습니다. 환경 변수 BIZNAVI_TOKEN(또는 BIZNAVI_X_TOKEN)과 "
    "BIZNAVI_GW_TOKEN을 확인해주세요."
)


def _error_detail(response: httpx.Response) -> str:
    """Server-supplied message when the body is JSON, else the raw text."""
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("error")
        if message:
            return str(message)
    return response.text[:500] or f"API 호출 실패: {response.status_code} {response.reason_phrase}"


class BiznaviClient:
    """Client for the Biznavi patent search and detail endpoints."""

    def __init__(
        self,
        x_token: Optional[str] = None,
        gw_token: Optional[str] = None,
        *,
        search_url: Optional[str] = None,
        detail_url: Optional[str] = None,
        timeout: Optional[float] = None,
        retries: Optional[int] = None,
        retry_delay: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.x_token = x_token if x_token is not None else settings.biznavi_x_token
        self.gw_token = gw_token if gw_token is not None else settings.BIZNAVI_GW_TOKEN
        self.search_url = search_url or settings.BIZNAVI_SEARCH_URL
        self.detail_url = (detail_url or settings.BIZNAVI_DETAIL_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.BIZNAVI_TIMEOUT
        self.retries = max(1, retries if retries is not None else settings.BIZNAVI_RETRIES)
        self.retry_delay = retry_delay if retry_delay is not None else settings.BIZNAVI_RETRY_DELAY
        self.transport = transport

    def _require_tokens(self) -> None:
        if not self.x_token or not self.gw_token:
            raise PatentAppError(MISSING_TOKEN_MESSAGE, ErrorType.MISSING_API_KEY, 500)

    def _headers(self, form: bool = False) -> dict:
        headers = {
            "Accept": "application/json, text/javascript, */*; q=0.01",
            "User-Agent": USER_AGENT,
            "x-token": self.x_token or "",
            "gwtoken": self.gw_token or "",
        }
        if form:
            headers["X-Requested-With"] = "XMLHttpRequest"
            headers["Content-Type"] = "application/x-www-form-urlencoded; charset=UTF-8"
        return headers

    async def _request_with_retry(
        self,
        client: httpx.AsyncClient,
        method: str,
        url: str,
        *,
        tag: str,
        retry_server_errors: bool,
        **kwargs,
    ) -> httpx.Response:
        """Linear backoff: attempt n waits retry_delay * n before the next try."""
        for attempt in range(1, self.retries + 1):
            try:
                response = await client.request(method, url, **kwargs)
            except httpx.TransportError as e:
                if attempt >= self.retries:
                    logger.error("%s Request failed after %d attempts: %s", tag, attempt, e)
                    raise
                wait = self.retry_delay * attempt
                logger.warning(
                    "%s Attempt %d/%d failed (%s), retrying in %.1fs",
                    tag, attempt, self.retries, type(e).__name__, wait,
                )
                await asyncio.sleep(wait)
                continue

            if retry_server_errors and response.status_code >= 500 and attempt < self.retries:
                wait = self.retry_delay * attempt
                logger.warning(
                    "%s Server error %d on attempt %d/%d, retrying in %.1fs",
                    tag, response.status_code, attempt, self.retries, wait,
                )
                await asyncio.sleep(wait)
                continue

            return response

        raise PatentAppError("모든 재시도가 실패했습니다.", ErrorType.API_ERROR, 500)

    async def search(self, keywords: List[str], page: int = 1, count: int = 10) -> List[PatentRecord]:
        self._require_tokens()

        form = {
            "keyword": " and ".join(keywords),
            "page": str(page),
            "count": str(count),
        }
        logger.info("[patent-search] Searching Biznavi: %s", form["keyword"])

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await self._request_with_retry(
                client,
                "POST",
                self.search_url,
                tag="[patent-search]",
                retry_server_errors=False,
                data=form,
                headers=self._headers(form=True),
            )

        if not response.is_success:
            logger.error(
                "[patent-search] Biznavi returned %d: %s", response.status_code, response.text[:500]
            )
            raise PatentAppError(
                "특허 검색 중 오류가 발생했습니다.",
                ErrorType.API_ERROR,
                500,
                details=_error_detail(response),
            )

        try:
            payload = response.json()
        except ValueError:
            raise PatentAppError(
                "서버에서 예상치 못한 응답을 받았습니다. 잠시 후 다시 시도해주세요.",
                ErrorType.INVALID_RESPONSE,
                500,
            )

        patents = [normalize_search_item(item) for item in extract_items(payload)]
        logger.info("[patent-search] %d patents found", len(patents))
        return patents

    async def detail(self, apply_number: Optional[str]) -> Optional[PatentRecord]:
        self._require_tokens()

        if not apply_number:
            logger.warning("[patent-detail] No apply number given")
            return None

        url = f"{self.detail_url}/{quote(apply_number, safe='')}/detail"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await self._request_with_retry(
                client,
                "GET",
                url,
                tag="[patent-detail]",
                retry_server_errors=True,
                params={"nation": "KR"},
                headers=self._headers(),
            )

        if response.status_code == 404:
            logger.info("[patent-detail] %s not found", apply_number)
            return None

        if not response.is_success:
            raise PatentAppError(
                "특허 상세 정보 조회 중 오류가 발생했습니다.",
                ErrorType.API_ERROR,
                500,
                details=f"API 호출 실패: {response.status_code} {response.reason_phrase}",
            )

        try:
            payload = response.json()
        except ValueError:
            raise PatentAppError(
                "특허 상세 정보 조회 중 오류가 발생했습니다.",
                ErrorType.API_ERROR,
                500,
                details="응답을 JSON으로 해석할 수 없습니다.",
            )

        item = extract_detail_item(payload)
        if item is None:
            return None
        return normalize_detail_item(item)

    async def reload(self) -> ReloadResponse:
        return ReloadResponse(
            success=True,
            count=0,
            message="API 기반 검색에서는 캐시가 필요하지 않습니다.",
        )
