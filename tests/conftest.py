import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from typing import AsyncGenerator

from src.main import app
from src.llm.factory import clear_llm_cache
from src.patents.local_store import clear_patent_cache
from src.sessions.router import get_session_service
from src.sessions.service import SessionService
from src.sessions.store import JsonFileSessionStore


@pytest.fixture(autouse=True)
def _clear_caches():
    """Each test starts without cached LLM instances or patent files."""
    clear_llm_cache()
    clear_patent_cache()
    yield
    clear_llm_cache()
    clear_patent_cache()


@pytest.fixture
def session_store(tmp_path) -> JsonFileSessionStore:
    return JsonFileSessionStore(str(tmp_path / "saved-patents"))


@pytest_asyncio.fixture(scope="function")
async def async_client(session_store: JsonFileSessionStore) -> AsyncGenerator[AsyncClient, None]:
    """Client for testing API endpoints."""
    # Saved sessions go to a per-test directory
    app.dependency_overrides[get_session_service] = lambda: SessionService(session_store)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_session_payload() -> dict:
    return {
        "step1Data": {
            "memoText": "드론이 카메라로 착륙 지점을 인식한다.",
            "inventionTitle": "영상 기반 드론 착륙 시스템",
            "inventor": "홍길동",
            "applicant": "주식회사 테스트",
            "extractedData": {
                "keywords": ["드론", "착륙", "카메라"],
                "technicalField": ["무인항공기"],
                "problems": ["GPS 오차"],
                "features": ["마커 인식"],
            },
        },
        "step2Data": {
            "selectedKeywords": ["드론", "착륙", "카메라", "마커"],
            "selectedTechnicalFields": ["무인항공기"],
            "selectedProblems": [],
            "selectedFeatures": ["마커 인식"],
            "similarPatents": [
                {"patentNumber": "1020200001111", "title": "드론 착륙 장치"},
                {"patentNumber": "1020200002222", "title": "비전 기반 항법"},
            ],
        },
        "step3Data": {"selectedPatents": ["1020200001111"]},
        "draftVersions": [
            {
                "version": 1,
                "content": "발명의 명칭: 영상 기반 드론 착륙 시스템\n\n기술분야\n본 발명은 드론에 관한 것이다.\n",
                "timestamp": "2024-05-01T10:00:00.000Z",
            }
        ],
    }
