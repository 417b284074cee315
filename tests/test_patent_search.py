"""Patent search: Biznavi client, normalisation, flat-file source and reduced-keyword retry."""
import json

import httpx
import pytest

from src.core.errors import ErrorType, PatentAppError
from src.main import app
from src.patents.client import BiznaviClient
from src.patents.local_store import FlatFilePatentSource
from src.patents.normalizer import (
    extract_items,
    format_date,
    normalize_detail_item,
    normalize_search_item,
    strip_html_tags,
)
from src.patents.router import get_patent_service
from src.patents.schemas import PatentRecord, ReloadResponse
from src.patents.service import PatentSearchService


def make_client(handler, **kwargs) -> BiznaviClient:
    kwargs.setdefault("retry_delay", 0)
    return BiznaviClient(
        "x-token",
        "gw-token",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class FakeSource:
    """Returns results only once the keyword list is short enough."""

    def __init__(self, max_keywords: int):
        self.max_keywords = max_keywords
        self.calls = []

    async def search(self, keywords, page=1, count=10):
        self.calls.append(list(keywords))
        if len(keywords) <= self.max_keywords:
            return [PatentRecord(patent_number="1020200001111", title="드론 착륙 장치")]
        return []

    async def detail(self, apply_number):
        return None

    async def reload(self):
        raise PatentAppError("특허 데이터 파일을 읽을 수 없습니다.", ErrorType.FILE_READ_ERROR, 500)


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------

class TestNormalizer:
    def test_format_date(self):
        assert format_date("20240115") == "2024-01-15"
        assert format_date("2024.01.15") == "2024.01.15"
        assert format_date(None) == ""
        assert format_date("  ") == ""

    def test_strip_html_tags(self):
        assert strip_html_tags("<p>A &amp; B&nbsp;C</p>") == "A & B C"
        assert strip_html_tags(["<b>one</b>", "two"]) == "one two"
        assert strip_html_tags({"text": "<i>body</i>"}) == "body"
        assert strip_html_tags(None) == ""

    def test_register_number_preferred(self):
        record = normalize_search_item(
            {"register_number": "1012345670000", "apply_number": "1020200001111", "invention_name": "장치"}
        )
        assert record.patent_number == "1012345670000"

        record = normalize_search_item({"register_number": "  ", "apply_number": "1020200001111"})
        assert record.patent_number == "1020200001111"

    def test_search_item_fields(self):
        item = {
            "apply_number": "1020200001111",
            "invention_name": "드론 착륙 장치",
            "apply_at": "20200105",
            "sm_grade": "B",
            "now_grade": "A",
            "register_at": "20210301",
            "document_number": "1023",
            "출원인": "주식회사 테스트",
        }
        record = normalize_search_item(item)
        assert record.title == "드론 착륙 장치"
        assert record.application_date == "2020-01-05"
        assert record.registration_date == "2021-03-01"
        assert record.status == "A"
        assert record.publication_number == "1023"
        assert record.applicant == "주식회사 테스트"
        assert record.raw_data == item

    def test_detail_item_strips_html_and_counts_claims(self):
        record = normalize_detail_item(
            {
                "apply_number": "1020200001111",
                "summary": "<p>요약 &lt;본문&gt;</p>",
                "technialField": "<div>무인항공기</div>",
                "claimList": [{"text": "청구항 1"}, {"text": "청구항 2"}],
            }
        )
        assert record.summary == "요약 <본문>"
        assert record.technical_field == "무인항공기"
        assert record.claim_count == "2"

    def test_extract_items_envelopes(self):
        assert extract_items([{"a": 1}]) == [{"a": 1}]
        assert extract_items({"items": [{"a": 1}]}) == [{"a": 1}]
        assert extract_items({"list": [{"a": 1}, "junk"]}) == [{"a": 1}]
        assert extract_items({"unexpected": True}) == []


# ---------------------------------------------------------------------------
# Biznavi client
# ---------------------------------------------------------------------------

class TestBiznaviClient:
    @pytest.mark.asyncio
    async def test_search_sends_form_and_tokens(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["headers"] = request.headers
            seen["body"] = request.content.decode()
            return httpx.Response(200, json={"data": [{"apply_number": "1020200001111", "invention_name": "장치"}]})

        patents = await make_client(handler).search(["드론", "착륙"], count=5)

        assert [p.patent_number for p in patents] == ["1020200001111"]
        assert seen["headers"]["x-token"] == "x-token"
        assert seen["headers"]["gwtoken"] == "gw-token"
        assert seen["headers"]["x-requested-with"] == "XMLHttpRequest"
        assert "count=5" in seen["body"]
        assert "page=1" in seen["body"]

    @pytest.mark.asyncio
    async def test_missing_tokens(self):
        client = BiznaviClient("", "", transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        with pytest.raises(PatentAppError) as exc:
            await client.search(["드론"])
        assert exc.value.error_type == ErrorType.MISSING_API_KEY
        assert exc.value.message.startswith("API 토큰이 설정되지 않았습니다.")

    @pytest.mark.asyncio
    async def test_search_retries_network_errors(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            if len(attempts) < 3:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json=[])

        assert await make_client(handler).search(["드론"]) == []
        assert len(attempts) == 3

    @pytest.mark.asyncio
    async def test_search_gives_up_after_retries(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(httpx.ConnectError):
            await make_client(handler, retries=2).search(["드론"])

    @pytest.mark.asyncio
    async def test_detail_404_is_not_retried(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            return httpx.Response(404)

        assert await make_client(handler).detail("1020200001111") is None
        assert len(attempts) == 1
        assert attempts[0].url.params["nation"] == "KR"
        assert attempts[0].url.path.endswith("/1020200001111/detail")

    @pytest.mark.asyncio
    async def test_detail_retries_server_errors(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            if len(attempts) == 1:
                return httpx.Response(503)
            return httpx.Response(200, json={"data": {"apply_number": "1020200001111", "title": "장치"}})

        record = await make_client(handler).detail("1020200001111")
        assert record.title == "장치"
        assert len(attempts) == 2

    @pytest.mark.asyncio
    async def test_detail_persistent_server_error(self):
        with pytest.raises(PatentAppError) as exc:
            await make_client(lambda r: httpx.Response(500)).detail("1020200001111")
        assert exc.value.error_type == ErrorType.API_ERROR
        assert "500" in exc.value.details

    @pytest.mark.asyncio
    async def test_reload_is_a_no_op(self):
        result = await make_client(lambda r: httpx.Response(200)).reload()
        assert result.success is True
        assert result.count == 0


# ---------------------------------------------------------------------------
# Flat-file source
# ---------------------------------------------------------------------------

def write_patents(directory, name, items):
    directory.mkdir(parents=True, exist_ok=True)
    (directory / name).write_text(json.dumps(items, ensure_ascii=False), encoding="utf-8")


class TestFlatFileSource:
    @pytest.mark.asyncio
    async def test_search_requires_every_keyword(self, tmp_path):
        write_patents(
            tmp_path,
            "a.json",
            [
                {"apply_number": "1", "invention_name": "드론 착륙 장치", "summary": "카메라 이용"},
                {"apply_number": "2", "invention_name": "드론 배송", "summary": "물류"},
            ],
        )
        write_patents(tmp_path, "b.json", {"patents": [{"apply_number": "3", "title": "Camera DRONE"}]})
        source = FlatFilePatentSource(str(tmp_path))

        assert [p.patent_number for p in await source.search(["드론", "카메라"])] == ["1"]
        assert [p.patent_number for p in await source.search(["drone"])] == ["3"]
        assert (await source.detail("2")).title == "드론 배송"
        assert await source.detail("404") is None

    @pytest.mark.asyncio
    async def test_ttl_cache_and_reload(self, tmp_path):
        now = [0.0]
        write_patents(tmp_path, "a.json", [{"apply_number": "1", "title": "드론"}])
        source = FlatFilePatentSource(str(tmp_path), ttl_seconds=60, clock=lambda: now[0])
        assert len(source.load()) == 1

        write_patents(tmp_path, "b.json", [{"apply_number": "2", "title": "드론"}])
        now[0] = 30.0
        assert len(source.load()) == 1  # still cached

        now[0] = 61.0
        assert len(source.load()) == 2

        write_patents(tmp_path, "c.json", [{"apply_number": "3", "title": "드론"}])
        result = await source.reload()
        assert result.success is True
        assert result.count == 3

    def test_unreadable_files_are_skipped(self, tmp_path):
        write_patents(tmp_path, "a.json", [{"apply_number": "1"}])
        (tmp_path / "broken.json").write_text("[", encoding="utf-8")
        assert len(FlatFilePatentSource(str(tmp_path)).load()) == 1

    def test_missing_directory(self, tmp_path):
        with pytest.raises(PatentAppError) as exc:
            FlatFilePatentSource(str(tmp_path / "nope")).load()
        assert exc.value.error_type == ErrorType.FILE_READ_ERROR


# ---------------------------------------------------------------------------
# Search service
# ---------------------------------------------------------------------------

class TestPatentSearchService:
    @pytest.mark.asyncio
    async def test_reduces_keywords_until_results(self):
        source = FakeSource(max_keywords=2)
        result = await PatentSearchService(source).search(["드론", "착륙", "카메라", "마커"])

        assert source.calls == [
            ["드론", "착륙", "카메라", "마커"],
            ["드론", "착륙", "카메라"],
            ["드론", "착륙"],
        ]
        assert result.used_keywords == ["드론", "착륙"]
        assert result.total_keywords == 4
        assert len(result.patents) == 1

    @pytest.mark.asyncio
    async def test_no_results_after_single_keyword(self):
        source = FakeSource(max_keywords=0)
        with pytest.raises(PatentAppError) as exc:
            await PatentSearchService(source).search(["드론", "착륙"])
        assert exc.value.status_code == 404
        assert exc.value.error_type == ErrorType.NO_RESULTS
        assert len(source.calls) == 2

    @pytest.mark.asyncio
    async def test_reload_failure_reports_success_false(self):
        result = await PatentSearchService(FakeSource(1)).reload()
        assert result == ReloadResponse(success=False, count=0, message="특허 데이터 파일을 읽을 수 없습니다.")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_source():
    source = FakeSource(max_keywords=1)
    app.dependency_overrides[get_patent_service] = lambda: PatentSearchService(source)
    yield source
    app.dependency_overrides.pop(get_patent_service, None)


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"keywords": []}, {"keywords": "드론"}])
async def test_search_requires_keyword_list(async_client, fake_source, body):
    response = await async_client.post("/api/patent/search", json=body)
    assert response.status_code == 400
    assert response.json()["error"] == "키워드가 필요합니다."


@pytest.mark.asyncio
async def test_search_endpoint(async_client, fake_source):
    response = await async_client.post("/api/patent/search", json={"keywords": ["드론", "착륙"]})
    assert response.status_code == 200
    body = response.json()
    assert body["usedKeywords"] == ["드론"]
    assert body["totalKeywords"] == 2
    assert body["patents"][0]["patentNumber"] == "1020200001111"


@pytest.mark.asyncio
async def test_detail_endpoint_errors(async_client, fake_source):
    response = await async_client.post("/api/patent/detail", json={})
    assert response.status_code == 400
    assert response.json()["error"] == "idx 또는 applyNumber가 필요합니다."

    response = await async_client.post("/api/patent/detail", json={"idx": 0})
    assert response.status_code == 400

    response = await async_client.post("/api/patent/detail", json={"applyNumber": "1020200001111"})
    assert response.status_code == 404
    assert response.json()["error"] == "특허 상세 정보를 찾을 수 없습니다."


@pytest.mark.asyncio
async def test_reload_endpoint_failure(async_client, fake_source):
    response = await async_client.get("/api/patent/reload")
    assert response.status_code == 500
    assert response.json()["success"] is False
