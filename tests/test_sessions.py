"""Saved-session endpoints against a temporary directory."""
import io
import json

import pytest
from docx import Document

from src.sessions.store import JsonFileSessionStore, new_session_id


class TestSessionIds:
    def test_id_format(self):
        session_id = new_session_id()
        prefix, millis, suffix = session_id.split("-")
        assert prefix == "patent"
        assert millis.isdigit()
        assert len(suffix) == 7

    def test_unsafe_ids_are_not_found(self, tmp_path):
        store = JsonFileSessionStore(str(tmp_path))
        assert store._path("../etc/passwd") is None
        assert store._path("patent-1-abc") == tmp_path / "patent-1-abc.json"


@pytest.mark.asyncio
async def test_save_requires_all_steps(async_client, sample_session_payload):
    del sample_session_payload["draftVersions"]
    response = await async_client.post("/api/patent/save", json=sample_session_payload)
    assert response.status_code == 400
    assert response.json()["error"] == "필수 데이터가 누락되었습니다."
    assert response.json()["errorType"] == "bad_request"


@pytest.mark.asyncio
async def test_save_get_delete_round_trip(async_client, session_store, sample_session_payload):
    response = await async_client.post("/api/patent/save", json=sample_session_payload)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "저장되었습니다."
    session_id = body["id"]

    # Written as readable UTF-8 JSON
    raw = (session_store.base_dir / f"{session_id}.json").read_text(encoding="utf-8")
    assert "영상 기반 드론 착륙 시스템" in raw
    stored = json.loads(raw)
    assert stored["title"] == "영상 기반 드론 착륙 시스템"
    assert stored["draftVersions"][0]["timestamp"].startswith("2024-05-01T10:00:00")

    response = await async_client.get(f"/api/patent/saved/{session_id}")
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == session_id
    assert data["step1Data"]["inventor"] == "홍길동"
    assert data["step3Data"]["selectedPatents"] == ["1020200001111"]

    response = await async_client.delete(f"/api/patent/saved/{session_id}")
    assert response.status_code == 200
    assert response.json()["message"] == "삭제되었습니다."

    response = await async_client.get(f"/api/patent/saved/{session_id}")
    assert response.status_code == 404
    assert response.json()["error"] == "저장된 기록을 찾을 수 없습니다."


@pytest.mark.asyncio
async def test_save_accepts_numeric_patent_fields(async_client, session_store, sample_session_payload):
    sample_session_payload["step2Data"]["similarPatents"][0]["claimCount"] = 5
    response = await async_client.post("/api/patent/save", json=sample_session_payload)
    assert response.status_code == 200

    stored = json.loads((session_store.base_dir / f"{response.json()['id']}.json").read_text(encoding="utf-8"))
    assert stored["step2Data"]["similarPatents"][0]["claimCount"] == "5"


@pytest.mark.asyncio
async def test_save_keeps_extra_draft_keys(async_client, session_store, sample_session_payload):
    sample_session_payload["draftVersions"][0]["author"] = "홍길동"
    session_id = (await async_client.post("/api/patent/save", json=sample_session_payload)).json()["id"]

    stored = json.loads((session_store.base_dir / f"{session_id}.json").read_text(encoding="utf-8"))
    assert stored["draftVersions"][0]["author"] == "홍길동"

    response = await async_client.get(f"/api/patent/saved/{session_id}")
    assert response.json()["draftVersions"][0]["author"] == "홍길동"


@pytest.mark.asyncio
async def test_save_filters_unknown_selected_patents(async_client, session_store, sample_session_payload):
    sample_session_payload["step3Data"]["selectedPatents"] = ["1020200001111", "9999"]
    response = await async_client.post("/api/patent/save", json=sample_session_payload)
    stored = session_store.read(response.json()["id"])
    assert stored["step3Data"]["selectedPatents"] == ["1020200001111"]


@pytest.mark.asyncio
async def test_save_keeps_selection_when_none_match(async_client, session_store, sample_session_payload):
    sample_session_payload["step3Data"]["selectedPatents"] = ["9999"]
    response = await async_client.post("/api/patent/save", json=sample_session_payload)
    stored = session_store.read(response.json()["id"])
    assert stored["step3Data"]["selectedPatents"] == ["9999"]


@pytest.mark.asyncio
async def test_save_defaults_title(async_client, session_store, sample_session_payload):
    sample_session_payload["step1Data"]["inventionTitle"] = ""
    response = await async_client.post("/api/patent/save", json=sample_session_payload)
    assert session_store.read(response.json()["id"])["title"] == "제목 없음"


@pytest.mark.asyncio
async def test_list_newest_first_and_skips_broken_files(async_client, session_store):
    session_store.write(
        "patent-1-aaaaaaa",
        {
            "id": "patent-1-aaaaaaa",
            "title": "오래된 기록",
            "createdAt": "2024-01-01T00:00:00Z",
            "step2Data": {"selectedKeywords": ["a", "b", "c", "d"]},
            "draftVersions": [{}, {}],
        },
    )
    session_store.write(
        "patent-2-bbbbbbb",
        {"id": "patent-2-bbbbbbb", "title": "", "createdAt": "2024-06-01T00:00:00Z"},
    )
    (session_store.base_dir / "broken.json").write_text("{not json", encoding="utf-8")

    response = await async_client.get("/api/patent/saved")
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    first, second = body["patents"]
    assert first["id"] == "patent-2-bbbbbbb"
    assert first["title"] == "제목 없음"
    assert first["draftCount"] == 0
    assert second["keywords"] == ["a", "b", "c"]
    assert second["draftCount"] == 2


@pytest.mark.asyncio
async def test_delete_missing_session(async_client):
    response = await async_client.delete("/api/patent/saved/patent-0-missing")
    assert response.status_code == 404
    assert response.json()["errorType"] == "not_found"


@pytest.mark.asyncio
async def test_unreadable_session_is_file_read_error(async_client, session_store):
    session_store.base_dir.mkdir(parents=True)
    (session_store.base_dir / "patent-3-ccccccc.json").write_text("{", encoding="utf-8")
    response = await async_client.get("/api/patent/saved/patent-3-ccccccc")
    assert response.status_code == 500
    assert response.json()["errorType"] == "file_read_error"


@pytest.mark.asyncio
async def test_session_with_wrong_shape_is_file_read_error(async_client, session_store):
    session_store.base_dir.mkdir(parents=True)
    (session_store.base_dir / "patent-9-zzzzzzz.json").write_text(
        json.dumps({"id": "patent-9-zzzzzzz", "title": "t"}), encoding="utf-8"
    )

    response = await async_client.get("/api/patent/saved/patent-9-zzzzzzz")
    assert response.status_code == 500
    assert response.json()["errorType"] == "file_read_error"
    assert response.json()["error"] == "저장된 기록을 읽을 수 없습니다."

    response = await async_client.get("/api/patent/saved/patent-9-zzzzzzz/export")
    assert response.status_code == 500
    assert response.json()["errorType"] == "file_read_error"


@pytest.mark.asyncio
async def test_export_txt_and_docx(async_client, sample_session_payload):
    session_id = (await async_client.post("/api/patent/save", json=sample_session_payload)).json()["id"]

    response = await async_client.get(f"/api/patent/saved/{session_id}/export")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert f"{session_id}-v1.txt" in response.headers["content-disposition"]
    assert "본 발명은 드론에 관한 것이다." in response.text

    response = await async_client.get(f"/api/patent/saved/{session_id}/export", params={"format": "docx"})
    assert response.status_code == 200
    doc = Document(io.BytesIO(response.content))
    texts = [p.text for p in doc.paragraphs]
    assert "영상 기반 드론 착륙 시스템" in texts
    assert "기술분야" in texts
    assert "본 발명은 드론에 관한 것이다." in texts


@pytest.mark.asyncio
async def test_export_missing_version(async_client, sample_session_payload):
    session_id = (await async_client.post("/api/patent/save", json=sample_session_payload)).json()["id"]
    response = await async_client.get(f"/api/patent/saved/{session_id}/export", params={"version": 5})
    assert response.status_code == 404
