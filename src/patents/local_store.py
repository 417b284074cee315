import json
import logging
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from src.config import settings
from src.core.errors import ErrorType, PatentAppError
from src.patents.normalizer import extract_items, normalize_search_item
from src.patents.schemas import PatentRecord, ReloadResponse

logger = logging.getLogger(__name__)

# data dir -> (loaded at, records)
_patent_cache: Dict[str, Tuple[float, List[PatentRecord]]] = {}


def clear_patent_cache() -> None:
    _patent_cache.clear()


class FlatFilePatentSource:
    """Serves patent search from exported JSON files kept on local disk."""

    def __init__(
        self,
        data_dir: Optional[str] = None,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.data_dir = Path(data_dir or settings.PATENT_DATA_DIR)
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.PATENT_CACHE_TTL_SECONDS
        self.clock = clock

    @property
    def _cache_key(self) -> str:
        return str(self.data_dir.resolve())

    def load(self, force: bool = False) -> List[PatentRecord]:
        cached = _patent_cache.get(self._cache_key)
        now = self.clock()
        if cached and not force and now - cached[0] < self.ttl_seconds:
            return cached[1]

        records = self._read_all()
        _patent_cache[self._cache_key] = (now, records)
        logger.info("[patent-file] Loaded %d patents from %s", len(records), self.data_dir)
        return records

    def _read_all(self) -> List[PatentRecord]:
        if not self.data_dir.is_dir():
            raise PatentAppError(
                "특허 데이터 파일을 읽을 수 없습니다.",
                ErrorType.FILE_READ_ERROR,
                500,
                details=f"{self.data_dir} 디렉터리가 없습니다.",
            )

        records: List[PatentRecord] = []
        readable = 0
        for path in sorted(self.data_dir.glob("*.json")):
            try:
                payload = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.error("[patent-file] Skipping %s: %s", path.name, e)
                continue
            readable += 1
            records.extend(normalize_search_item(item) for item in extract_items(payload))

        if readable == 0:
            raise PatentAppError(
                "특허 데이터 파일을 읽을 수 없습니다.",
                ErrorType.FILE_READ_ERROR,
                500,
                details=f"{self.data_dir}에 읽을 수 있는 JSON 파일이 없습니다.",
            )
        return records

    @staticmethod
    def _haystack(record: PatentRecord) -> str:
        parts = [record.title, record.summary, record.abstract, record.classification_code]
        return " ".join(p for p in parts if p).lower()

    async def search(self, keywords: List[str], page: int = 1, count: int = 10) -> List[PatentRecord]:
        needles = [k.lower() for k in keywords]
        matches = [r for r in self.load() if all(n in self._haystack(r) for n in needles)]
        start = (max(page, 1) - 1) * count
        return matches[start:start + count]

    async def detail(self, apply_number: Optional[str]) -> Optional[PatentRecord]:
        if not apply_number:
            return None
        for record in self.load():
            raw = record.raw_data or {}
            if apply_number in (record.patent_number, raw.get("apply_number"), raw.get("register_number")):
                return record
        return None

    async def reload(self) -> ReloadResponse:
        records = self.load(force=True)
        return ReloadResponse(
            success=True,
            count=len(records),
            message=f"{len(records)}개의 특허 데이터를 다시 불러왔습니다.",
        )
