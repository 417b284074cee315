import json
import logging
import re
import secrets
import string
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.config import settings
from src.core.errors import ErrorType, PatentAppError

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "저장된 기록을 찾을 수 없습니다."
_SAFE_ID = re.compile(r"[A-Za-z0-9_-]+")
_BASE36 = string.digits + string.ascii_lowercase


def new_session_id() -> str:
    """patent-<epoch ms>-<7 base36 chars>"""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(7))
    return f"patent-{int(time.time() * 1000)}-{suffix}"


class JsonFileSessionStore:
    """One pretty-printed JSON file per saved session."""

    def __init__(self, base_dir: Optional[str] = None):
        self.base_dir = Path(base_dir or settings.SAVED_SESSIONS_DIR)

    def _ensure_dir(self) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, session_id: str) -> Optional[Path]:
        if not session_id or not _SAFE_ID.fullmatch(session_id):
            return None
        return self.base_dir / f"{session_id}.json"

    def write(self, session_id: str, data: Dict[str, Any]) -> Path:
        self._ensure_dir()
        path = self._path(session_id)
        if path is None:
            raise ValueError(f"Invalid session id: {session_id!r}")
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info("[save-session] Saved %s", path.name)
        return path

    def read(self, session_id: str) -> Dict[str, Any]:
        path = self._path(session_id)
        if path is None or not path.is_file():
            raise PatentAppError.not_found(NOT_FOUND_MESSAGE)
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error("[save-session] Failed to read %s: %s", path.name, e)
            raise PatentAppError(
                "저장된 기록을 읽을 수 없습니다.",
                ErrorType.FILE_READ_ERROR,
                500,
                details=str(e),
            )

    def read_all(self) -> List[Dict[str, Any]]:
        """Every readable session; broken files are logged and skipped."""
        self._ensure_dir()
        sessions = []
        for path in sorted(self.base_dir.glob("*.json")):
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.error("[save-session] Error reading file %s: %s", path.name, e)
                continue
            if isinstance(data, dict):
                sessions.append(data)
            else:
                logger.error("[save-session] Unexpected content in %s", path.name)
        return sessions

    def delete(self, session_id: str) -> None:
        path = self._path(session_id)
        if path is None or not path.is_file():
            raise PatentAppError.not_found(NOT_FOUND_MESSAGE)
        path.unlink()
        logger.info("[save-session] Deleted %s", path.name)
