import json
import logging
import re
from typing import Any, List, Optional

from src.extraction.schemas import ExtractedData

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")
_FIRST_LIST = re.compile(r"\[(.*?)\]", re.S)
_TRAILING_COMMA = re.compile(r",\s*([}\]])")
_LINE_COMMENT = re.compile(r"(?m)(?<=[\[\],\"])[ \t]*//[^\n]*$")


def extract_json_object(text: str) -> dict[str, Any]:
    """Parse the outermost {...} span of a free-text model response.

    Raises ValueError when no object is present or it does not parse.
    """
    match = _JSON_OBJECT.search(text or "")
    if not match:
        raise ValueError("No JSON found in response")

    raw = match.group(0)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        # Models often echo the template's comments and trailing commas
        cleaned = _TRAILING_COMMA.sub(r"\1", _LINE_COMMENT.sub("", raw))
        data = json.loads(cleaned)

    if not isinstance(data, dict):
        raise ValueError("Response JSON is not an object")
    return data


def _str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if v is not None and str(v).strip()]


def recover_extracted_data(text: str) -> Optional[ExtractedData]:
    """Best-effort recovery of extraction fields; None when nothing usable is found."""
    try:
        data = extract_json_object(text)
        return ExtractedData(
            keywords=_str_list(data.get("keywords")),
            technical_field=_str_list(data.get("technicalField", data.get("technical_field"))),
            problems=_str_list(data.get("problems")),
            features=_str_list(data.get("features")),
        )
    except ValueError as e:
        logger.warning("[extract-keywords] Failed to parse structured data: %s", e)

    keywords_match = _FIRST_LIST.search(text or "")
    if keywords_match:
        keywords = [k.strip().replace('"', "") for k in keywords_match.group(1).split(",")]
        return ExtractedData(keywords=[k for k in keywords if k])

    return None
