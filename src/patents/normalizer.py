"""Maps raw Biznavi / flat-file items onto PatentRecord.

Field names differ between the search endpoint, the detail endpoint and
hand-exported files (snake_case, camelCase and Korean keys all occur), so
every field is resolved from an ordered list of candidate keys.
"""

import html
import logging
import re
from typing import Any, Dict, List, Optional

from src.patents.schemas import PatentRecord

logger = logging.getLogger(__name__)

_TAG = re.compile(r"<[^>]*>")
_ENTITIES = {
    "&nbsp;": " ",
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
}
LIST_KEYS = ("data", "items", "result", "list", "patents")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, dict)):
        return len(value) == 0
    return value is False


def first_of(item: Dict[str, Any], *keys: str) -> str:
    """First non-blank value among keys, as a string."""
    for key in keys:
        value = item.get(key)
        if not _is_blank(value):
            return value if isinstance(value, str) else str(value)
    return ""


def format_date(value: Any) -> str:
    """YYYYMMDD -> YYYY-MM-DD; other non-blank values pass through trimmed."""
    if _is_blank(value):
        return ""
    text = str(value).strip()
    if len(text) == 8 and text.isdigit():
        return f"{text[:4]}-{text[4:6]}-{text[6:]}"
    return text


def strip_html_tags(value: Any) -> str:
    if _is_blank(value):
        return ""

    if isinstance(value, list):
        return " ".join(s for s in (strip_html_tags(v) for v in value) if s)

    if isinstance(value, dict):
        for key in ("text", "content", "description", "value"):
            if not _is_blank(value.get(key)):
                return strip_html_tags(value[key])
        strings = [v for v in value.values() if isinstance(v, str)]
        return " ".join(strings)

    text = str(value)
    text = _TAG.sub("", text)
    for entity, replacement in _ENTITIES.items():
        text = text.replace(entity, replacement)
    # Anything the explicit table does not cover
    return html.unescape(text).strip()


def extract_items(payload: Any) -> List[Dict[str, Any]]:
    """Pull the result list out of whichever envelope the response uses."""
    if isinstance(payload, list):
        items = payload
    elif isinstance(payload, dict):
        items = next(
            (payload[key] for key in LIST_KEYS if isinstance(payload.get(key), list)),
            None,
        )
        if items is None:
            logger.info("[patent-search] Unexpected response structure: %s", str(payload)[:500])
            return []
    else:
        return []
    return [item for item in items if isinstance(item, dict)]


def extract_detail_item(payload: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(payload, dict):
        return None
    for key in ("data", "item", "result"):
        if isinstance(payload.get(key), dict) and payload[key]:
            return payload[key]
    return payload or None


def normalize_search_item(item: Dict[str, Any]) -> PatentRecord:
    register_number = item.get("register_number")
    if isinstance(register_number, str) and register_number.strip():
        patent_number = register_number
    else:
        patent_number = first_of(item, "apply_number", "patentNumber", "applicationNumber")

    return PatentRecord(
        patent_number=patent_number,
        title=first_of(item, "invention_name", "title", "inventionTitle", "발명의명칭", "특허명", "patent_title"),
        applicant=first_of(item, "applicant", "applicantName", "출원인", "최종권리자", "applicant_name"),
        application_date=format_date(item.get("apply_at"))
        or first_of(item, "applicationDate", "출원일자", "출원일", "application_date"),
        summary=first_of(item, "summary", "abstract", "요약", "요약문", "patent_summary"),
        abstract=first_of(item, "abstract", "상세", "상세설명", "patent_abstract"),
        inventor=first_of(item, "inventor", "inventorName", "발명자", "발명자명", "inventor_name"),
        status=first_of(item, "now_grade", "sm_grade", "status", "legalStatus", "상태", "법적상태", "patent_status"),
        registration_date=format_date(item.get("register_at"))
        or first_of(item, "registrationDate", "등록일자", "등록일", "registration_date"),
        publication_number=first_of(item, "document_number", "publicationNumber", "공고번호", "publication_number"),
        publication_date=first_of(item, "publicationDate", "공고일자", "공고일", "publication_date"),
        english_title=first_of(item, "englishTitle", "영문발명의명칭", "english_title"),
        classification_code=first_of(item, "classificationCode", "분류코드", "classification_code"),
        claim_count=first_of(item, "claimCount", "청구항수", "claim_count"),
        expiration_date=first_of(item, "expirationDate", "만료일자", "expiration_date"),
        raw_data=item,
    )


def normalize_detail_item(item: Dict[str, Any]) -> PatentRecord:
    bib = item.get("bibliographyInfo") if isinstance(item.get("bibliographyInfo"), dict) else {}
    claim_list = item.get("claimList") if isinstance(item.get("claimList"), list) else []

    return PatentRecord(
        patent_number=first_of(item, "apply_number", "patentNumber", "applicationNumber", "register_number"),
        title=first_of(item, "invention_name", "title", "inventionTitle"),
        applicant=first_of(item, "applicant", "applicantName") or first_of(bib, "applicant"),
        application_date=format_date(item.get("apply_at"))
        or format_date(item.get("application_date"))
        or first_of(item, "applicationDate")
        or first_of(bib, "apply_at"),
        summary=strip_html_tags(
            next((item[k] for k in ("summary", "abstract", "요약", "요약문", "summary_text") if not _is_blank(item.get(k))), "")
        ),
        abstract=strip_html_tags(
            next(
                (
                    item[k]
                    for k in ("abstract", "detail", "상세", "상세설명", "description", "detail_text", "full_text")
                    if not _is_blank(item.get(k))
                ),
                "",
            )
        ),
        inventor=first_of(item, "inventor", "inventorName", "발명자") or first_of(bib, "inventor"),
        status=first_of(item, "now_grade", "sm_grade", "status"),
        registration_date=format_date(item.get("register_at"))
        or format_date(item.get("registration_date"))
        or first_of(item, "registrationDate")
        or first_of(bib, "register_at"),
        publication_number=first_of(
            item, "publication_number", "publicationNumber", "document_number", "공고번호", "open_number"
        )
        or first_of(bib, "publication_number"),
        publication_date=format_date(item.get("publication_at"))
        or format_date(item.get("publication_date"))
        or first_of(item, "publicationDate", "공고일자")
        or first_of(bib, "publication_at"),
        english_title=first_of(item, "englishTitle", "english_title", "영문발명의명칭", "english_name"),
        classification_code=first_of(item, "classification_code", "classificationCode", "분류코드", "ipc_code", "ipc"),
        claim_count=first_of(item, "claim_count", "claimCount", "청구항수", "claims_count")
        or (str(len(claim_list)) if claim_list else ""),
        expiration_date=format_date(item.get("expiration_at"))
        or format_date(item.get("expiration_date"))
        or first_of(item, "expirationDate", "만료일자"),
        claim_list=claim_list,
        bibliography_info=bib,
        ipc_info_list=item.get("ipcInfoList") or [],
        cpc_info_list=item.get("cpcInfoList") or [],
        # "technialField" is how the upstream API spells it
        technical_field=strip_html_tags(
            item.get("technialField") or item.get("technicalField") or item.get("기술분야")
        ),
        background_art=strip_html_tags(item.get("backgroundArt") or item.get("배경기술")),
        tech_problem=strip_html_tags(
            item.get("techProblem") or item.get("기술적과제") or item.get("해결하려는과제")
        ),
        tech_solution=strip_html_tags(
            item.get("techSolution") or item.get("기술적해결수단") or item.get("해결수단")
        ),
        advantageous_effects=strip_html_tags(
            item.get("advantageousEffects") or item.get("유리한효과") or item.get("발명의효과")
        ),
        description_of_drawings=strip_html_tags(
            item.get("descriptionOfDrawings") or item.get("도면의간단한설명")
        ),
        description_of_embodiments=strip_html_tags(
            item.get("descriptionOfEmbodiments") or item.get("실시예") or item.get("실시예에대한상세한설명")
        ),
        family_list=item.get("familyList") or [],
        raw_data=item,
    )
