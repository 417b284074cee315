from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field

from src.shared.schemas import CamelModel


class PatentRecord(CamelModel):
    # Biznavi and the UI send counts and numbers as JSON numbers
    model_config = ConfigDict(coerce_numbers_to_str=True)

    patent_number: str = ""
    title: str = ""
    applicant: Optional[str] = ""
    application_date: Optional[str] = ""
    summary: Optional[str] = ""
    abstract: Optional[str] = ""
    inventor: Optional[str] = ""
    status: Optional[str] = ""
    registration_date: Optional[str] = ""
    publication_number: Optional[str] = ""
    publication_date: Optional[str] = ""
    english_title: Optional[str] = ""
    classification_code: Optional[str] = ""
    claim_count: Optional[str] = ""
    expiration_date: Optional[str] = ""

    # Detail-only fields
    claim_list: Optional[List[Any]] = None
    bibliography_info: Optional[Dict[str, Any]] = None
    ipc_info_list: Optional[List[Any]] = None
    cpc_info_list: Optional[List[Any]] = None
    technical_field: Optional[str] = None
    background_art: Optional[str] = None
    tech_problem: Optional[str] = None
    tech_solution: Optional[str] = None
    advantageous_effects: Optional[str] = None
    description_of_drawings: Optional[str] = None
    description_of_embodiments: Optional[str] = None
    family_list: Optional[List[Any]] = None

    # Untouched source item
    raw_data: Optional[Dict[str, Any]] = None


class PatentSearchRequest(CamelModel):
    keywords: Optional[Any] = None


class PatentSearchResponse(CamelModel):
    patents: List[PatentRecord]
    used_keywords: List[str]
    total_keywords: int


class PatentDetailRequest(CamelModel):
    idx: Optional[int] = None
    apply_number: Optional[str] = None


class PatentDetailResponse(CamelModel):
    patent: PatentRecord


class ReloadResponse(CamelModel):
    success: bool
    message: str
    count: int = Field(0, ge=0)
