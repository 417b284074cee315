from datetime import datetime
from typing import List, Optional

from pydantic import Field

from src.drafting.schemas import DraftVersion
from src.extraction.schemas import ExtractedData
from src.patents.schemas import PatentRecord
from src.shared.schemas import CamelModel


class Step1Data(CamelModel):
    memo_text: str = ""
    invention_title: str = ""
    inventor: str = ""
    applicant: str = ""
    extracted_data: Optional[ExtractedData] = None


class Step2Data(CamelModel):
    selected_keywords: List[str] = Field(default_factory=list)
    selected_technical_fields: List[str] = Field(default_factory=list)
    selected_problems: List[str] = Field(default_factory=list)
    selected_features: List[str] = Field(default_factory=list)
    similar_patents: List[PatentRecord] = Field(default_factory=list)


class Step3Data(CamelModel):
    # Patent numbers, each expected to appear in step2 similar_patents
    selected_patents: List[str] = Field(default_factory=list)


class SaveSessionRequest(CamelModel):
    step1_data: Optional[Step1Data] = None
    step2_data: Optional[Step2Data] = None
    step3_data: Optional[Step3Data] = None
    draft_versions: Optional[List[DraftVersion]] = None


class SavedSession(CamelModel):
    id: str
    created_at: datetime
    title: str
    step1_data: Step1Data
    step2_data: Step2Data
    step3_data: Step3Data
    draft_versions: List[DraftVersion] = Field(default_factory=list)


class SaveSessionResponse(CamelModel):
    success: bool = True
    id: str
    message: str


class SavedSessionSummary(CamelModel):
    id: str
    title: str
    created_at: datetime
    draft_count: int = 0
    keywords: List[str] = Field(default_factory=list)


class SavedSessionListResponse(CamelModel):
    patents: List[SavedSessionSummary]
    count: int
