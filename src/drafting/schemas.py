from datetime import datetime
from typing import List, Optional, Union

from pydantic import ConfigDict, Field

from src.patents.schemas import PatentRecord
from src.shared.schemas import CamelModel


class StructuredData(CamelModel):
    technical_field: List[str] = Field(default_factory=list)
    problems: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    problem: Optional[str] = None
    solution: Optional[str] = None
    effects: List[str] = Field(default_factory=list)
    components: List[str] = Field(default_factory=list)


class GenerateDraftRequest(CamelModel):
    keywords: Union[str, List[str], None] = None
    invention_title: Optional[str] = None
    inventor: Optional[str] = None
    applicant: Optional[str] = None
    mode: Optional[str] = None
    description: Optional[str] = None
    original_content: Optional[str] = None
    feedback_comments: Optional[str] = None
    is_revision: bool = False
    # Sent by the result page when refining
    previous_draft: Optional[str] = None
    user_feedback: Optional[str] = None
    structured_data: Optional[StructuredData] = None
    reference_patents: List[PatentRecord] = Field(default_factory=list)

    @property
    def input_text(self) -> str:
        if self.description and self.description.strip():
            return self.description
        if isinstance(self.keywords, list):
            return ", ".join(k for k in self.keywords if k)
        return self.keywords or ""

    @property
    def revision_source(self) -> str:
        return self.original_content or self.previous_draft or ""

    @property
    def revision_feedback(self) -> str:
        return self.feedback_comments or self.user_feedback or ""

    @property
    def wants_revision(self) -> bool:
        return self.is_revision or self.mode == "refine"


class GenerateDraftResponse(CamelModel):
    result: str


class DraftVersion(CamelModel):
    # The UI may attach its own keys; they are saved as sent
    model_config = ConfigDict(extra="allow")

    version: int = Field(..., ge=1)
    content: str
    timestamp: datetime
    feedback_used: Optional[str] = None


class ParseDraftRequest(CamelModel):
    content: Optional[str] = None
    invention_title: Optional[str] = None


class DraftSection(CamelModel):
    title: str
    content: str
    color: str


class StructuredSummary(CamelModel):
    title: str
    abstract: str
    claims: List[str]
    technical_field: str
    problems: List[str]
    effects: List[str]


class ParseDraftResponse(CamelModel):
    sections: List[DraftSection]
    summary: StructuredSummary
