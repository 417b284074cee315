from typing import List, Optional
from pydantic import Field

from src.shared.schemas import CamelModel


class ExtractKeywordsRequest(CamelModel):
    text: Optional[str] = None


class ExtractedData(CamelModel):
    keywords: List[str] = Field(default_factory=list, description="7-20 core technical keywords")
    technical_field: List[str] = Field(default_factory=list, description="3-5 technical fields")
    problems: List[str] = Field(default_factory=list, description="3-5 problems the invention solves")
    features: List[str] = Field(default_factory=list, description="3-7 core functions / features")


class ExtractedMemoResponse(ExtractedData):
    memo_text: str
    filename: Optional[str] = None
