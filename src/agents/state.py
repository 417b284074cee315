from typing import TypedDict, Optional, List

from src.drafting.schemas import GenerateDraftRequest
from src.extraction.schemas import ExtractedData


class ExtractionAgentState(TypedDict):
    text: str
    raw_response: Optional[str]
    extracted_data: Optional[ExtractedData]
    errors: List[str]


class DraftAgentState(TypedDict):
    request: GenerateDraftRequest
    prompt_kind: Optional[str]  # "revision" | "memo" | "default"
    prompt: Optional[str]
    result: Optional[str]
    error_kind: Optional[str]  # "timeout" | "invalid_response"
    errors: List[str]
