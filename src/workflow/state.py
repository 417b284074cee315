"""The four-step drafting wizard.

    memo ──apply_extraction──► selection ──set_similar_patents──► patents ──add_draft──► result

Every step can be re-entered; ``reset`` returns to ``memo`` with nothing kept.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Union

from src.core.errors import ErrorType, PatentAppError
from src.drafting.schemas import DraftVersion
from src.extraction.schemas import ExtractedData
from src.patents.schemas import PatentRecord
from src.sessions.schemas import (
    SavedSession,
    SaveSessionRequest,
    Step1Data,
    Step2Data,
    Step3Data,
)

logger = logging.getLogger(__name__)


class WizardStep(str, Enum):
    MEMO = "memo"
    SELECTION = "selection"
    PATENTS = "patents"
    RESULT = "result"


class WorkflowError(PatentAppError):
    def __init__(self, message: str):
        super().__init__(message, ErrorType.BAD_REQUEST, 400)


def _toggle(values: List[str], value: str) -> None:
    if value in values:
        values.remove(value)
    else:
        values.append(value)


class PatentWorkflow:
    def __init__(
        self,
        memo_text: str = "",
        invention_title: str = "",
        inventor: str = "",
        applicant: str = "",
    ):
        self.memo_text = memo_text
        self.invention_title = invention_title
        self.inventor = inventor
        self.applicant = applicant
        self.step = WizardStep.MEMO
        self.extracted_data: Optional[ExtractedData] = None
        self.selected_keywords: List[str] = []
        self.selected_technical_fields: List[str] = []
        self.selected_problems: List[str] = []
        self.selected_features: List[str] = []
        self.similar_patents: List[PatentRecord] = []
        self.selected_patents: List[str] = []
        self.draft_versions: List[DraftVersion] = []

    # Step 1 -> 2

    def apply_extraction(self, data: ExtractedData) -> None:
        self.extracted_data = data
        self.selected_keywords = list(data.keywords)
        self.selected_technical_fields = list(data.technical_field)
        self.selected_problems = list(data.problems)
        self.selected_features = list(data.features)
        self.step = WizardStep.SELECTION

    def _require_extraction(self) -> ExtractedData:
        if self.extracted_data is None:
            raise WorkflowError("키워드 추출을 먼저 진행해주세요.")
        return self.extracted_data

    def toggle_keyword(self, keyword: str) -> None:
        self._require_extraction()
        _toggle(self.selected_keywords, keyword)

    def toggle_technical_field(self, field: str) -> None:
        self._require_extraction()
        _toggle(self.selected_technical_fields, field)

    def toggle_problem(self, problem: str) -> None:
        self._require_extraction()
        _toggle(self.selected_problems, problem)

    def toggle_feature(self, feature: str) -> None:
        self._require_extraction()
        _toggle(self.selected_features, feature)

    # Step 2 -> 3

    def set_similar_patents(self, patents: List[PatentRecord]) -> None:
        self._require_extraction()
        self.similar_patents = list(patents)
        known = {p.patent_number for p in self.similar_patents}
        self.selected_patents = [n for n in self.selected_patents if n in known]
        self.step = WizardStep.PATENTS

    def toggle_patent(self, patent_number: str) -> None:
        if not any(p.patent_number == patent_number for p in self.similar_patents):
            raise WorkflowError("검색 결과에 없는 특허입니다.")
        _toggle(self.selected_patents, patent_number)

    @property
    def reference_patents(self) -> List[PatentRecord]:
        return [p for p in self.similar_patents if p.patent_number in self.selected_patents]

    # Step 3 -> result

    def add_draft(self, content: str, feedback: Optional[str] = None) -> DraftVersion:
        if not content or not content.strip():
            raise WorkflowError("초안 내용이 필요합니다.")
        if not self.draft_versions and not self.selected_patents:
            raise WorkflowError("참고할 특허를 하나 이상 선택해주세요.")

        draft = DraftVersion(
            version=self.draft_versions[-1].version + 1 if self.draft_versions else 1,
            content=content,
            timestamp=datetime.now(timezone.utc),
            feedback_used=feedback or None,
        )
        self.draft_versions.append(draft)
        self.step = WizardStep.RESULT
        return draft

    @property
    def latest_draft(self) -> Optional[DraftVersion]:
        return self.draft_versions[-1] if self.draft_versions else None

    def get_draft(self, version: Optional[int] = None) -> Optional[DraftVersion]:
        if version is None:
            return self.latest_draft
        return next((d for d in self.draft_versions if d.version == version), None)

    def can_refine(self, feedback: Optional[str]) -> bool:
        return bool(feedback and feedback.strip()) and bool(self.draft_versions)

    def reset(self) -> None:
        self.__init__()

    # Persistence

    def to_save_payload(self) -> SaveSessionRequest:
        return SaveSessionRequest(
            step1_data=Step1Data(
                memo_text=self.memo_text,
                invention_title=self.invention_title,
                inventor=self.inventor,
                applicant=self.applicant,
                extracted_data=self.extracted_data,
            ),
            step2_data=Step2Data(
                selected_keywords=list(self.selected_keywords),
                selected_technical_fields=list(self.selected_technical_fields),
                selected_problems=list(self.selected_problems),
                selected_features=list(self.selected_features),
                similar_patents=list(self.similar_patents),
            ),
            step3_data=Step3Data(selected_patents=list(self.selected_patents)),
            draft_versions=list(self.draft_versions),
        )

    @classmethod
    def from_saved(cls, data: Union[SavedSession, SaveSessionRequest]) -> "PatentWorkflow":
        step1 = data.step1_data or Step1Data()
        step2 = data.step2_data or Step2Data()
        step3 = data.step3_data or Step3Data()

        workflow = cls(
            memo_text=step1.memo_text,
            invention_title=step1.invention_title,
            inventor=step1.inventor,
            applicant=step1.applicant,
        )
        workflow.extracted_data = step1.extracted_data
        workflow.selected_keywords = list(step2.selected_keywords)
        workflow.selected_technical_fields = list(step2.selected_technical_fields)
        workflow.selected_problems = list(step2.selected_problems)
        workflow.selected_features = list(step2.selected_features)
        workflow.similar_patents = list(step2.similar_patents)
        workflow.selected_patents = list(step3.selected_patents)
        workflow.draft_versions = list(data.draft_versions or [])

        if workflow.draft_versions:
            workflow.step = WizardStep.RESULT
        elif workflow.similar_patents or workflow.selected_patents:
            workflow.step = WizardStep.PATENTS
        elif workflow.extracted_data is not None:
            workflow.step = WizardStep.SELECTION
        logger.debug("Restored workflow at step %s", workflow.step.value)
        return workflow
