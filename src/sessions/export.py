import io
from typing import Optional, Tuple

from docx import Document as DocxDocument
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt

from src.core.errors import PatentAppError
from src.drafting.parser import clean_content, split_sections
from src.drafting.schemas import DraftVersion
from src.sessions.schemas import SavedSession
from src.workflow import PatentWorkflow

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TXT_MEDIA_TYPE = "text/plain; charset=utf-8"


class ExportService:
    def export(self, session: SavedSession, version: Optional[int] = None, fmt: str = "txt") -> Tuple[bytes, str, str]:
        """Returns (body, filename, media type) for one draft version of a saved session."""
        workflow = PatentWorkflow.from_saved(session)
        draft = workflow.get_draft(version)
        if draft is None:
            raise PatentAppError.not_found("해당 버전의 초안을 찾을 수 없습니다.")

        filename = f"{session.id}-v{draft.version}"
        if fmt == "docx":
            return self.generate_docx(workflow, draft), f"{filename}.docx", DOCX_MEDIA_TYPE
        return draft.content.encode("utf-8"), f"{filename}.txt", TXT_MEDIA_TYPE

    def generate_docx(self, workflow: PatentWorkflow, draft: DraftVersion) -> bytes:
        doc = DocxDocument()

        self._add_cover(doc, workflow, draft)

        sections = split_sections(draft.content)
        if not sections:
            doc.add_heading("명세서", level=1)
            self._add_body(doc, clean_content(draft.content))
        for section in sections:
            doc.add_heading(section.title, level=1)
            self._add_body(doc, section.content)

        buffer = io.BytesIO()
        doc.save(buffer)
        return buffer.getvalue()

    def _add_cover(self, doc: DocxDocument, workflow: PatentWorkflow, draft: DraftVersion):
        title = doc.add_paragraph()
        title.alignment = WD_ALIGN_PARAGRAPH.CENTER
        run = title.add_run(workflow.invention_title or "제목 없음")
        run.bold = True
        run.font.size = Pt(24)

        doc.add_paragraph()  # spacer

        for label, value in (("발명자", workflow.inventor), ("출원인", workflow.applicant)):
            if value:
                p = doc.add_paragraph()
                p.alignment = WD_ALIGN_PARAGRAPH.CENTER
                run = p.add_run(f"{label}: {value}")
                run.font.size = Pt(12)

        p = doc.add_paragraph()
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER
        run = p.add_run(f"초안 버전 {draft.version} ({draft.timestamp:%Y-%m-%d %H:%M})")
        run.font.size = Pt(11)

        doc.add_page_break()

    def _add_body(self, doc: DocxDocument, text: str):
        for line in text.split("\n"):
            if line.strip():
                doc.add_paragraph(line.strip())
