import io
import logging
from typing import List

from docx import Document as DocxDocument
import fitz  # pymupdf

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = (".txt", ".md")


class IngestionService:
    """Turns an uploaded invention memo into plain text."""

    def extract_text(self, file_content: bytes, filename: str) -> str:
        """
        Extracts full text from the uploaded memo.
        Supports PDF, DOCX, and plain text (UTF-8).
        """
        lower = (filename or "").lower()
        if lower.endswith('.pdf'):
            pages = self.extract_pages(file_content)
            return "\n".join(p["content"] for p in pages)
        elif lower.endswith('.docx'):
            return self._extract_docx_text(file_content)
        elif lower.endswith(TEXT_SUFFIXES) or "." not in lower:
            try:
                return file_content.decode('utf-8-sig')
            except UnicodeDecodeError:
                raise ValueError("Unsupported file format or encoding")
        raise ValueError(f"Unsupported file type: {filename}")

    def extract_pages(self, file_content: bytes) -> List[dict]:
        """Extract text page-by-page from a PDF. Returns list of {page_number, content}."""
        pages = []
        try:
            doc = fitz.open(stream=file_content, filetype="pdf")
        except Exception as e:
            raise ValueError(f"Could not open PDF: {e}") from e
        try:
            for page_num, page in enumerate(doc, start=1):
                text = page.get_text() or ""
                if text.strip():
                    pages.append({"page_number": page_num, "content": text})
        finally:
            doc.close()
        logger.info("PDF memo parsed: %d pages with text", len(pages))
        return pages

    def _extract_docx_text(self, file_content: bytes) -> str:
        """Extract text from a DOCX file using python-docx."""
        try:
            doc = DocxDocument(io.BytesIO(file_content))
        except Exception as e:
            raise ValueError(f"Could not open DOCX: {e}") from e
        return "\n".join(p.text for p in doc.paragraphs if p.text.strip())
