"""
Plain-text extraction from translated documents.

Used by the combined text output, which needs the words of a translated
document rather than its layout.
"""

from __future__ import annotations

import io

import fitz  # PyMuPDF
from docx import Document as DocxDocument
from openpyxl import load_workbook
from pptx import Presentation

from doc_translator.errors import MalformedDocument, UnsupportedMimeType
from doc_translator.models import DOCX_MIME, PDF_MIME, PPTX_MIME, XLSX_MIME


def _pdf_text(content: bytes) -> str:
    with fitz.open(stream=content, filetype="pdf") as doc:
        return "\n".join(page.get_text().strip() for page in doc)


def _docx_text(content: bytes) -> str:
    doc = DocxDocument(io.BytesIO(content))
    parts = [p.text for p in doc.paragraphs if p.text.strip()]
    for table in doc.tables:
        for row in table.rows:
            parts.append("\t".join(cell.text.strip() for cell in row.cells))
    return "\n".join(parts)


def _pptx_text(content: bytes) -> str:
    prs = Presentation(io.BytesIO(content))
    parts: list[str] = []
    for slide in prs.slides:
        for shape in slide.shapes:
            if shape.has_text_frame and shape.text_frame.text.strip():
                parts.append(shape.text_frame.text)
            elif shape.has_table:
                for row in shape.table.rows:
                    parts.append("\t".join(cell.text.strip() for cell in row.cells))
    return "\n".join(parts)


def _xlsx_text(content: bytes) -> str:
    wb = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    parts: list[str] = []
    try:
        for ws in wb.worksheets:
            for row in ws.iter_rows(values_only=True):
                cells = ["" if v is None else str(v) for v in row]
                if any(cells):
                    parts.append("\t".join(cells).rstrip("\t"))
    finally:
        wb.close()
    return "\n".join(parts)


EXTRACTORS = {
    PDF_MIME: _pdf_text,
    DOCX_MIME: _docx_text,
    PPTX_MIME: _pptx_text,
    XLSX_MIME: _xlsx_text,
}


def extract_text(content: bytes, mime_type: str) -> str:
    """
    Extract the readable text of a document.

    Raises:
        UnsupportedMimeType: No extractor for `mime_type`.
        MalformedDocument: The document could not be parsed.
    """
    extractor = EXTRACTORS.get(mime_type)
    if extractor is None:
        raise UnsupportedMimeType(mime_type)

    try:
        return extractor(content)
    except Exception as e:
        raise MalformedDocument(f"Could not extract text from {mime_type}: {e}") from e
