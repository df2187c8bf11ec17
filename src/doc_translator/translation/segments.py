"""
Page-range splitting and merging of PDF documents.

The translation service caps the number of pages per synchronous call, so
oversized PDFs are cut into fixed-size windows and stitched back together
after translation.
"""

from __future__ import annotations

from dataclasses import dataclass

import fitz  # PyMuPDF

from doc_translator.errors import InvalidArgument, MalformedDocument
from doc_translator.models import PDF_MIME, Document, Segment


@dataclass
class SplitResult:
    """Segments of a PDF, ordered by their first page."""

    total_pages: int
    segments: list[Segment]


def _open_pdf(content: bytes) -> fitz.Document:
    """Open PDF bytes, mapping every parse failure to MalformedDocument."""
    if not content:
        raise MalformedDocument("Cannot read pages of an empty PDF.")
    try:
        doc = fitz.open(stream=content, filetype="pdf")
    except (RuntimeError, ValueError) as e:
        raise MalformedDocument(f"Could not parse PDF: {e}") from e

    if doc.page_count < 1:
        doc.close()
        raise MalformedDocument("PDF has no pages.")
    return doc


def count_pages(document: Document) -> int:
    """Page count of a PDF document."""
    with _open_pdf(document.content) as doc:
        return doc.page_count


def split(document: Document, max_pages_per_segment: float) -> SplitResult:
    """
    Partition a PDF into consecutive windows of at most `max_pages_per_segment` pages.

    Args:
        document: PDF document to split.
        max_pages_per_segment: Window size; floored and clamped to at least 1.

    Returns:
        SplitResult with the total page count and standalone segment documents.

    Raises:
        MalformedDocument: If the PDF cannot be parsed.
    """
    size = max(1, int(max_pages_per_segment))
    segments: list[Segment] = []

    with _open_pdf(document.content) as src:
        total_pages = src.page_count
        for start in range(0, total_pages, size):
            end = min(total_pages, start + size)
            with fitz.open() as out:
                out.insert_pdf(src, from_page=start, to_page=end - 1)
                content = out.tobytes(garbage=3, deflate=True)
            segments.append(Segment(Document(content, PDF_MIME), start=start, end=end))

    return SplitResult(total_pages=total_pages, segments=segments)


def merge(documents: list[Document]) -> Document:
    """
    Concatenate the pages of several PDFs in list order.

    Raises:
        InvalidArgument: If `documents` is empty.
        MalformedDocument: If any input cannot be parsed.
    """
    if not documents:
        raise InvalidArgument("merge needs at least one document.")

    with fitz.open() as out:
        for index, document in enumerate(documents):
            try:
                src = _open_pdf(document.content)
            except MalformedDocument as e:
                raise MalformedDocument(f"Segment {index} is not a valid PDF: {e}") from e
            with src:
                out.insert_pdf(src)
        return Document(out.tobytes(garbage=3, deflate=True), PDF_MIME)
