"""
Data model for doc-translator.

Documents, batch items and per-item outcomes, plus the MIME and filename
helpers every aggregation mode shares.
"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePath

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PPTX_MIME = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
TEXT_MIME = "text/plain; charset=utf-8"
ZIP_MIME = "application/zip"

# Placeholder browsers and multipart parsers use when they don't know the type
GENERIC_MIME = "application/octet-stream"

SUPPORTED_MIME_TYPES = frozenset({PDF_MIME, DOCX_MIME, PPTX_MIME, XLSX_MIME})

FALLBACK_BASE_NAME = "file"

# Office types are missing from some platform mime.types databases
for _mime, _ext in (
    (DOCX_MIME, ".docx"),
    (PPTX_MIME, ".pptx"),
    (XLSX_MIME, ".xlsx"),
    ("image/webp", ".webp"),
):
    mimetypes.add_type(_mime, _ext)


class ItemKind(str, Enum):
    """How a batch item is routed."""

    IMAGE = "image"
    DOCUMENT = "document"


@dataclass(frozen=True)
class DocumentTuning:
    """PDF-only request flags; `None` leaves the service default in place."""

    translate_native_pdf_only: bool | None = None
    enable_shadow_removal_native_pdf: bool | None = None
    enable_rotation_correction: bool | None = None


@dataclass(frozen=True)
class Document:
    """Immutable document content tagged with its MIME type."""

    content: bytes
    mime_type: str

    @property
    def is_paginated(self) -> bool:
        """Only PDFs have a page structure that can be split."""
        return self.mime_type == PDF_MIME

    @property
    def page_count(self) -> int:
        """Number of pages (PDF only)."""
        from doc_translator.translation.segments import count_pages

        return count_pages(self)


@dataclass(frozen=True)
class Segment:
    """A page range [start, end) of a parent document, as a standalone document."""

    document: Document
    start: int
    end: int

    @property
    def page_count(self) -> int:
        return self.end - self.start


@dataclass
class TranslationResult:
    """Uniform result of translating one document, split or not."""

    content: bytes
    mime_type: str
    detected_language_code: str = ""


@dataclass
class BatchItem:
    """One caller-submitted file."""

    original_name: str
    content: bytes
    declared_mime: str | None = None

    @property
    def inferred_mime(self) -> str:
        return infer_mime_type(self.original_name)

    @property
    def effective_mime(self) -> str:
        """Declared MIME unless absent or generic, else the name-based guess."""
        if self.declared_mime and self.declared_mime != GENERIC_MIME:
            return self.declared_mime
        return self.inferred_mime

    @property
    def kind(self) -> ItemKind:
        return ItemKind.IMAGE if is_image_mime(self.effective_mime) else ItemKind.DOCUMENT


@dataclass
class BatchOutcome:
    """Positional per-item result: either content or an error message."""

    item_name: str
    filename: str
    content: bytes | None = None
    media_type: str = ""
    detected_language_code: str = ""
    error: str | None = None
    error_type: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_filename(self) -> str:
        return f"{base_name(self.item_name)}_error.txt"

    @classmethod
    def failure(cls, item: BatchItem, filename: str, exc: Exception) -> BatchOutcome:
        message = getattr(exc, "message", None) or str(exc) or type(exc).__name__
        return cls(
            item_name=item.original_name,
            filename=filename,
            error=message,
            error_type=type(exc).__name__,
        )


@dataclass
class BatchRequest:
    """Everything the orchestrator needs to run one batch."""

    items: list[BatchItem]
    target_language: str
    source_language: str | None = None
    combine_images: bool = False
    combine_all_to_txt: bool = False
    between_blocks_lines: int = 0
    tuning: DocumentTuning = field(default_factory=DocumentTuning)
    convert_pdf_to_docx: bool = False


@dataclass
class BatchResponse:
    """Aggregated response for a batch."""

    content: bytes
    media_type: str
    filename: str
    detected_language_code: str = ""
    outcomes: list[BatchOutcome] = field(default_factory=list)


def infer_mime_type(filename: str | None) -> str:
    """Guess a MIME type from a filename, or return an empty string."""
    if not filename:
        return ""
    guessed, _ = mimetypes.guess_type(filename, strict=False)
    return guessed or ""


def is_image_mime(mime_type: str | None) -> bool:
    return bool(mime_type) and mime_type.startswith("image/")


def base_name(filename: str | None) -> str:
    """Filename without directory or extension, with a fixed fallback."""
    if not filename:
        return FALLBACK_BASE_NAME
    return PurePath(filename).stem or FALLBACK_BASE_NAME


def extension_for_mime(mime_type: str) -> str:
    ext = mimetypes.guess_extension(mime_type.split(";")[0].strip(), strict=False)
    return ext or ""


def translated_document_filename(
    original_name: str | None,
    target_language: str,
    output_mime: str | None = None,
    input_mime: str | None = None,
) -> str:
    """
    `<base>_<target>_translations<ext>`.

    The original extension is kept unless the service converted the document
    to another format, in which case the output format's extension is used.
    """
    ext = PurePath(original_name).suffix if original_name else ""
    if output_mime and input_mime and output_mime != input_mime:
        ext = extension_for_mime(output_mime) or ext
    return f"{base_name(original_name)}_{target_language}_translations{ext}"


def translated_text_filename(original_name: str | None, target_language: str) -> str:
    return f"{base_name(original_name)}_{target_language}_translations.txt"
