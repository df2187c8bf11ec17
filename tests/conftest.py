"""
Shared fixtures: in-memory translation, OCR and storage backends plus
small document builders.
"""

from __future__ import annotations

import asyncio
import io

import fitz  # PyMuPDF
import pytest
from docx import Document as DocxDocument

from doc_translator.errors import OcrServiceFailure, StorageFailure, TranslationServiceFailure
from doc_translator.models import DocumentTuning
from doc_translator.providers.base import (
    BatchJobResult,
    DocumentTranslation,
    ObjectStorage,
    OCRProvider,
    TextTranslation,
    TranslationProvider,
)


def make_pdf(pages: int, label: str = "Page") -> bytes:
    """PDF with one line of text per page: `<label> 1`, `<label> 2`, ..."""
    with fitz.open() as doc:
        for i in range(1, pages + 1):
            page = doc.new_page()
            page.insert_text((72, 72), f"{label} {i}")
        return doc.tobytes()


def pdf_page_texts(content: bytes) -> list[str]:
    with fitz.open(stream=content, filetype="pdf") as doc:
        return [page.get_text().strip() for page in doc]


def make_docx(*paragraphs: str) -> bytes:
    doc = DocxDocument()
    for text in paragraphs:
        doc.add_paragraph(text)
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


class FakeTranslationProvider(TranslationProvider):
    """
    Echoes documents back unchanged and upper-cases text.

    `detected_languages` is consumed one entry per document call; `fail_on_call`
    makes the n-th document call (0-based) raise.
    """

    def __init__(
        self,
        detected_languages: list[str] | None = None,
        fail_on_call: int | None = None,
        delay: float = 0.0,
        batch_outputs: dict[str, bytes] | None = None,
        storage: MemoryStorage | None = None,
    ):
        self.detected_languages = list(detected_languages or [])
        self.fail_on_call = fail_on_call
        self.delay = delay
        self.document_calls: list[dict] = []
        self.text_calls: list[dict] = []
        self.batch_calls: list[dict] = []
        self.batch_outputs = batch_outputs or {}
        self.storage = storage
        self.in_flight = 0
        self.peak_in_flight = 0

    @property
    def name(self) -> str:
        return "fake"

    async def translate_document(
        self,
        content: bytes,
        mime_type: str,
        *,
        target_language: str,
        source_language: str | None = None,
        tuning: DocumentTuning | None = None,
    ) -> DocumentTranslation:
        index = len(self.document_calls)
        self.document_calls.append(
            {
                "content": content,
                "mime_type": mime_type,
                "target_language": target_language,
                "source_language": source_language,
                "tuning": tuning,
            }
        )
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1

        if self.fail_on_call is not None and index == self.fail_on_call:
            raise TranslationServiceFailure(f"document call {index} failed")

        detected = self.detected_languages[index] if index < len(self.detected_languages) else ""
        return DocumentTranslation(
            content=content, mime_type=mime_type, detected_language_code=detected
        )

    async def translate_text(
        self,
        text: str,
        *,
        target_language: str,
        source_language: str | None = None,
    ) -> TextTranslation:
        self.text_calls.append(
            {"text": text, "target_language": target_language, "source_language": source_language}
        )
        return TextTranslation(text=text.upper(), detected_language_code=source_language or "en")

    async def batch_translate_document(
        self,
        input_uri: str,
        output_uri_prefix: str,
        *,
        target_language: str,
        source_language: str | None = None,
        mime_type: str | None = None,
        format_conversions: dict[str, str] | None = None,
    ) -> BatchJobResult:
        self.batch_calls.append(
            {
                "input_uri": input_uri,
                "output_uri_prefix": output_uri_prefix,
                "target_language": target_language,
                "mime_type": mime_type,
                "format_conversions": format_conversions,
            }
        )
        if self.storage is not None:
            prefix = self.storage.key_for(output_uri_prefix)
            for name, content in self.batch_outputs.items():
                self.storage.objects[prefix + name] = content
        return BatchJobResult(total_pages=1, translated_pages=1)


class FakeOCRProvider(OCRProvider):
    """Returns canned text for the two detection modes."""

    def __init__(self, document_text: str = "", simple_text: str = "", error: bool = False):
        self.document_text = document_text
        self.simple_text = simple_text
        self.error = error
        self.calls: list[str] = []

    @property
    def name(self) -> str:
        return "fake-ocr"

    async def detect_document_text(self, image: bytes) -> str:
        self.calls.append("document")
        if self.error:
            raise OcrServiceFailure("vision unavailable")
        return self.document_text

    async def detect_text(self, image: bytes) -> str:
        self.calls.append("text")
        return self.simple_text


class MemoryStorage(ObjectStorage):
    """Dict-backed object storage; `fail_deletes` makes every delete raise."""

    def __init__(self, fail_deletes: bool = False):
        self.objects: dict[str, bytes] = {}
        self.fail_deletes = fail_deletes
        self.writes: list[str] = []

    def uri(self, key: str) -> str:
        return f"mem://bucket/{key}"

    def key_for(self, uri: str) -> str:
        return uri.removeprefix("mem://bucket/")

    async def write(self, key: str, content: bytes, content_type: str) -> None:
        self.writes.append(key)
        self.objects[key] = content

    async def list_keys(self, prefix: str) -> list[str]:
        return sorted(k for k in self.objects if k.startswith(prefix))

    async def read(self, key: str) -> bytes:
        return self.objects[key]

    async def delete(self, key: str) -> None:
        if self.fail_deletes:
            raise StorageFailure(f"cannot delete {key}")
        self.objects.pop(key, None)


@pytest.fixture
def provider() -> FakeTranslationProvider:
    return FakeTranslationProvider()


@pytest.fixture
def ocr() -> FakeOCRProvider:
    return FakeOCRProvider(document_text="hello world")


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()
