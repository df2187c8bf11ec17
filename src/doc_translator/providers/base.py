"""
Base classes for the external capabilities doc-translator calls.

Defines the abstract interfaces the translation, OCR and object storage
backends must implement, so the orchestrator can be driven by any of them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from doc_translator.models import DocumentTuning


@dataclass
class DocumentTranslation:
    """Response of a synchronous document translation call."""

    content: bytes
    mime_type: str
    detected_language_code: str = ""


@dataclass
class TextTranslation:
    """Response of a plain-text translation call."""

    text: str
    detected_language_code: str = ""


@dataclass
class BatchJobResult:
    """Summary of a finished asynchronous batch translation job."""

    total_pages: int = 0
    translated_pages: int = 0
    failed_pages: int = 0
    metadata: dict[str, str] = field(default_factory=dict)


class TranslationProvider(ABC):
    """
    Abstract base class for translation backends.

    Implementations raise TranslationServiceFailure when the service errors
    or answers with an empty payload.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for logging and identification."""
        ...

    @abstractmethod
    async def translate_document(
        self,
        content: bytes,
        mime_type: str,
        *,
        target_language: str,
        source_language: str | None = None,
        tuning: DocumentTuning | None = None,
    ) -> DocumentTranslation:
        """
        Translate a whole document in one synchronous call.

        Args:
            content: Document bytes.
            mime_type: One of the supported document MIME types.
            target_language: Target language code (e.g. "pt-BR").
            source_language: Source language code; detected when omitted.
            tuning: PDF-only flags.

        Returns:
            DocumentTranslation with the translated bytes.
        """
        ...

    @abstractmethod
    async def translate_text(
        self,
        text: str,
        *,
        target_language: str,
        source_language: str | None = None,
    ) -> TextTranslation:
        """Translate plain text."""
        ...

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
        """
        Run an asynchronous batch job reading from and writing to object storage.

        `mime_type` names the input format. Returns once the job has
        completed. Backends without batch support keep this default.
        """
        raise NotImplementedError(f"{self.name} does not support batch document translation")


class OCRProvider(ABC):
    """
    Abstract base class for OCR backends.

    Implementations raise OcrServiceFailure when the service errors.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        ...

    @abstractmethod
    async def detect_document_text(self, image: bytes) -> str:
        """Dense full-document text detection; empty string when nothing is found."""
        ...

    @abstractmethod
    async def detect_text(self, image: bytes) -> str:
        """Simple text detection, returning the top annotation's text."""
        ...

    async def extract_text(self, image: bytes) -> str:
        """
        Full-document detection with a fallback to simple detection.

        Returns:
            The detected text, or an empty string if neither mode found any.
        """
        text = await self.detect_document_text(image)
        if text and text.strip():
            return text

        fallback = await self.detect_text(image)
        return fallback or ""


class ObjectStorage(ABC):
    """Minimal object store used to stage batch translation jobs."""

    @abstractmethod
    def uri(self, key: str) -> str:
        """Location of a key as understood by the translation service."""
        ...

    @abstractmethod
    async def write(self, key: str, content: bytes, content_type: str) -> None: ...

    @abstractmethod
    async def list_keys(self, prefix: str) -> list[str]:
        """Keys starting with `prefix`."""
        ...

    @abstractmethod
    async def read(self, key: str) -> bytes: ...

    @abstractmethod
    async def delete(self, key: str) -> None: ...
