"""
Error taxonomy for doc-translator.

Every error carries an HTTP-style status code so a transport layer can map
failures to responses without inspecting messages.
"""

from __future__ import annotations


class TranslatorError(Exception):
    """Base class for all doc-translator errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgument(TranslatorError):
    """Caller error detected before any external call is made."""

    status_code = 400


class UnsupportedMimeType(TranslatorError):
    """Effective MIME type is not one the translation service accepts."""

    status_code = 415

    def __init__(self, mime_type: str | None):
        self.mime_type = mime_type or ""
        super().__init__(
            f"Unsupported MIME type for document translation: {mime_type or 'unknown'}. "
            "Supported: application/pdf, DOCX, PPTX, XLSX."
        )


class MalformedDocument(TranslatorError):
    """A paginated document could not be parsed into pages."""

    status_code = 422


class NoTextDetected(TranslatorError):
    """OCR found no text in an image."""

    status_code = 422

    def __init__(self, message: str = "OCR did not detect any text in the image."):
        super().__init__(message)


class TranslationServiceFailure(TranslatorError):
    """The translation service errored or returned an unexpected payload."""

    status_code = 502


class OcrServiceFailure(TranslatorError):
    """The OCR service errored or returned an unexpected payload."""

    status_code = 502


class StorageFailure(TranslatorError):
    """Staging content in object storage failed."""

    status_code = 502
