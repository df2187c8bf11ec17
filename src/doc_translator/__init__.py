"""
doc-translator: batch document and image translation on Google Cloud.

This package provides tools for:
- Layout-preserving translation of PDF, DOCX, PPTX and XLSX documents
- Transparent splitting of PDFs that exceed the per-request page ceiling
- OCR-based translation of images
- Batches returned as a single file, a zip archive or one combined text file
"""

__version__ = "0.1.0"

from doc_translator.config import Settings, load_config
from doc_translator.errors import (
    InvalidArgument,
    MalformedDocument,
    NoTextDetected,
    OcrServiceFailure,
    StorageFailure,
    TranslationServiceFailure,
    TranslatorError,
    UnsupportedMimeType,
)
from doc_translator.models import (
    BatchItem,
    BatchOutcome,
    BatchRequest,
    BatchResponse,
    Document,
    DocumentTuning,
    TranslationResult,
)
from doc_translator.orchestrator import BatchTranslator, OutputMode
from doc_translator.runner import BoundedBatchRunner
from doc_translator.translation import DocumentTranslator, ImageTranslator, PdfToDocxConverter

__all__ = [
    # Config
    "Settings",
    "load_config",
    # Errors
    "TranslatorError",
    "InvalidArgument",
    "UnsupportedMimeType",
    "MalformedDocument",
    "NoTextDetected",
    "TranslationServiceFailure",
    "OcrServiceFailure",
    "StorageFailure",
    # Models
    "Document",
    "DocumentTuning",
    "TranslationResult",
    "BatchItem",
    "BatchOutcome",
    "BatchRequest",
    "BatchResponse",
    # Translation
    "DocumentTranslator",
    "ImageTranslator",
    "PdfToDocxConverter",
    "BoundedBatchRunner",
    "BatchTranslator",
    "OutputMode",
]
