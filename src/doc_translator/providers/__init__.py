"""
External capability layer.

Backends:
- Google Cloud Translation v3 for document and text translation
- Google Cloud Vision for OCR
- Google Cloud Storage for staging batch conversion jobs
"""

from doc_translator.providers.base import (
    BatchJobResult,
    DocumentTranslation,
    ObjectStorage,
    OCRProvider,
    TextTranslation,
    TranslationProvider,
)

__all__ = [
    "TranslationProvider",
    "OCRProvider",
    "ObjectStorage",
    "DocumentTranslation",
    "TextTranslation",
    "BatchJobResult",
]
