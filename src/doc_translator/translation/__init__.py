"""
Translation layer for doc-translator.

Provides:
- Page-ceiling aware document translation (split, translate, merge)
- PDF to DOCX conversion through storage-backed batch jobs
- OCR-based image translation
"""

from doc_translator.translation.conversion import PdfToDocxConverter
from doc_translator.translation.document import DocumentTranslator
from doc_translator.translation.image import ImageTranslation, ImageTranslator

__all__ = ["DocumentTranslator", "PdfToDocxConverter", "ImageTranslator", "ImageTranslation"]
