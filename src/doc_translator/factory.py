"""
Wiring of the Google Cloud backends into a ready BatchTranslator.
"""

from __future__ import annotations

from doc_translator.config import Settings, resolve_project_id
from doc_translator.orchestrator import BatchTranslator


def create_batch_translator(settings: Settings) -> BatchTranslator:
    """
    Build a BatchTranslator backed by Translation v3, Vision and (optionally) GCS.

    Args:
        settings: Loaded settings.

    Returns:
        BatchTranslator configured from `settings`.

    Raises:
        InvalidArgument: If no Google Cloud project can be resolved.
    """
    from doc_translator.providers.gcs import GCSStorage
    from doc_translator.providers.google_translate import GoogleTranslationProvider
    from doc_translator.providers.google_vision import GoogleVisionOCR

    project_id = resolve_project_id(settings)

    translation = GoogleTranslationProvider(
        project_id=project_id,
        location=settings.google.location,
        max_retries=settings.google.max_retries,
    )
    ocr = GoogleVisionOCR(max_retries=settings.google.max_retries)
    storage = (
        GCSStorage(settings.google.translation_bucket)
        if settings.google.translation_bucket
        else None
    )

    return BatchTranslator(
        translation=translation,
        ocr=ocr,
        options=settings.translator_options(),
        storage=storage,
    )
