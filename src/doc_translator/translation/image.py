"""
Image translation: OCR followed by plain-text translation.
"""

from __future__ import annotations

from dataclasses import dataclass

from doc_translator.errors import (
    InvalidArgument,
    NoTextDetected,
    OcrServiceFailure,
    TranslationServiceFailure,
)
from doc_translator.providers.base import OCRProvider, TranslationProvider


@dataclass
class ImageTranslation:
    """Result of translating the text found in an image."""

    ocr_text: str
    translated_text: str
    detected_language_code: str = ""


class ImageTranslator:
    """Reads text from images and translates it."""

    def __init__(self, ocr: OCRProvider, provider: TranslationProvider):
        self._ocr = ocr
        self._provider = provider

    async def translate(
        self,
        image: bytes,
        *,
        target_language: str,
        source_language: str | None = None,
    ) -> ImageTranslation:
        """
        OCR an image and translate the text found.

        Raises:
            InvalidArgument: Missing target language or empty image.
            NoTextDetected: Neither detection mode found any text.
            OcrServiceFailure: The OCR backend failed.
            TranslationServiceFailure: The text translation failed.
        """
        if not target_language:
            raise InvalidArgument("Missing target language.")
        if not image:
            raise InvalidArgument("Image content is empty.")

        try:
            ocr_text = await self._ocr.extract_text(image)
        except OcrServiceFailure:
            raise
        except Exception as e:
            raise OcrServiceFailure(f"OCR failed: {e}") from e

        if not ocr_text.strip():
            raise NoTextDetected()

        try:
            translation = await self._provider.translate_text(
                ocr_text,
                target_language=target_language,
                source_language=source_language,
            )
        except TranslationServiceFailure:
            raise
        except Exception as e:
            raise TranslationServiceFailure(f"Text translation failed: {e}") from e

        return ImageTranslation(
            ocr_text=ocr_text,
            translated_text=translation.text,
            detected_language_code=translation.detected_language_code,
        )
