"""
Google Cloud Vision OCR provider.
"""

from __future__ import annotations

from google.cloud import vision

from doc_translator.errors import OcrServiceFailure
from doc_translator.providers.base import OCRProvider
from doc_translator.providers.retry import call_with_retries


class GoogleVisionOCR(OCRProvider):
    """
    OCR using the Cloud Vision image annotator.

    `DOCUMENT_TEXT_DETECTION` suits dense text such as scanned pages;
    `TEXT_DETECTION` is the lighter mode used as a fallback.
    """

    def __init__(
        self,
        max_retries: int = 3,
        client: vision.ImageAnnotatorAsyncClient | None = None,
    ):
        self._max_retries = max_retries
        self._client = client

    @property
    def name(self) -> str:
        return "google-vision"

    @property
    def client(self) -> vision.ImageAnnotatorAsyncClient:
        if self._client is None:
            self._client = vision.ImageAnnotatorAsyncClient()
        return self._client

    async def detect_document_text(self, image: bytes) -> str:
        response = await self._annotate(image, vision.Feature.Type.DOCUMENT_TEXT_DETECTION)
        if response.full_text_annotation:
            return response.full_text_annotation.text or ""
        return ""

    async def detect_text(self, image: bytes) -> str:
        response = await self._annotate(image, vision.Feature.Type.TEXT_DETECTION)
        if response.text_annotations:
            return response.text_annotations[0].description or ""
        return ""

    async def _annotate(
        self, image: bytes, feature: vision.Feature.Type
    ) -> vision.AnnotateImageResponse:
        """Annotate one image with one feature, retrying transient errors."""
        request = vision.AnnotateImageRequest(
            image=vision.Image(content=image),
            features=[vision.Feature(type_=feature)],
        )
        batch = await call_with_retries(
            lambda: self.client.batch_annotate_images(requests=[request]),
            operation=f"Vision {feature.name}",
            max_retries=self._max_retries,
            failure=OcrServiceFailure,
        )

        if not batch.responses:
            raise OcrServiceFailure("Unexpected response: Vision returned no annotations.")

        response = batch.responses[0]
        if response.error and response.error.message:
            raise OcrServiceFailure(f"Vision {feature.name} failed: {response.error.message}")
        return response
