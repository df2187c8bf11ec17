"""
Google Cloud Translation (v3 Advanced) provider.

Wraps the async Translation client: synchronous document translation, plain
text translation and the storage-backed batch document job.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from google.api_core import exceptions as gexc
from google.cloud import translate_v3

from doc_translator.errors import TranslationServiceFailure
from doc_translator.models import DocumentTuning
from doc_translator.providers.base import (
    BatchJobResult,
    DocumentTranslation,
    TextTranslation,
    TranslationProvider,
)
from doc_translator.providers.retry import call_with_retries

T = TypeVar("T")


class GoogleTranslationProvider(TranslationProvider):
    """
    Translation through Google Cloud Translation API v3.

    All calls are billed to `projects/<project_id>/locations/<location>`.
    """

    def __init__(
        self,
        project_id: str,
        location: str = "global",
        max_retries: int = 3,
        client: translate_v3.TranslationServiceAsyncClient | None = None,
    ):
        """
        Initialize the provider.

        Args:
            project_id: Google Cloud project id.
            location: Translation location ("global" or a region).
            max_retries: Attempts per call for transient errors.
            client: Pre-built async client; created on first use otherwise.
        """
        self._parent = f"projects/{project_id}/locations/{location}"
        self._max_retries = max_retries
        self._client = client

    @property
    def name(self) -> str:
        return "google-translate"

    @property
    def client(self) -> translate_v3.TranslationServiceAsyncClient:
        # The async client binds to the running loop, so build it lazily
        if self._client is None:
            self._client = translate_v3.TranslationServiceAsyncClient()
        return self._client

    async def translate_document(
        self,
        content: bytes,
        mime_type: str,
        *,
        target_language: str,
        source_language: str | None = None,
        tuning: DocumentTuning | None = None,
    ) -> DocumentTranslation:
        request: dict[str, Any] = {
            "parent": self._parent,
            "target_language_code": target_language,
            "document_input_config": {"content": content, "mime_type": mime_type},
        }
        if source_language:
            request["source_language_code"] = source_language
        if tuning is not None:
            if tuning.translate_native_pdf_only is not None:
                request["is_translate_native_pdf_only"] = tuning.translate_native_pdf_only
            if tuning.enable_shadow_removal_native_pdf is not None:
                request["enable_shadow_removal_native_pdf"] = (
                    tuning.enable_shadow_removal_native_pdf
                )
            if tuning.enable_rotation_correction is not None:
                request["enable_rotation_correction"] = tuning.enable_rotation_correction

        response = await self._call(
            lambda: self.client.translate_document(request=request), "translate_document"
        )

        translation = response.document_translation
        if not translation or not translation.byte_stream_outputs:
            raise TranslationServiceFailure(
                "Unexpected response: document translation has no byte stream outputs."
            )

        return DocumentTranslation(
            content=bytes(translation.byte_stream_outputs[0]),
            mime_type=translation.mime_type or mime_type,
            detected_language_code=translation.detected_language_code or "",
        )

    async def translate_text(
        self,
        text: str,
        *,
        target_language: str,
        source_language: str | None = None,
    ) -> TextTranslation:
        request: dict[str, Any] = {
            "parent": self._parent,
            "contents": [text],
            "mime_type": "text/plain",
            "target_language_code": target_language,
        }
        if source_language:
            request["source_language_code"] = source_language

        response = await self._call(
            lambda: self.client.translate_text(request=request), "translate_text"
        )

        if not response.translations:
            raise TranslationServiceFailure("Unexpected response: no translations.")

        translation = response.translations[0]
        return TextTranslation(
            text=translation.translated_text or "",
            detected_language_code=translation.detected_language_code or "",
        )

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
        input_config: dict[str, Any] = {"gcs_source": {"input_uri": input_uri}}
        if mime_type:
            input_config["mime_type"] = mime_type

        request: dict[str, Any] = {
            "parent": self._parent,
            "target_language_codes": [target_language],
            "input_configs": [input_config],
            "output_config": {"gcs_destination": {"output_uri_prefix": output_uri_prefix}},
        }
        if source_language:
            request["source_language_code"] = source_language
        if format_conversions:
            request["format_conversions"] = format_conversions

        operation = await self._call(
            lambda: self.client.batch_translate_document(request=request),
            "batch_translate_document",
        )

        try:
            response = await operation.result()
        except gexc.GoogleAPICallError as e:
            raise TranslationServiceFailure(f"Batch document translation failed: {e}") from e

        return BatchJobResult(
            total_pages=int(response.total_pages),
            translated_pages=int(response.translated_pages),
            failed_pages=int(response.failed_pages),
        )

    async def _call(self, factory: Callable[[], Awaitable[T]], operation: str) -> T:
        return await call_with_retries(
            factory,
            operation=operation,
            max_retries=self._max_retries,
            failure=TranslationServiceFailure,
        )
