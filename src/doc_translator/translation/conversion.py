"""
PDF to DOCX conversion through batch document translation.

The synchronous translate call always answers in the input format, so
producing an editable document goes through the asynchronous batch job:
the PDF is staged in object storage, translated with a format conversion
and the produced DOCX is read back. Staged objects are always removed.
"""

from __future__ import annotations

import logging
import uuid

from doc_translator.errors import InvalidArgument, TranslationServiceFailure, UnsupportedMimeType
from doc_translator.models import DOCX_MIME, PDF_MIME, Document, TranslationResult
from doc_translator.providers.base import ObjectStorage, TranslationProvider

logger = logging.getLogger(__name__)

STAGING_ROOT = "doctranslator"


class PdfToDocxConverter:
    """Translates a PDF into a DOCX using a storage-backed batch job."""

    def __init__(self, provider: TranslationProvider, storage: ObjectStorage | None):
        self._provider = provider
        self._storage = storage

    async def convert(
        self,
        document: Document,
        *,
        target_language: str,
        source_language: str | None = None,
    ) -> TranslationResult:
        """
        Translate `document` and convert it to DOCX.

        Raises:
            InvalidArgument: No storage configured, missing target or empty content.
            UnsupportedMimeType: Input is not a PDF.
            StorageFailure: Staging the input or reading the output failed.
            TranslationServiceFailure: The job failed or produced no DOCX.
        """
        if self._storage is None:
            raise InvalidArgument(
                "PDF to DOCX conversion needs a translation bucket "
                "(set GCS_TRANSLATION_BUCKET, e.g. my-bucket or gs://my-bucket)."
            )
        if not target_language:
            raise InvalidArgument("Missing target language.")
        if not document.content:
            raise InvalidArgument("Document content is empty.")
        if document.mime_type != PDF_MIME:
            raise UnsupportedMimeType(document.mime_type)

        storage = self._storage
        job_id = uuid.uuid4().hex
        input_key = f"{STAGING_ROOT}/input/{job_id}/input.pdf"
        output_prefix = f"{STAGING_ROOT}/output/{job_id}/"

        try:
            await storage.write(input_key, document.content, PDF_MIME)

            result = await self._provider.batch_translate_document(
                storage.uri(input_key),
                storage.uri(output_prefix),
                target_language=target_language,
                source_language=source_language,
                mime_type=PDF_MIME,
                format_conversions={PDF_MIME: DOCX_MIME},
            )
            logger.debug(
                "Batch job %s finished: %d/%d pages translated",
                job_id,
                result.translated_pages,
                result.total_pages,
            )

            outputs = await storage.list_keys(output_prefix)
            docx_key = next((k for k in outputs if k.lower().endswith(".docx")), None)
            if docx_key is None:
                raise TranslationServiceFailure(
                    "Batch translation finished but produced no .docx output. This happens "
                    "when the PDF is scanned rather than native or the conversion was rejected."
                )

            content = await storage.read(docx_key)
            return TranslationResult(content=content, mime_type=DOCX_MIME)
        finally:
            await self._cleanup(storage, input_key, output_prefix)

    async def _cleanup(self, storage: ObjectStorage, input_key: str, output_prefix: str) -> None:
        """Best-effort removal of staged input and produced outputs."""
        try:
            await storage.delete(input_key)
        except Exception as e:
            logger.debug("Could not delete staged input %s: %s", input_key, e)

        try:
            keys = await storage.list_keys(output_prefix)
        except Exception as e:
            logger.debug("Could not list outputs under %s: %s", output_prefix, e)
            return

        for key in keys:
            try:
                await storage.delete(key)
            except Exception as e:
                logger.debug("Could not delete output %s: %s", key, e)

