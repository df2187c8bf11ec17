"""
Batch translation orchestrator.

Routes every item of a batch to document or image translation, runs the
items through a bounded worker pool and renders the outcomes as a single
file, a zip archive or one combined text document.
"""

from __future__ import annotations

import logging
from enum import Enum

from doc_translator.config import TranslatorOptions
from doc_translator.errors import InvalidArgument, TranslatorError, UnsupportedMimeType
from doc_translator.export.archive import ARCHIVE_NAME, build_archive
from doc_translator.export.combined import TextBlock, combine_text, combined_filename
from doc_translator.export.text import extract_text
from doc_translator.models import (
    PDF_MIME,
    TEXT_MIME,
    ZIP_MIME,
    BatchItem,
    BatchOutcome,
    BatchRequest,
    BatchResponse,
    Document,
    ItemKind,
    TranslationResult,
    translated_document_filename,
    translated_text_filename,
)
from doc_translator.providers.base import ObjectStorage, OCRProvider, TranslationProvider
from doc_translator.runner import BoundedBatchRunner
from doc_translator.translation.conversion import PdfToDocxConverter
from doc_translator.translation.document import DocumentTranslator
from doc_translator.translation.image import ImageTranslator

logger = logging.getLogger(__name__)


class OutputMode(str, Enum):
    """How a batch's results are returned."""

    PASSTHROUGH = "passthrough"
    ARCHIVE = "archive"
    COMBINED_TEXT = "combined-text"


def select_mode(request: BatchRequest) -> OutputMode:
    """Pick the output mode from the item count and the request's flags."""
    if len(request.items) == 1:
        return OutputMode.PASSTHROUGH
    if request.combine_all_to_txt:
        return OutputMode.COMBINED_TEXT
    if request.combine_images and all(item.kind is ItemKind.IMAGE for item in request.items):
        return OutputMode.COMBINED_TEXT
    return OutputMode.ARCHIVE


class BatchTranslator:
    """
    Translates batches of documents and images.

    Per-item failures become error outcomes in archive and combined modes so
    the rest of the batch continues; a single-item batch raises instead.
    """

    def __init__(
        self,
        translation: TranslationProvider,
        ocr: OCRProvider,
        options: TranslatorOptions | None = None,
        storage: ObjectStorage | None = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            translation: Document and text translation backend.
            ocr: OCR backend for image items.
            options: Limits and page ceiling; defaults when omitted.
            storage: Object storage for PDF to DOCX conversion, if configured.
        """
        self.options = options or TranslatorOptions()
        self._documents = DocumentTranslator(
            translation,
            max_pages_per_request=self.options.max_pages_per_request,
            segment_concurrency=self.options.segment_concurrency,
        )
        self._images = ImageTranslator(ocr, translation)
        self._converter = PdfToDocxConverter(translation, storage)

    async def translate_batch(self, request: BatchRequest) -> BatchResponse:
        """
        Translate every item of a batch and render the aggregated response.

        Raises:
            InvalidArgument: Missing target language, no items or too many items.
            TranslatorError: The single item of a one-item batch failed.
        """
        self._validate(request)
        mode = select_mode(request)
        logger.info(
            "Translating %d item(s) to %s (%s)",
            len(request.items),
            request.target_language,
            mode.value,
        )

        if mode is OutputMode.PASSTHROUGH:
            outcome = await self.translate_item(request.items[0], request)
            return BatchResponse(
                content=outcome.content or b"",
                media_type=outcome.media_type,
                filename=outcome.filename,
                detected_language_code=outcome.detected_language_code,
                outcomes=[outcome],
            )

        runner: BoundedBatchRunner[BatchItem, BatchOutcome] = BoundedBatchRunner(
            self.options.concurrency
        )

        if mode is OutputMode.ARCHIVE:

            async def archive_unit(item: BatchItem) -> BatchOutcome:
                return await self._capture(item, request, as_text=False)

            outcomes = await runner.run(request.items, archive_unit)
            self._log_failures(outcomes)
            return BatchResponse(
                content=build_archive(outcomes),
                media_type=ZIP_MIME,
                filename=ARCHIVE_NAME,
                outcomes=outcomes,
            )

        async def text_unit(item: BatchItem) -> BatchOutcome:
            return await self._capture(item, request, as_text=True)

        outcomes = await runner.run(request.items, text_unit)
        self._log_failures(outcomes)
        blocks = [
            TextBlock(
                name=outcome.item_name,
                text=(outcome.content or b"").decode("utf-8"),
                error=outcome.error,
            )
            for outcome in outcomes
        ]
        images_only = all(item.kind is ItemKind.IMAGE for item in request.items)
        return BatchResponse(
            content=combine_text(blocks, request.between_blocks_lines).encode("utf-8"),
            media_type=TEXT_MIME,
            filename=combined_filename(request.target_language, images_only),
            outcomes=outcomes,
        )

    async def translate_item(
        self, item: BatchItem, request: BatchRequest, as_text: bool = False
    ) -> BatchOutcome:
        """
        Translate one item.

        Images are OCR'd and their text translated. Documents are translated
        in their own format, or as plain text when `as_text` is set.

        Raises:
            TranslatorError: Any failure of this item.
        """
        target = request.target_language
        self._check_item(item)

        if item.kind is ItemKind.IMAGE:
            image = await self._images.translate(
                item.content,
                target_language=target,
                source_language=request.source_language,
            )
            return BatchOutcome(
                item_name=item.original_name,
                filename=translated_text_filename(item.original_name, target),
                content=image.translated_text.encode("utf-8"),
                media_type=TEXT_MIME,
                detected_language_code=image.detected_language_code,
            )

        mime_type = item.effective_mime
        if not mime_type:
            raise UnsupportedMimeType(None)

        result = await self._translate_document(Document(item.content, mime_type), request)

        if as_text:
            text = extract_text(result.content, result.mime_type)
            return BatchOutcome(
                item_name=item.original_name,
                filename=translated_text_filename(item.original_name, target),
                content=text.encode("utf-8"),
                media_type=TEXT_MIME,
                detected_language_code=result.detected_language_code,
            )

        return BatchOutcome(
            item_name=item.original_name,
            filename=translated_document_filename(
                item.original_name, target, result.mime_type, mime_type
            ),
            content=result.content,
            media_type=result.mime_type,
            detected_language_code=result.detected_language_code,
        )

    async def _translate_document(
        self, document: Document, request: BatchRequest
    ) -> TranslationResult:
        if request.convert_pdf_to_docx and document.mime_type == PDF_MIME:
            return await self._converter.convert(
                document,
                target_language=request.target_language,
                source_language=request.source_language,
            )
        return await self._documents.translate(
            document,
            target_language=request.target_language,
            source_language=request.source_language,
            tuning=request.tuning,
        )

    async def _capture(self, item: BatchItem, request: BatchRequest, as_text: bool) -> BatchOutcome:
        """Run one item, turning any failure into its error outcome."""
        try:
            return await self.translate_item(item, request, as_text=as_text)
        except TranslatorError as e:
            error = e
        except Exception as e:
            logger.exception("Unexpected error translating %s", item.original_name or "file")
            error = e

        if item.kind is ItemKind.IMAGE or as_text:
            filename = translated_text_filename(item.original_name, request.target_language)
        else:
            filename = translated_document_filename(item.original_name, request.target_language)
        return BatchOutcome.failure(item, filename, error)

    def _validate(self, request: BatchRequest) -> None:
        if not request.target_language:
            raise InvalidArgument("Missing required field: target language")
        if not request.items:
            raise InvalidArgument("No files to translate.")
        if len(request.items) > self.options.max_files:
            raise InvalidArgument(
                f"Too many files: {len(request.items)} (maximum {self.options.max_files})."
            )

    def _check_item(self, item: BatchItem) -> None:
        if not item.content:
            raise InvalidArgument(f"File {item.original_name or 'file'} is empty.")
        if len(item.content) > self.options.max_file_size_bytes:
            limit_mb = self.options.max_file_size_bytes / (1024 * 1024)
            raise InvalidArgument(
                f"File {item.original_name or 'file'} exceeds the {limit_mb:g} MB limit."
            )

    @staticmethod
    def _log_failures(outcomes: list[BatchOutcome]) -> None:
        for outcome in outcomes:
            if not outcome.ok:
                logger.warning(
                    "%s failed (%s): %s",
                    outcome.item_name or "file",
                    outcome.error_type,
                    outcome.error,
                )
