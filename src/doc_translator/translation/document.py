"""
Document translation with page-ceiling aware splitting.

PDFs longer than the synchronous call's page ceiling are split into
segments, translated segment by segment in page order and merged back.
"""

from __future__ import annotations

import logging

from doc_translator.errors import InvalidArgument, TranslationServiceFailure, UnsupportedMimeType
from doc_translator.models import (
    SUPPORTED_MIME_TYPES,
    Document,
    DocumentTuning,
    Segment,
    TranslationResult,
)
from doc_translator.providers.base import DocumentTranslation, TranslationProvider
from doc_translator.runner import BoundedBatchRunner
from doc_translator.translation import segments

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGES_PER_REQUEST = 20


def first_detected_language(codes: list[str]) -> str:
    """First non-empty detected language in segment order."""
    for code in codes:
        if code:
            return code
    return ""


class DocumentTranslator:
    """
    Translates a document through a TranslationProvider.

    Non-PDF documents and PDFs within the page ceiling take a single direct
    call. Longer PDFs are split, each segment is translated with the same
    languages and tuning flags, and the outputs are merged in page order.
    A failing segment fails the whole document.
    """

    def __init__(
        self,
        provider: TranslationProvider,
        max_pages_per_request: int = DEFAULT_MAX_PAGES_PER_REQUEST,
        segment_concurrency: int = 1,
    ):
        """
        Initialize the translator.

        Args:
            provider: Translation backend.
            max_pages_per_request: Page ceiling of one translate call.
            segment_concurrency: Segments translated at once; 1 keeps the
                calls strictly sequential.
        """
        self._provider = provider
        self._max_pages = max(1, int(max_pages_per_request))
        self._segment_concurrency = max(1, int(segment_concurrency))

    @property
    def max_pages_per_request(self) -> int:
        return self._max_pages

    async def translate(
        self,
        document: Document,
        *,
        target_language: str,
        source_language: str | None = None,
        tuning: DocumentTuning | None = None,
    ) -> TranslationResult:
        """
        Translate a document, splitting it first if it exceeds the page ceiling.

        Raises:
            InvalidArgument: Missing target language or empty content.
            UnsupportedMimeType: MIME type outside the supported set.
            MalformedDocument: A PDF that cannot be split or merged.
            TranslationServiceFailure: Any translate call failed.
        """
        if not target_language:
            raise InvalidArgument("Missing target language.")
        if not document.content:
            raise InvalidArgument("Document content is empty.")
        if document.mime_type not in SUPPORTED_MIME_TYPES:
            raise UnsupportedMimeType(document.mime_type)

        # Tuning flags only apply to PDFs
        if not document.is_paginated:
            tuning = None

        if document.is_paginated and document.page_count > self._max_pages:
            return await self._translate_in_segments(
                document,
                target_language=target_language,
                source_language=source_language,
                tuning=tuning,
            )

        try:
            translation = await self._provider.translate_document(
                document.content,
                document.mime_type,
                target_language=target_language,
                source_language=source_language,
                tuning=tuning,
            )
        except TranslationServiceFailure:
            raise
        except Exception as e:
            raise TranslationServiceFailure(f"Document translation failed: {e}") from e
        if not translation.content:
            raise TranslationServiceFailure("Empty document translation.")

        return TranslationResult(
            content=translation.content,
            mime_type=translation.mime_type or document.mime_type,
            detected_language_code=translation.detected_language_code,
        )

    async def _translate_in_segments(
        self,
        document: Document,
        *,
        target_language: str,
        source_language: str | None,
        tuning: DocumentTuning | None,
    ) -> TranslationResult:
        split = segments.split(document, self._max_pages)
        logger.info(
            "Splitting %d-page PDF into %d segments of up to %d pages",
            split.total_pages,
            len(split.segments),
            self._max_pages,
        )

        async def translate_segment(segment: Segment) -> DocumentTranslation:
            logger.debug("Translating pages %d-%d", segment.start + 1, segment.end)
            try:
                translation = await self._provider.translate_document(
                    segment.document.content,
                    segment.document.mime_type,
                    target_language=target_language,
                    source_language=source_language,
                    tuning=tuning,
                )
            except TranslationServiceFailure:
                raise
            except Exception as e:
                raise TranslationServiceFailure(
                    f"Translation of pages {segment.start + 1}-{segment.end} failed: {e}"
                ) from e
            if not translation.content:
                raise TranslationServiceFailure(
                    f"Empty translation for pages {segment.start + 1}-{segment.end}."
                )
            return translation

        if self._segment_concurrency == 1:
            translations = []
            for segment in split.segments:
                translations.append(await translate_segment(segment))
        else:
            runner = BoundedBatchRunner(self._segment_concurrency)
            translations = await runner.run(split.segments, translate_segment)

        merged = segments.merge([Document(t.content, document.mime_type) for t in translations])
        return TranslationResult(
            content=merged.content,
            mime_type=merged.mime_type,
            detected_language_code=first_detected_language(
                [t.detected_language_code for t in translations]
            ),
        )
