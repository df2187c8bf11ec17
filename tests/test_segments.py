"""
Tests for PDF page-range splitting and merging.
"""

import math

import pytest
from conftest import make_pdf, pdf_page_texts

from doc_translator.errors import InvalidArgument, MalformedDocument
from doc_translator.models import PDF_MIME, Document
from doc_translator.translation import segments


class TestSplit:
    @pytest.mark.parametrize("pages,size", [(1, 20), (20, 20), (21, 20), (45, 20), (7, 3)])
    def test_segment_count_is_ceiling(self, pages, size):
        result = segments.split(Document(make_pdf(pages), PDF_MIME), size)

        assert result.total_pages == pages
        assert len(result.segments) == math.ceil(pages / size)

    def test_segments_are_contiguous_windows(self):
        result = segments.split(Document(make_pdf(45), PDF_MIME), 20)

        assert [(s.start, s.end) for s in result.segments] == [(0, 20), (20, 40), (40, 45)]
        assert [s.page_count for s in result.segments] == [20, 20, 5]
        for segment in result.segments:
            assert segment.document.mime_type == PDF_MIME
            assert segment.document.page_count == segment.page_count

    def test_segment_content_keeps_page_order(self):
        result = segments.split(Document(make_pdf(5), PDF_MIME), 2)

        assert pdf_page_texts(result.segments[0].document.content) == ["Page 1", "Page 2"]
        assert pdf_page_texts(result.segments[2].document.content) == ["Page 5"]

    @pytest.mark.parametrize("size,expected", [(0, 3), (-4, 3), (1.9, 3), (2.5, 2)])
    def test_window_size_is_floored_and_clamped(self, size, expected):
        result = segments.split(Document(make_pdf(3), PDF_MIME), size)

        assert len(result.segments) == expected

    def test_rejects_garbage(self):
        with pytest.raises(MalformedDocument):
            segments.split(Document(b"not a pdf at all", PDF_MIME), 20)

    def test_rejects_empty_content(self):
        with pytest.raises(MalformedDocument):
            segments.split(Document(b"", PDF_MIME), 20)


class TestMerge:
    def test_split_then_merge_restores_pages(self):
        original = Document(make_pdf(45), PDF_MIME)
        result = segments.split(original, 20)

        merged = segments.merge([s.document for s in result.segments])

        assert merged.mime_type == PDF_MIME
        assert pdf_page_texts(merged.content) == [f"Page {i}" for i in range(1, 46)]

    def test_merge_order_follows_input(self):
        first = Document(make_pdf(1, label="A"), PDF_MIME)
        second = Document(make_pdf(2, label="B"), PDF_MIME)

        merged = segments.merge([second, first])

        assert pdf_page_texts(merged.content) == ["B 1", "B 2", "A 1"]

    def test_merge_of_nothing_is_invalid(self):
        with pytest.raises(InvalidArgument):
            segments.merge([])

    def test_merge_names_bad_segment(self):
        good = Document(make_pdf(1), PDF_MIME)

        with pytest.raises(MalformedDocument, match="Segment 1"):
            segments.merge([good, Document(b"junk", PDF_MIME)])


class TestCountPages:
    def test_counts_pages(self):
        assert Document(make_pdf(7), PDF_MIME).page_count == 7
