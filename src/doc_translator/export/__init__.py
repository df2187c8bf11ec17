"""
Output rendering for batches.

- Zip archive with one entry per item
- Combined plain-text document
- Text extraction from translated documents
"""

from doc_translator.export.archive import ARCHIVE_NAME, ArchiveWriter, build_archive
from doc_translator.export.combined import TextBlock, clamp_between_lines, combine_text
from doc_translator.export.text import extract_text

__all__ = [
    "ARCHIVE_NAME",
    "ArchiveWriter",
    "build_archive",
    "TextBlock",
    "combine_text",
    "clamp_between_lines",
    "extract_text",
]
