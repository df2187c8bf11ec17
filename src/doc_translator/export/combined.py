"""
Combined text output: every item's translated text in one document.

Each item gets a separator line, its text and a newline. Blank lines are
inserted between consecutive items only, never after the last one.
"""

from __future__ import annotations

from dataclasses import dataclass

from doc_translator.config import MAX_BETWEEN_BLOCKS_LINES
from doc_translator.models import FALLBACK_BASE_NAME

ERROR_PREFIX = "[ERRO]"


@dataclass
class TextBlock:
    """One item's contribution to the combined document."""

    name: str
    text: str = ""
    error: str | None = None

    def render(self) -> str:
        body = f"{ERROR_PREFIX} {self.error}" if self.error is not None else self.text
        # Exactly one newline ends each block
        body = body.rstrip("\n")
        return f"===== {self.name or FALLBACK_BASE_NAME} =====\n{body}\n"


def clamp_between_lines(value: int | float | str | None) -> int:
    """Coerce a caller-supplied blank-line count into 0..20."""
    try:
        lines = int(float(value)) if value is not None else 0
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, min(MAX_BETWEEN_BLOCKS_LINES, lines))


def combine_text(blocks: list[TextBlock], between_blocks_lines: int | float | str | None = 0) -> str:
    """Join blocks in order with `between_blocks_lines` blank lines between them."""
    spacer = "\n" * clamp_between_lines(between_blocks_lines)
    return spacer.join(block.render() for block in blocks)


def combined_filename(target_language: str, images_only: bool) -> str:
    prefix = "images" if images_only else "combined"
    return f"{prefix}_{target_language}_translations.txt"
