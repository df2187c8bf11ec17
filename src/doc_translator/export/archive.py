"""
Zip archive output for multi-file batches.

One entry per item: translated bytes on success, `<base>_error.txt` with the
error message on failure. A failing entry never prevents the archive from
being finalized.
"""

from __future__ import annotations

import io
import logging
import zipfile
from collections.abc import Iterable
from pathlib import PurePath

from doc_translator.models import BatchOutcome

logger = logging.getLogger(__name__)

ARCHIVE_NAME = "translations.zip"
ARCHIVE_ERROR_ENTRY = "zip_error.txt"


class ArchiveWriter:
    """Writes batch outcomes into a deflated zip archive."""

    def __init__(self, compresslevel: int = 9):
        self._buffer = io.BytesIO()
        self._zip = zipfile.ZipFile(
            self._buffer, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=compresslevel
        )
        self._names: set[str] = set()
        self._closed = False

    def _unique_name(self, name: str) -> str:
        """Suffix `_2`, `_3`, ... before the extension when a name is taken."""
        if name not in self._names:
            self._names.add(name)
            return name
        path = PurePath(name)
        counter = 2
        while True:
            candidate = f"{path.stem}_{counter}{path.suffix}"
            if candidate not in self._names:
                self._names.add(candidate)
                return candidate
            counter += 1

    def write_text(self, name: str, text: str) -> str:
        entry = self._unique_name(name)
        self._zip.writestr(entry, text.encode("utf-8"))
        return entry

    def add(self, outcome: BatchOutcome) -> str:
        """
        Add one outcome, degrading to its error entry if writing the content fails.

        Returns:
            Name of the entry written.
        """
        if outcome.ok:
            try:
                if outcome.content is None:
                    raise ValueError(f"No content produced for {outcome.item_name or 'file'}")
                entry = self._unique_name(outcome.filename)
                self._zip.writestr(entry, outcome.content)
                return entry
            except Exception as e:
                logger.warning("Could not archive %s: %s", outcome.filename, e)
                return self.write_text(outcome.error_filename, f"{e}\n")

        return self.write_text(outcome.error_filename, f"{outcome.error}\n")

    def close(self) -> None:
        if not self._closed:
            self._zip.close()
            self._closed = True

    def getvalue(self) -> bytes:
        """Finalize and return the archive bytes."""
        self.close()
        return self._buffer.getvalue()


def build_archive(outcomes: Iterable[BatchOutcome]) -> bytes:
    """
    Render outcomes as a zip archive.

    If iterating the outcomes itself fails, a `zip_error.txt` entry records the
    error and the archive is still finalized.
    """
    writer = ArchiveWriter()
    try:
        for outcome in outcomes:
            writer.add(outcome)
    except Exception as e:
        logger.exception("Archive production failed")
        writer.write_text(ARCHIVE_ERROR_ENTRY, f"{e}\n")

    return writer.getvalue()
