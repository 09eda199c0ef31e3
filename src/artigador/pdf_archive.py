"""Associate PDFs from an uploaded ZIP archive with BibTeX citation keys."""
from __future__ import annotations

import logging
import zipfile
from io import BytesIO
from pathlib import Path, PurePosixPath
from typing import Dict, Optional

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from .models import AttachedPdf

LOGGER = logging.getLogger(__name__)


class PdfArchiveError(ValueError):
    """Raised when an uploaded archive cannot be opened as a ZIP file."""


def count_pdf_pages(data: bytes) -> Optional[int]:
    """Return the number of pages in a PDF, or ``None`` when it cannot be read."""
    try:
        reader = PdfReader(BytesIO(data))
        return len(reader.pages)
    except (PyPdfError, ValueError, OSError) as exc:
        LOGGER.warning("Could not read PDF page count: %s", exc)
        return None


class PdfArchive:
    """Index of ``<key>.pdf`` members in a ZIP archive."""

    def __init__(self, source: bytes | str | Path):
        try:
            if isinstance(source, bytes):
                self._zip = zipfile.ZipFile(BytesIO(source))
            else:
                self._zip = zipfile.ZipFile(Path(source))
        except zipfile.BadZipFile as exc:
            raise PdfArchiveError("PDF archive is not a valid ZIP file") from exc

        self._members: Dict[str, str] = {}
        self._folded: Dict[str, str] = {}
        for info in self._zip.infolist():
            if info.is_dir() or info.filename.startswith("__MACOSX/"):
                continue
            path = PurePosixPath(info.filename)
            if path.suffix.lower() != ".pdf":
                continue
            self._members.setdefault(path.stem, info.filename)
            self._folded.setdefault(path.stem.lower(), info.filename)

    def __enter__(self) -> "PdfArchive":
        return self

    def __exit__(self, *_exc) -> None:
        self.close()

    def __len__(self) -> int:
        return len(self._members)

    def close(self) -> None:
        self._zip.close()

    def keys(self) -> list[str]:
        return sorted(self._members)

    def find(self, key: str) -> Optional[AttachedPdf]:
        """Return the PDF named after ``key``; exact match first, then case-insensitive."""
        member = self._members.get(key) or self._folded.get(key.lower())
        if member is None:
            return None
        return AttachedPdf(
            filename=PurePosixPath(member).name,
            page_count=count_pdf_pages(self._zip.read(member)),
        )
