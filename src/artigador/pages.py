"""Page-range parsing for article edits and BibTeX imports.

The two parsers accept different inputs and are used by different callers:
manual edits accept a single hyphen only, imports also accept en/em dashes
and doubled separators such as ``10--20``.
"""
from __future__ import annotations

import re
from typing import Optional, Pattern

from .models import PageRange

EDIT_RANGE_PATTERN = re.compile(r"^(\d+)\s*-\s*(\d+)$", re.ASCII)
IMPORT_RANGE_PATTERN = re.compile(r"^(\d+)\s*[-–—]+\s*(\d+)$", re.ASCII)
SINGLE_NUMBER_PATTERN = re.compile(r"^\d+$", re.ASCII)


def _parse_with(pattern: Pattern[str], raw: Optional[str]) -> PageRange:
    if not raw:
        return PageRange()
    text = raw.strip()

    match = pattern.match(text)
    if match:
        start, end = int(match.group(1)), int(match.group(2))
        if end >= start:
            return PageRange(start_page=start, end_page=end, page_count=end - start + 1)

    if SINGLE_NUMBER_PATTERN.match(text):
        return PageRange(page_count=int(text))
    return PageRange()


def parse_pages(raw: Optional[str]) -> PageRange:
    """Parse ``"start-end"`` (single hyphen) or a bare page count."""
    return _parse_with(EDIT_RANGE_PATTERN, raw)


def parse_bibtex_pages(raw: Optional[str]) -> PageRange:
    """Parse a BibTeX ``pages`` value, accepting ``-``, ``--``, en and em dashes."""
    return _parse_with(IMPORT_RANGE_PATTERN, raw)
