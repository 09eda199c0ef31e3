"""Identifier extraction from article URLs."""
from __future__ import annotations

import re
from typing import Optional

ARXIV_URL_PATTERN = re.compile(
    r"arxiv\.org/(?:abs|pdf)/(\d{4}\.\d{4,5})(?:v\d+)?", re.IGNORECASE | re.ASCII
)


def extract_arxiv_id(url: Optional[str]) -> Optional[str]:
    """Return the ``YYMM.NNNNN`` arXiv id from an abs/pdf URL, if any."""
    if not url:
        return None
    match = ARXIV_URL_PATTERN.search(url)
    return match.group(1) if match else None
