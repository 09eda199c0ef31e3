"""Import reporting utilities."""
from __future__ import annotations

from typing import List

from .models import BibTeXEntry, ImportResults


def render_import_report(results: ImportResults, entries: List[BibTeXEntry] | None = None) -> str:
    """Return a human-readable summary of a BibTeX import."""

    lines = ["BibTeX Import Report"]
    if entries is not None:
        lines.append(f"Entries parsed: {len(entries)}")
    lines.append(f"Imported: {results.success}")
    lines.append(f"Failed: {results.failed}")

    if results.articles:
        lines.append("Articles:")
        for article in results.articles:
            line = f"  [{article.bibtex_key}] {article.title}"
            if article.pdf_file:
                line += f" (pdf: {article.pdf_file})"
            lines.append(line)

    if results.errors:
        lines.append("Errors:")
        lines.extend(f"  {error}" for error in results.errors)
    return "\n".join(lines)
