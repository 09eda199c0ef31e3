"""Exporters for parsed BibTeX data and import results."""
from __future__ import annotations

from dataclasses import asdict, fields
from typing import Any, Dict, List

from .models import ArticleData, BibTeXEntry, ImportResults

_BIBTEX_FIELDS = [f.name for f in fields(BibTeXEntry) if f.name not in {"entry_type", "key"}]


def entry_to_dict(entry: BibTeXEntry) -> Dict[str, Any]:
    data = asdict(entry)
    return {name: value for name, value in data.items() if value is not None}


def article_to_dict(article: ArticleData) -> Dict[str, Any]:
    return {
        "title": article.title,
        "abstract": article.abstract,
        "keywords": article.keywords,
        "doi": article.doi,
        "url": article.url,
        "pages": article.pages,
        "authors": [
            {key: value for key, value in asdict(author).items() if value is not None}
            for author in article.authors
        ],
        "venue": article.venue,
        "year": article.year,
    }


def results_to_dict(results: ImportResults) -> Dict[str, Any]:
    return {
        "success": results.success,
        "failed": results.failed,
        "errors": list(results.errors),
        "articles": [
            {
                "id": article.id,
                "title": article.title,
                "bibtexKey": article.bibtex_key,
                "pdfFile": article.pdf_file,
            }
            for article in results.articles
        ],
    }


def to_bibtex(entries: List[BibTeXEntry]) -> str:
    """Write entries back out as BibTeX, one field per line."""
    blocks = []
    for entry in entries:
        lines = [f"@{entry.entry_type}{{{entry.key},"]
        for name in _BIBTEX_FIELDS:
            value = getattr(entry, name)
            if value is None:
                continue
            lines.append(f"  {name} = {{{value}}},")
        lines.append("}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)
