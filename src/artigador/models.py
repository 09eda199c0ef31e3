"""Data models for BibTeX parsing and article import workflows."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class BibTeXEntry:
    """One parsed ``@type{key, ...}`` block."""

    entry_type: str
    key: str
    title: Optional[str] = None
    author: Optional[str] = None
    year: Optional[int] = None
    journal: Optional[str] = None
    booktitle: Optional[str] = None
    pages: Optional[str] = None
    volume: Optional[str] = None
    number: Optional[str] = None
    publisher: Optional[str] = None
    doi: Optional[str] = None
    url: Optional[str] = None
    abstract: Optional[str] = None
    keywords: Optional[str] = None
    isbn: Optional[str] = None
    issn: Optional[str] = None
    editor: Optional[str] = None
    address: Optional[str] = None
    month: Optional[str] = None
    note: Optional[str] = None
    location: Optional[str] = None


@dataclass
class ParsedAuthor:
    """An author extracted from a BibTeX ``author`` field."""

    name: str
    email: Optional[str] = None
    affiliation: Optional[str] = None


@dataclass
class ArticleData:
    """Normalized article shape handed to the importer."""

    title: str
    authors: List[ParsedAuthor] = field(default_factory=list)
    abstract: Optional[str] = None
    keywords: Optional[str] = None
    doi: Optional[str] = None
    url: Optional[str] = None
    pages: Optional[str] = None
    venue: Optional[str] = None
    year: Optional[int] = None


@dataclass(frozen=True)
class PageRange:
    start_page: Optional[int] = None
    end_page: Optional[int] = None
    page_count: Optional[int] = None


@dataclass
class AttachedPdf:
    """A PDF pulled out of an uploaded archive for one citation key."""

    filename: str
    page_count: Optional[int] = None


@dataclass
class ImportedArticle:
    id: str
    title: str
    bibtex_key: str
    pdf_file: Optional[str] = None


@dataclass
class ImportResults:
    """Per-entry accounting for one bulk import."""

    success: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)
    articles: List[ImportedArticle] = field(default_factory=list)

    @property
    def message(self) -> str:
        return f"Import completed: {self.success} success, {self.failed} failed"
