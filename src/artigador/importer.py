"""Bulk import of BibTeX entries into article storage."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from secrets import token_hex
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .bibtex import bibtex_entry_to_article, parse_bibtex
from .config import ImporterSettings
from .identifiers import extract_arxiv_id
from .models import ArticleData, AttachedPdf, ImportedArticle, ImportResults, ParsedAuthor
from .pages import parse_bibtex_pages, parse_pages
from .pdf_archive import PdfArchive

LOGGER = logging.getLogger(__name__)

WHITESPACE_PATTERN = re.compile(r"\s+")


class BibTeXImportError(ValueError):
    """Raised when an import request is rejected as a whole."""


class EventEditionNotFoundError(BibTeXImportError):
    pass


@dataclass
class NewArticle:
    """Everything the repository needs to store one imported article."""

    title: str
    event_edition_id: str
    authors: List[ParsedAuthor]
    abstract: Optional[str] = None
    keywords: Optional[str] = None
    doi: Optional[str] = None
    url: Optional[str] = None
    pages: Optional[str] = None
    start_page: Optional[int] = None
    end_page: Optional[int] = None
    page_count: Optional[int] = None
    venue: Optional[str] = None
    year: Optional[int] = None
    arxiv_id: Optional[str] = None
    bibtex_key: Optional[str] = None
    pdf: Optional[AttachedPdf] = None
    category_ids: List[str] = field(default_factory=list)


@dataclass
class StoredAuthor:
    id: str
    name: str
    email: str
    affiliation: Optional[str] = None


@dataclass
class StoredArticle:
    id: str
    title: str
    event_edition_id: str
    author_ids: List[Tuple[str, int]] = field(default_factory=list)
    category_ids: List[str] = field(default_factory=list)
    abstract: Optional[str] = None
    keywords: Optional[str] = None
    doi: Optional[str] = None
    url: Optional[str] = None
    pages: Optional[str] = None
    start_page: Optional[int] = None
    end_page: Optional[int] = None
    page_count: Optional[int] = None
    venue: Optional[str] = None
    year: Optional[int] = None
    arxiv_id: Optional[str] = None
    bibtex_key: Optional[str] = None
    pdf_file: Optional[str] = None


class ArticleRepository:
    """Persistence interface used by the importer."""

    def get_event_edition(self, edition_id: str) -> Optional[str]:  # pragma: no cover - interface
        raise NotImplementedError

    def create_article(self, article: NewArticle) -> str:  # pragma: no cover - interface
        raise NotImplementedError


class InMemoryArticleRepository(ArticleRepository):
    """Dictionary-backed repository; each ``create_article`` call is all-or-nothing."""

    def __init__(self) -> None:
        self.event_editions: Dict[str, str] = {}
        self.categories: Dict[str, str] = {}
        self.authors: Dict[str, StoredAuthor] = {}
        self.articles: Dict[str, StoredArticle] = {}

    def add_event_edition(self, edition_id: str, name: str = "") -> None:
        self.event_editions[edition_id] = name or edition_id

    def add_category(self, category_id: str, name: str = "") -> None:
        self.categories[category_id] = name or category_id

    def get_event_edition(self, edition_id: str) -> Optional[str]:
        return self.event_editions.get(edition_id)

    def find_author(self, email: str) -> Optional[StoredAuthor]:
        return self.authors.get(email)

    def create_article(self, article: NewArticle) -> str:
        if article.event_edition_id not in self.event_editions:
            raise LookupError(f"Unknown event edition {article.event_edition_id}")
        missing = [cid for cid in article.category_ids if cid not in self.categories]
        if missing:
            raise LookupError(f"Unknown category {', '.join(missing)}")
        emails = [author.email for author in article.authors]
        if any(not email for email in emails):
            raise ValueError("Every author needs an email before storage")

        article_id = token_hex(8)
        links: List[Tuple[str, int]] = []
        for order, author in enumerate(article.authors, start=1):
            stored = self.authors.get(author.email)  # type: ignore[arg-type]
            if stored is None:
                stored = StoredAuthor(
                    id=token_hex(8),
                    name=author.name,
                    email=author.email,  # type: ignore[arg-type]
                    affiliation=author.affiliation,
                )
                self.authors[stored.email] = stored
            else:
                stored.name = author.name
                stored.affiliation = author.affiliation
            links.append((stored.id, order))

        self.articles[article_id] = StoredArticle(
            id=article_id,
            title=article.title,
            event_edition_id=article.event_edition_id,
            author_ids=links,
            category_ids=list(article.category_ids),
            abstract=article.abstract,
            keywords=article.keywords,
            doi=article.doi,
            url=article.url,
            pages=article.pages,
            start_page=article.start_page,
            end_page=article.end_page,
            page_count=article.page_count,
            venue=article.venue,
            year=article.year,
            arxiv_id=article.arxiv_id,
            bibtex_key=article.bibtex_key,
            pdf_file=article.pdf.filename if article.pdf else None,
        )
        return article_id

    def update_article_pages(self, article_id: str, pages: Optional[str]) -> StoredArticle:
        """Apply a manually edited ``pages`` value (single-hyphen ranges only)."""
        article = self.articles.get(article_id)
        if article is None:
            raise LookupError(f"Unknown article {article_id}")
        page_range = parse_pages(pages)
        article.pages = pages
        article.start_page = page_range.start_page
        article.end_page = page_range.end_page
        article.page_count = page_range.page_count
        return article


def placeholder_email(name: str, domain: str) -> str:
    """Build a stable stand-in address for an author without an email."""
    local_part = WHITESPACE_PATTERN.sub(".", name.lower())
    return f"{local_part}@{domain}"


class BibTeXImporter:
    """Turn BibTeX text into stored articles, one entry at a time."""

    def __init__(
        self,
        repository: ArticleRepository,
        settings: ImporterSettings | None = None,
    ):
        self.repository = repository
        self.settings = settings or ImporterSettings()

    def import_content(
        self,
        content: str,
        event_edition_id: str,
        default_categories: Sequence[str] = (),
        pdf_archive: PdfArchive | None = None,
    ) -> ImportResults:
        if not content or not event_edition_id:
            raise BibTeXImportError("BibTeX content and event edition are required")

        if self.repository.get_event_edition(event_edition_id) is None:
            raise EventEditionNotFoundError("Event edition not found")

        entries = parse_bibtex(content)
        if not entries:
            raise BibTeXImportError("No valid BibTeX entries found")

        results = ImportResults()
        for entry in entries:
            try:
                article_data = bibtex_entry_to_article(entry)
                pdf = pdf_archive.find(entry.key) if pdf_archive else None
                new_article = self._build_article(
                    article_data, event_edition_id, default_categories, pdf
                )
                new_article.bibtex_key = entry.key
                article_id = self.repository.create_article(new_article)
            except Exception as exc:
                results.failed += 1
                message = f'Entry "{entry.key}" ({entry.title or "Untitled"}): {exc}'
                results.errors.append(message)
                LOGGER.warning("Import failed: %s", message)
                continue

            results.success += 1
            results.articles.append(
                ImportedArticle(
                    id=article_id,
                    title=article_data.title,
                    bibtex_key=entry.key,
                    pdf_file=pdf.filename if pdf else None,
                )
            )

        LOGGER.info(
            "BibTeX import into %s: %s entries, %s success, %s failed",
            event_edition_id,
            len(entries),
            results.success,
            results.failed,
        )
        return results

    def _build_article(
        self,
        data: ArticleData,
        event_edition_id: str,
        default_categories: Iterable[str],
        pdf: AttachedPdf | None,
    ) -> NewArticle:
        if self.settings.require_authors and not data.authors:
            raise ValueError("Author is required for import")

        page_range = parse_bibtex_pages(data.pages)
        page_count = page_range.page_count
        if page_count is None and pdf is not None:
            page_count = pdf.page_count

        authors = [
            ParsedAuthor(
                name=author.name,
                email=author.email
                or placeholder_email(author.name, self.settings.unknown_email_domain),
                affiliation=author.affiliation,
            )
            for author in data.authors
        ]

        return NewArticle(
            title=data.title,
            event_edition_id=event_edition_id,
            authors=authors,
            abstract=data.abstract,
            keywords=data.keywords,
            doi=data.doi,
            url=data.url,
            pages=data.pages,
            start_page=page_range.start_page,
            end_page=page_range.end_page,
            page_count=page_count,
            venue=data.venue,
            year=data.year,
            arxiv_id=extract_arxiv_id(data.url),
            pdf=pdf,
            category_ids=list(default_categories),
        )
