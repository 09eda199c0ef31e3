"""BibTeX parsing and article import toolkit."""

from .bibtex import bibtex_entry_to_article, parse_authors, parse_bibtex
from .identifiers import extract_arxiv_id
from .importer import BibTeXImporter, BibTeXImportError, InMemoryArticleRepository
from .models import ArticleData, BibTeXEntry, ImportResults, PageRange, ParsedAuthor
from .pages import parse_bibtex_pages, parse_pages
from .pdf_archive import PdfArchive

__all__ = [
    "parse_bibtex",
    "parse_authors",
    "bibtex_entry_to_article",
    "parse_pages",
    "parse_bibtex_pages",
    "extract_arxiv_id",
    "BibTeXImporter",
    "BibTeXImportError",
    "InMemoryArticleRepository",
    "PdfArchive",
    "ArticleData",
    "BibTeXEntry",
    "ImportResults",
    "PageRange",
    "ParsedAuthor",
]
