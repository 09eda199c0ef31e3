"""BibTeX tokenizer, author parser, and entry-to-article mapping.

Parsing runs in three stages:

* :func:`split_entries` isolates ``@type{key, ...}`` blocks. A block's field
  text runs up to the next ``@word{`` marker or the end of the input; the
  closing brace of an entry is not matched.
* :func:`split_fields` isolates ``name = value`` pairs inside a block. Brace
  values may contain one level of nested braces.
* :func:`unescape_value` strips delimiters and normalizes a raw value.

Malformed input never raises: blocks or fields that do not match are skipped.
"""
from __future__ import annotations

import re
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from .models import ArticleData, BibTeXEntry, ParsedAuthor

COMMENT_PATTERN = re.compile(r"%.*$", re.MULTILINE)
WHITESPACE_PATTERN = re.compile(r"\s+")
ENTRY_PATTERN = re.compile(
    r"@(\w+)\s*\{\s*([^,]+)\s*,\s*(.*?)(?=@\w+\s*\{|$)", re.DOTALL | re.ASCII
)
FIELD_PATTERN = re.compile(
    r'(\w+)\s*=\s*(\{[^{}]*(?:\{[^{}]*\}[^{}]*)*\}|"[^"]*"|[^,]*),?',
    re.ASCII,
)
AUTHOR_SEPARATOR = re.compile(r"\s+and\s+", re.IGNORECASE)
AUTHOR_EMAIL_PATTERN = re.compile(r"([^<]+)<([^>]+)>")
INTEGER_PREFIX = re.compile(r"\s*([+-]?[0-9]+)")


def _parse_year(value: str) -> Optional[int]:
    # Leading integer wins ("2020}" -> 2020); no digits means missing.
    match = INTEGER_PREFIX.match(value)
    if not match:
        return None
    return int(match.group(1))


def _as_text(value: str) -> str:
    return value


FIELD_PARSERS: Dict[str, Callable[[str], object]] = {
    "title": _as_text,
    "author": _as_text,
    "year": _parse_year,
    "journal": _as_text,
    "booktitle": _as_text,
    "pages": _as_text,
    "volume": _as_text,
    "number": _as_text,
    "publisher": _as_text,
    "doi": _as_text,
    "url": _as_text,
    "abstract": _as_text,
    "keywords": _as_text,
    "isbn": _as_text,
    "issn": _as_text,
    "editor": _as_text,
    "address": _as_text,
    "month": _as_text,
    "note": _as_text,
    "location": _as_text,
}


def clean_content(content: str) -> str:
    """Drop ``%`` line comments and collapse whitespace runs to single spaces."""
    without_comments = COMMENT_PATTERN.sub("", content)
    return WHITESPACE_PATTERN.sub(" ", without_comments).strip()


def split_entries(content: str) -> Iterator[Tuple[str, str, str]]:
    """Yield ``(type, key, field_text)`` for each entry block in cleaned content."""
    for match in ENTRY_PATTERN.finditer(content):
        entry_type, key, fields = match.groups()
        yield entry_type.lower(), key.strip(), fields


def split_fields(fields: str) -> Iterator[Tuple[str, str]]:
    """Yield ``(name, raw_value)`` pairs with lowercased names."""
    for match in FIELD_PATTERN.finditer(fields):
        name, value = match.groups()
        yield name.lower().strip(), value


def unescape_value(raw: str) -> str:
    """Strip one pair of enclosing braces or quotes and normalize the value."""
    value = raw.strip()
    if value.startswith("{") and value.endswith("}"):
        value = value[1:-1]
    elif value.startswith('"') and value.endswith('"'):
        value = value[1:-1]

    value = value.replace('\\"', '"').replace("\\'", "'").replace("\\\\", "\\")
    return WHITESPACE_PATTERN.sub(" ", value).strip()


def parse_bibtex(content: str) -> List[BibTeXEntry]:
    """Parse BibTeX text into entries, in source order.

    Unknown field names are dropped. Duplicate citation keys are kept as
    separate entries; a repeated field within one entry keeps its last value.
    """
    entries: List[BibTeXEntry] = []
    for entry_type, key, fields in split_entries(clean_content(content or "")):
        values: Dict[str, object] = {}
        for name, raw_value in split_fields(fields):
            parser = FIELD_PARSERS.get(name)
            if parser is None:
                continue
            values[name] = parser(unescape_value(raw_value))
        entries.append(BibTeXEntry(entry_type=entry_type, key=key, **values))
    return entries


def parse_authors(raw: Optional[str]) -> List[ParsedAuthor]:
    """Split an ``author`` field into ordered authors.

    Pieces are separated by a standalone ``and`` (any case). ``Name <email>``
    keeps the email; ``Last, First`` is inverted to ``First Last``.
    """
    if not raw:
        return []

    authors: List[ParsedAuthor] = []
    for part in AUTHOR_SEPARATOR.split(raw):
        piece = part.strip()

        email_match = AUTHOR_EMAIL_PATTERN.search(piece)
        if email_match:
            authors.append(
                ParsedAuthor(
                    name=email_match.group(1).strip(),
                    email=email_match.group(2).strip(),
                )
            )
            continue

        if "," in piece:
            last_name, first_name = piece.split(",")[:2]
            authors.append(ParsedAuthor(name=f"{first_name.strip()} {last_name.strip()}"))
            continue

        authors.append(ParsedAuthor(name=piece))
    return authors


def build_venue(entry: BibTeXEntry) -> Optional[str]:
    """Combine journal/booktitle, volume, and number into one venue string."""
    venue = entry.journal or entry.booktitle or None
    if entry.volume:
        venue = f"{venue}, Vol. {entry.volume}" if venue else f"Vol. {entry.volume}"
    if entry.number:
        venue = f"{venue}({entry.number})" if venue else f"No. {entry.number}"
    return venue


def bibtex_entry_to_article(entry: BibTeXEntry) -> ArticleData:
    return ArticleData(
        title=entry.title or "Untitled",
        authors=parse_authors(entry.author),
        abstract=entry.abstract,
        keywords=entry.keywords,
        doi=entry.doi,
        url=entry.url,
        pages=entry.pages,
        venue=build_venue(entry),
        year=entry.year,
    )


__all__ = [
    "bibtex_entry_to_article",
    "build_venue",
    "clean_content",
    "parse_authors",
    "parse_bibtex",
    "split_entries",
    "split_fields",
    "unescape_value",
]
