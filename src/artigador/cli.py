"""Command line interface for importing BibTeX files."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

from .bibtex import bibtex_entry_to_article, parse_bibtex
from .config import ImporterSettings
from .exporters import article_to_dict, entry_to_dict, results_to_dict, to_bibtex
from .importer import BibTeXImporter, BibTeXImportError, InMemoryArticleRepository
from .models import BibTeXEntry, ImportResults
from .pdf_archive import PdfArchive, PdfArchiveError
from .report import render_import_report


def _build_result(entries: List[BibTeXEntry], results: ImportResults) -> Dict[str, Any]:
    return {
        "entries": [entry_to_dict(entry) for entry in entries],
        "articles": [article_to_dict(bibtex_entry_to_article(entry)) for entry in entries],
        "results": results_to_dict(results),
        "message": results.message,
    }


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Import articles from a BibTeX file")
    parser.add_argument("input", type=Path, help="Path to a .bib or .bibtex file")
    parser.add_argument(
        "--pdf-zip",
        type=Path,
        help="ZIP archive with PDFs named after citation keys (e.g. mykey2023.pdf)",
    )
    parser.add_argument(
        "--event-edition",
        default="default",
        help="Event edition the imported articles belong to",
    )
    parser.add_argument(
        "--category",
        action="append",
        default=[],
        help="Category assigned to every imported article (can be repeated)",
    )
    parser.add_argument(
        "--json-output",
        type=Path,
        help="Write parsed entries, mapped articles, and import results to a JSON file",
    )
    parser.add_argument(
        "--bibtex-output",
        type=Path,
        help="Write the parsed entries back out as normalized BibTeX",
    )
    parser.add_argument(
        "--allow-missing-authors",
        action="store_true",
        help="Import entries that have no author field",
    )
    parser.add_argument("--verbose", action="store_true", help="Log progress information")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = ImporterSettings.from_env()
    if args.allow_missing_authors:
        settings.require_authors = False

    repository = InMemoryArticleRepository()
    repository.add_event_edition(args.event_edition)
    for category in args.category:
        repository.add_category(category)

    content = args.input.read_text(encoding="utf-8")
    entries = parse_bibtex(content)
    importer = BibTeXImporter(repository, settings=settings)

    archive = None
    try:
        if args.pdf_zip:
            archive = PdfArchive(args.pdf_zip)
        results = importer.import_content(
            content,
            args.event_edition,
            default_categories=args.category,
            pdf_archive=archive,
        )
    except (BibTeXImportError, PdfArchiveError) as exc:
        print(f"Import rejected: {exc}", file=sys.stderr)
        return 1
    finally:
        if archive is not None:
            archive.close()

    print(render_import_report(results, entries=entries))

    if args.json_output:
        args.json_output.write_text(json.dumps(_build_result(entries, results), indent=2))

    if args.bibtex_output:
        args.bibtex_output.write_text(to_bibtex(entries))

    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    raise SystemExit(main())
