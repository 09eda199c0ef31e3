"""FastAPI endpoints for BibTeX import and article page edits.

Run with:
    uvicorn artigador.web:app --reload
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .bibtex import bibtex_entry_to_article, parse_bibtex
from .config import ImporterSettings
from .exporters import article_to_dict, entry_to_dict, results_to_dict
from .importer import (
    BibTeXImporter,
    BibTeXImportError,
    EventEditionNotFoundError,
    InMemoryArticleRepository,
)
from .models import ImportResults
from .pdf_archive import PdfArchive, PdfArchiveError

app = FastAPI(title="Artigador", description="Import academic articles from BibTeX")

repository = InMemoryArticleRepository()


def get_repository() -> InMemoryArticleRepository:
    return repository


def get_settings() -> ImporterSettings:
    return ImporterSettings.from_env()


class ImportRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    bibtex_content: str = Field("", alias="bibtexContent")
    event_edition_id: str = Field("", alias="eventEditionId")
    default_categories: List[str] = Field(default_factory=list, alias="defaultCategories")


class PreviewRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    bibtex_content: str = Field(..., alias="bibtexContent")


class PagesUpdate(BaseModel):
    pages: Optional[str] = None

    @field_validator("pages")
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


def _import_response(results: ImportResults) -> Dict[str, Any]:
    return {"message": results.message, "results": results_to_dict(results)}


def _run_import(
    importer: BibTeXImporter,
    content: str,
    event_edition_id: str,
    default_categories: List[str],
    archive: PdfArchive | None = None,
) -> ImportResults:
    try:
        return importer.import_content(
            content,
            event_edition_id,
            default_categories=default_categories,
            pdf_archive=archive,
        )
    except EventEditionNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except BibTeXImportError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.post("/api/admin/import/bibtex")
async def import_bibtex(
    payload: ImportRequest,
    repo: InMemoryArticleRepository = Depends(get_repository),
    settings: ImporterSettings = Depends(get_settings),
) -> Dict[str, Any]:
    """Import BibTeX text posted as JSON into an event edition."""

    importer = BibTeXImporter(repo, settings=settings)
    results = _run_import(
        importer, payload.bibtex_content, payload.event_edition_id, payload.default_categories
    )
    return _import_response(results)


def _parse_categories(raw: str) -> List[str]:
    """Decode the ``defaultCategories`` form field, a JSON array of category ids."""
    if not raw.strip():
        return []
    try:
        value = json.loads(raw)
    except ValueError as exc:
        raise HTTPException(
            status_code=400, detail="defaultCategories must be a JSON array"
        ) from exc
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise HTTPException(status_code=400, detail="defaultCategories must be a JSON array")
    return value


@app.post("/api/admin/import/bibtex/upload")
async def import_bibtex_upload(
    bibtex_file: UploadFile = File(..., alias="bibtexFile"),
    event_edition_id: str = Form(..., alias="eventEditionId"),
    default_categories: str = Form("[]", alias="defaultCategories"),
    pdf_zip: Optional[UploadFile] = File(None, alias="pdfZip"),
    repo: InMemoryArticleRepository = Depends(get_repository),
    settings: ImporterSettings = Depends(get_settings),
) -> Dict[str, Any]:
    """Import an uploaded .bib file, attaching PDFs from an optional ZIP by citation key."""

    content = (await bibtex_file.read()).decode("utf-8", errors="replace")
    categories = _parse_categories(default_categories)

    archive = None
    if pdf_zip is not None and pdf_zip.filename:
        try:
            archive = PdfArchive(await pdf_zip.read())
        except PdfArchiveError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    importer = BibTeXImporter(repo, settings=settings)
    try:
        results = _run_import(importer, content, event_edition_id, categories, archive)
    finally:
        if archive is not None:
            archive.close()
    return _import_response(results)


@app.post("/api/admin/import/bibtex/preview")
async def preview_bibtex(payload: PreviewRequest) -> Dict[str, Any]:
    """Show how BibTeX text would be parsed without storing anything."""

    entries = parse_bibtex(payload.bibtex_content)
    return {
        "count": len(entries),
        "entries": [entry_to_dict(entry) for entry in entries],
        "articles": [article_to_dict(bibtex_entry_to_article(entry)) for entry in entries],
    }


@app.patch("/api/admin/articles/{article_id}")
async def update_article_pages(
    article_id: str,
    payload: PagesUpdate,
    repo: InMemoryArticleRepository = Depends(get_repository),
) -> Dict[str, Any]:
    """Update an article's pages; only single-hyphen ranges set start and end pages."""

    try:
        article = repo.update_article_pages(article_id, payload.pages)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail="Article not found") from exc
    return {
        "id": article.id,
        "pages": article.pages,
        "startPage": article.start_page,
        "endPage": article.end_page,
        "pageCount": article.page_count,
    }


def main() -> None:
    """Run the FastAPI app using uvicorn."""

    import uvicorn

    uvicorn.run("artigador.web:app", host="0.0.0.0", port=8000, reload=False)


__all__ = ["app", "get_repository", "get_settings", "main"]
