import logging

import pytest

from artigador.config import ImporterSettings
from artigador.importer import (
    BibTeXImporter,
    BibTeXImportError,
    EventEditionNotFoundError,
    placeholder_email,
)
from artigador.pdf_archive import PdfArchive


def test_import_creates_articles_and_authors(repository, sample_bibtex):
    importer = BibTeXImporter(repository)
    results = importer.import_content(sample_bibtex, "sbes-2024", default_categories=["se"])

    assert results.success == 2
    assert results.failed == 0
    assert results.message == "Import completed: 2 success, 0 failed"
    assert [a.bibtex_key for a in results.articles] == ["silva2024", "nopages2023"]

    stored = repository.articles[results.articles[0].id]
    assert stored.title == "Mining {GitHub} Issues"
    assert stored.venue == "Proceedings of SBES"
    assert (stored.start_page, stored.end_page, stored.page_count) == (10, 21, 12)
    assert stored.arxiv_id == "2401.01234"
    assert stored.category_ids == ["se"]

    ana = repository.find_author("ana.silva@unknown.edu")
    bruno = repository.find_author("bruno@ufba.br")
    assert ana is not None and ana.name == "Ana Silva"
    assert bruno is not None and bruno.name == "Bruno Costa"
    assert stored.author_ids == [(ana.id, 1), (bruno.id, 2)]

    second = repository.articles[results.articles[1].id]
    assert second.venue == "Empirical Software Engineering, Vol. 28(4)"
    assert second.year == 2023
    assert second.page_count is None


def test_import_attaches_pdfs_and_uses_their_page_count(repository, sample_bibtex, pdf_zip_bytes):
    importer = BibTeXImporter(repository)
    with PdfArchive(pdf_zip_bytes) as archive:
        results = importer.import_content(sample_bibtex, "sbes-2024", pdf_archive=archive)

    assert [a.pdf_file for a in results.articles] == ["silva2024.pdf", "NoPages2023.pdf"]
    first, second = (repository.articles[a.id] for a in results.articles)
    assert first.page_count == 12
    assert second.page_count == 5


def test_existing_author_is_updated_not_duplicated(repository):
    importer = BibTeXImporter(repository)
    content = (
        "@misc{one, title={One}, author={Lee, Ann}} "
        "@misc{two, title={Two}, author={Ann Lee <ann.lee@unknown.edu>}}"
    )
    results = importer.import_content(content, "sbes-2024")

    assert results.success == 2
    assert len(repository.authors) == 1
    first, second = (repository.articles[a.id] for a in results.articles)
    assert first.author_ids[0][0] == second.author_ids[0][0]


def test_failed_entries_are_reported_and_others_continue(repository, caplog):
    importer = BibTeXImporter(repository)
    content = (
        "@misc{good, title={Good}, author={A}} "
        "@misc{anon, title={No Authors}} "
        "@misc{untitled, author={B}}"
    )
    with caplog.at_level(logging.WARNING, logger="artigador.importer"):
        results = importer.import_content(content, "sbes-2024", default_categories=["ml"])

    assert results.success == 2
    assert results.failed == 1
    assert results.errors == ['Entry "anon" (No Authors): Author is required for import']
    assert [a.title for a in results.articles] == ["Good", "Untitled"]
    assert len(repository.articles) == 2
    assert "anon" in caplog.text


def test_entry_without_title_is_reported_as_untitled(repository):
    importer = BibTeXImporter(repository)
    results = importer.import_content("@misc{bad, author={B}}", "sbes-2024", default_categories=["nope"])

    assert results.failed == 1
    assert results.errors == ['Entry "bad" (Untitled): Unknown category nope']
    assert repository.articles == {}
    assert repository.authors == {}


def test_missing_authors_allowed_when_configured(repository):
    importer = BibTeXImporter(repository, settings=ImporterSettings(require_authors=False))
    results = importer.import_content("@misc{anon, title={No Authors}}", "sbes-2024")
    assert results.success == 1


def test_rejects_missing_content_or_edition(repository):
    importer = BibTeXImporter(repository)
    with pytest.raises(BibTeXImportError, match="required"):
        importer.import_content("", "sbes-2024")
    with pytest.raises(BibTeXImportError, match="required"):
        importer.import_content("@misc{a, title={A}}", "")


def test_rejects_unknown_edition(repository):
    importer = BibTeXImporter(repository)
    with pytest.raises(EventEditionNotFoundError):
        importer.import_content("@misc{a, title={A}}", "missing")


def test_rejects_content_without_entries(repository):
    importer = BibTeXImporter(repository)
    with pytest.raises(BibTeXImportError, match="No valid BibTeX entries found"):
        importer.import_content("just some notes", "sbes-2024")


def test_manual_page_edit_uses_strict_parser(repository):
    importer = BibTeXImporter(repository)
    results = importer.import_content("@misc{a, title={A}, author={X}, pages={1--4}}", "sbes-2024")
    article_id = results.articles[0].id
    assert repository.articles[article_id].page_count == 4

    updated = repository.update_article_pages(article_id, "1--4")
    assert (updated.start_page, updated.end_page, updated.page_count) == (None, None, None)

    updated = repository.update_article_pages(article_id, "5-9")
    assert (updated.start_page, updated.end_page, updated.page_count) == (5, 9, 5)

    with pytest.raises(LookupError):
        repository.update_article_pages("unknown", "1-2")


def test_placeholder_email():
    assert placeholder_email("Ana  Maria Silva", "unknown.edu") == "ana.maria.silva@unknown.edu"


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("ARTIGADOR_UNKNOWN_EMAIL_DOMAIN", "example.org")
    monkeypatch.setenv("ARTIGADOR_REQUIRE_AUTHORS", "no")
    settings = ImporterSettings.from_env()
    assert settings.unknown_email_domain == "example.org"
    assert settings.require_authors is False
