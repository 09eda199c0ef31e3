from artigador.identifiers import extract_arxiv_id
from artigador.models import PageRange
from artigador.pages import parse_bibtex_pages, parse_pages


def test_parse_pages_range():
    assert parse_pages("45-60") == PageRange(start_page=45, end_page=60, page_count=16)
    assert parse_pages("  7 - 7 ") == PageRange(start_page=7, end_page=7, page_count=1)


def test_parse_pages_single_number_is_page_count():
    assert parse_pages("100") == PageRange(page_count=100)


def test_parse_pages_unparsable():
    assert parse_pages("abc") == PageRange()
    assert parse_pages(None) == PageRange()
    assert parse_pages("") == PageRange()


def test_parse_pages_rejects_reversed_range():
    assert parse_pages("60-45") == PageRange()


def test_edit_parser_only_accepts_single_hyphen():
    assert parse_pages("10--20") == PageRange()
    assert parse_pages("10–20") == PageRange()


def test_import_parser_accepts_dash_variants():
    expected = PageRange(start_page=10, end_page=20, page_count=11)
    assert parse_bibtex_pages("10--20") == expected
    assert parse_bibtex_pages("10 – 20") == expected
    assert parse_bibtex_pages("10—20") == expected
    assert parse_bibtex_pages("10-20") == expected
    assert parse_bibtex_pages("12") == PageRange(page_count=12)
    assert parse_bibtex_pages("e1234") == PageRange()


def test_extract_arxiv_id():
    assert extract_arxiv_id("https://arxiv.org/abs/2401.01234") == "2401.01234"
    assert extract_arxiv_id("https://arxiv.org/pdf/1706.03762v5") == "1706.03762"
    assert extract_arxiv_id("HTTPS://ARXIV.ORG/PDF/2101.1234.pdf") == "2101.1234"


def test_extract_arxiv_id_without_match():
    assert extract_arxiv_id(None) is None
    assert extract_arxiv_id("") is None
    assert extract_arxiv_id("https://doi.org/10.1234/xyz") is None
    assert extract_arxiv_id("https://arxiv.org/list/cs.SE/recent") is None


def test_page_parsers_only_accept_ascii_digits():
    assert parse_pages("١٢-١٥") == PageRange()
    assert parse_pages("١٢") == PageRange()
    assert parse_bibtex_pages("١٢–١٥") == PageRange()


def test_extract_arxiv_id_only_accepts_ascii_digits():
    assert extract_arxiv_id("https://arxiv.org/abs/٢٤٠١.٠١٢٣٤") is None
