import sys
import zipfile
from io import BytesIO
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

import pytest
from pypdf import PdfWriter

from artigador.importer import InMemoryArticleRepository


def make_pdf(pages: int) -> bytes:
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=72, height=72)
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def make_zip(members: dict[str, bytes]) -> bytes:
    buffer = BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, data in members.items():
            archive.writestr(name, data)
    return buffer.getvalue()


@pytest.fixture()
def repository() -> InMemoryArticleRepository:
    repo = InMemoryArticleRepository()
    repo.add_event_edition("sbes-2024", "SBES 2024")
    repo.add_category("se", "Software Engineering")
    repo.add_category("ml", "Machine Learning")
    return repo


@pytest.fixture()
def sample_bibtex() -> str:
    return """
% Sample proceedings export
@inproceedings{silva2024,
  title = {Mining {GitHub} Issues},
  author = {Silva, Ana and Bruno Costa <bruno@ufba.br>},
  booktitle = {Proceedings of SBES},
  pages = {10--21},
  year = {2024},
  url = {https://arxiv.org/abs/2401.01234v2}
}

@article{nopages2023,
  title = {Refactoring at Scale},
  author = {Carla Dias},
  journal = {Empirical Software Engineering},
  volume = {28},
  number = {4},
  year = 2023
}
"""


@pytest.fixture()
def pdf_zip_bytes() -> bytes:
    return make_zip(
        {
            "papers/silva2024.pdf": make_pdf(3),
            "NoPages2023.pdf": make_pdf(5),
            "__MACOSX/papers/._silva2024.pdf": b"junk",
            "readme.txt": b"not a pdf",
        }
    )
