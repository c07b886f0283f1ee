from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from ebooklib import epub

from book2text.config import Settings
from book2text.models import BookDocument, BookMetadata, Chapter, TOCEntry


def build_epub(path: Path, *, title: str | None = "Epub Sample", author: str | None = "John Smith") -> Path:
    book = epub.EpubBook()
    book.set_identifier("book-id")
    if title:
        book.set_title(title)
    if author:
        book.add_author(author)
    book.set_language("en")

    chapter_one = epub.EpubHtml(uid="ch1", title="Chapter One", file_name="chapter_1.xhtml", lang="en")
    chapter_one.content = """
    <html><body>
      <h1>Chapter One</h1>
      <p>First paragraph with <strong>bold</strong> text.</p>
      <p>Second paragraph with a <a href="https://example.com">link</a>.</p>
    </body></html>
    """

    chapter_two = epub.EpubHtml(uid="ch2", title="Chapter Two", file_name="chapter_2.xhtml", lang="en")
    chapter_two.content = """
    <html><body>
      <h1>Chapter Two</h1>
      <p>Only paragraph in chapter two.</p>
    </body></html>
    """

    chapter_three = epub.EpubHtml(uid="ch3", title="Untitled", file_name="chapter_3.xhtml", lang="en")
    chapter_three.content = """
    <html><body>
      <h2>Epilogue</h2>
      <p>The end.</p>
    </body></html>
    """

    book.add_item(chapter_one)
    book.add_item(chapter_two)
    book.add_item(chapter_three)
    book.add_item(epub.EpubNcx())
    book.add_item(epub.EpubNav())

    # chapter three is in the spine but not in the navigation
    book.toc = (chapter_one, chapter_two)
    book.spine = ["nav", chapter_one, chapter_two, chapter_three]
    epub.write_epub(str(path), book)
    return path


def _pdf_string(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(
    path: Path,
    pages: list[str],
    *,
    title: str | None = None,
    author: str | None = None,
) -> Path:
    """Write a minimal PDF with one Helvetica text block per page."""
    count = len(pages)
    page_ids = [4 + 2 * i for i in range(count)]
    info_id = 4 + 2 * count

    objects: list[bytes] = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        (
            f"<< /Type /Pages /Kids [{' '.join(f'{pid} 0 R' for pid in page_ids)}] "
            f"/Count {count} >>"
        ).encode(),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    for page_id, text in zip(page_ids, pages):
        objects.append(
            (
                "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                "/Resources << /Font << /F1 3 0 R >> >> "
                f"/Contents {page_id + 1} 0 R >>"
            ).encode()
        )
        ops = ["BT", "/F1 12 Tf", "14 TL", "72 720 Td"]
        ops.extend(f"({_pdf_string(line)}) Tj T*" for line in text.split("\n"))
        ops.append("ET")
        stream = "\n".join(ops).encode("latin-1")
        objects.append(b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream")

    info = []
    if title:
        info.append(f"/Title ({_pdf_string(title)})")
    if author:
        info.append(f"/Author ({_pdf_string(author)})")
    objects.append(f"<< {' '.join(info)} >>".encode())

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"

    xref_offset = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R /Info {info_id} 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode()

    path.write_bytes(bytes(out))
    return path


@pytest.fixture
def epub_path(tmp_path: Path) -> Path:
    return build_epub(tmp_path / "sample.epub")


@pytest.fixture
def pdf_path(tmp_path: Path) -> Path:
    pages = [f"Page {n} opening line.\nPage {n} closing line." for n in range(1, 4)]
    return build_pdf(tmp_path / "sample.pdf", pages, title="Collected Works", author="Jane Doe")


@pytest.fixture
def mobi_path(tmp_path: Path) -> Path:
    path = tmp_path / "pocket_book.mobi"
    path.write_bytes(b"BOOKMOBI" + b"\x00" * 64)
    return path


@pytest.fixture
def pdf_factory(tmp_path: Path) -> Callable[..., Path]:
    def factory(name: str, pages: list[str], **kwargs) -> Path:
        return build_pdf(tmp_path / name, pages, **kwargs)

    return factory


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(output_dir=tmp_path / "converted")


@pytest.fixture
def sample_document() -> BookDocument:
    return BookDocument(
        metadata=BookMetadata(title="Test Book", creator="Jane Doe", language="en"),
        toc=[
            TOCEntry(id="ch1", title="Chapter One"),
            TOCEntry(id="ch2", title="Chapter Two"),
            TOCEntry(id="appendix", title="Appendix"),
        ],
        chapters=[
            Chapter(
                id="ch1",
                title="Chapter One",
                content=(
                    "<h1>Opening</h1>"
                    "<p>Some <strong>bold</strong> and <em>italic</em> text "
                    "with a <a href='https://example.com/page'>link</a>.</p>"
                    "<ul><li>first item</li><li>second item</li></ul>"
                    "<ol><li>step one</li><li>step two</li></ol>"
                    "<blockquote><p>quoted words</p></blockquote>"
                    "<p>Call <code>run()</code> now.</p>"
                    "<pre><code>print(1)</code></pre>"
                ),
            ),
            Chapter(id="ch2", title="Chapter Two", content="", error="boom"),
            Chapter(id="ch3", title="Chapter Three", content="<p>Final words.</p>"),
        ],
    )
