"""PDF processing with an ordered chain of text-extraction backends."""

import html
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from book2text.core.progress import ProgressCallback, null_progress
from book2text.errors import ProcessingError
from book2text.models.book import BookDocument, BookMetadata, Chapter, TOCEntry

# Suppress warnings about malformed PDF object references from PDF libraries
logging.getLogger("pdfminer").setLevel(logging.ERROR)
logging.getLogger("pypdf").setLevel(logging.ERROR)

log = logging.getLogger(__name__)

MAX_CHAPTERS = 10

_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")


# =============================================================================
# Backends
# =============================================================================


@dataclass
class PdfText:
    """Raw text pulled out of a PDF by one backend."""

    pages: list[str]
    # Normalized keys: title, author, producer
    info: dict[str, str] = field(default_factory=dict)


class PdfBackend(ABC):
    """A library able to pull per-page text out of a PDF."""

    name: str = ""
    description: str = ""

    @abstractmethod
    def extract(self, path: Path, progress: ProgressCallback) -> PdfText:
        """Return page texts and document info, or raise if unusable."""


class PypdfBackend(PdfBackend):
    """Direct text extraction from the content streams."""

    name = "pypdf"
    description = "direct text extraction"

    def extract(self, path: Path, progress: ProgressCallback) -> PdfText:
        import pypdf
        from pypdf.errors import EmptyFileError, FileNotDecryptedError, PdfReadError

        try:
            reader = pypdf.PdfReader(str(path))
        except FileNotDecryptedError:
            raise ValueError("PDF is encrypted. Please decrypt first.")
        except EmptyFileError:
            raise ValueError("PDF file is empty.")
        except PdfReadError as e:
            raise ValueError(f"PDF appears corrupted: {e}")

        if reader.is_encrypted:
            raise ValueError("PDF is encrypted. Please decrypt first.")

        raw_info = reader.metadata or {}
        info = {
            "title": _clean(raw_info.get("/Title")),
            "author": _clean(raw_info.get("/Author")),
            "producer": _clean(raw_info.get("/Producer")),
        }

        total = len(reader.pages)
        pages = []
        for page_num, page in enumerate(reader.pages, start=1):
            pages.append(_safe_page_text(page.extract_text, page_num))
            _report_page(progress, page_num, total)

        return PdfText(pages=pages, info={k: v for k, v in info.items() if v})


class PdfplumberBackend(PdfBackend):
    """Layout-based extraction from rendered page characters."""

    name = "pdfplumber"
    description = "page layout text extraction"

    def extract(self, path: Path, progress: ProgressCallback) -> PdfText:
        import pdfplumber

        with pdfplumber.open(str(path)) as pdf:
            raw_info = pdf.metadata or {}
            info = {
                "title": _clean(raw_info.get("Title")),
                "author": _clean(raw_info.get("Author")),
                "producer": _clean(raw_info.get("Producer")),
            }

            total = len(pdf.pages)
            pages = []
            for page_num, page in enumerate(pdf.pages, start=1):
                pages.append(_safe_page_text(page.extract_text, page_num))
                _report_page(progress, page_num, total)

        return PdfText(pages=pages, info={k: v for k, v in info.items() if v})


# Backends in priority order
PDF_BACKENDS: list[PdfBackend] = [
    PypdfBackend(),
    PdfplumberBackend(),
]


def extract_text(
    path: Path,
    backends: list[PdfBackend] | None = None,
    progress: ProgressCallback | None = None,
) -> tuple[PdfText, PdfBackend]:
    """Try each backend in order and return the first successful result.

    Raises:
        ProcessingError: If every backend fails
    """
    progress = progress or null_progress
    errors: list[str] = []

    for backend in backends if backends is not None else PDF_BACKENDS:
        log.info(f"Trying PDF backend: {backend.name} ({backend.description})")
        try:
            result = backend.extract(path, progress)
        except Exception as e:
            log.warning(f"Backend {backend.name} failed with error: {e}")
            errors.append(f"{backend.name}: {e}")
            continue

        log.info(f"  Backend {backend.name}: SUCCESS - {len(result.pages)} pages")
        return result, backend

    detail = "; ".join(errors) or "no backends configured"
    raise ProcessingError(f"PDF processing error: {detail}")


def _safe_page_text(extract, page_num: int) -> str:
    """Run a page extractor; a failing page contributes no text."""
    try:
        return extract() or ""
    except Exception as e:
        log.warning(f"Could not extract text from page {page_num}: {e}")
        return ""


def _report_page(progress: ProgressCallback, page_num: int, total: int) -> None:
    progress(30 + (60 * page_num) // total, f"Processing page {page_num}/{total}...")


def _clean(value) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


# =============================================================================
# Chaptering
# =============================================================================


def chunk_pages(num_pages: int, max_chapters: int = MAX_CHAPTERS) -> list[tuple[int, int]]:
    """Split pages into at most max_chapters groups.

    Each group holds max(1, num_pages // max_chapters) pages and the last
    group absorbs the remainder. Returns (start, end) pairs, end exclusive.
    """
    if num_pages <= 0:
        return []

    chunk_size = max(1, num_pages // max_chapters)
    num_chunks = min(max_chapters, num_pages // chunk_size)

    ranges = []
    for i in range(num_chunks):
        start = i * chunk_size
        end = num_pages if i == num_chunks - 1 else start + chunk_size
        ranges.append((start, end))
    return ranges


def pages_to_html(pages: list[str], first_page: int) -> str:
    """Render page texts as escaped HTML, one div per page."""
    parts = []
    for offset, text in enumerate(pages):
        paragraphs = [
            " ".join(line.strip() for line in block.splitlines() if line.strip())
            for block in _PARAGRAPH_SPLIT_RE.split(text)
        ]
        body = "".join(f"<p>{html.escape(p)}</p>" for p in paragraphs if p)
        if body:
            page_num = first_page + offset + 1
            parts.append(f'<div class="page" id="page{page_num}">{body}</div>')
    return "\n".join(parts)


def build_chapters(pages: list[str]) -> list[Chapter]:
    """Group page texts into chapters using the page-count heuristic."""
    chapters = []
    for number, (start, end) in enumerate(chunk_pages(len(pages)), start=1):
        chapters.append(
            Chapter(
                id=f"chapter{number}",
                title=f"Chapter {number} (Pages {start + 1}-{end})",
                content=pages_to_html(pages[start:end], start),
            )
        )
    return chapters


# =============================================================================
# Processor
# =============================================================================


class PdfProcessor:
    """Turn a PDF into a BookDocument."""

    def __init__(
        self,
        pdf_path: Path,
        progress: ProgressCallback | None = None,
        backends: list[PdfBackend] | None = None,
    ):
        self.path = pdf_path
        self.progress = progress or null_progress
        self.backends = backends if backends is not None else PDF_BACKENDS

    def process(self) -> BookDocument:
        self.progress(10, "Loading PDF file...")
        pdf_text, backend = extract_text(self.path, self.backends, self.progress)

        warnings_list: list[str] = []
        if backend is not self.backends[0]:
            warnings_list.append(
                f"PDF text was extracted with the fallback backend ({backend.name}). "
                "Text fidelity may be reduced."
            )

        sample = " ".join(pdf_text.pages[:5])
        if pdf_text.pages and len(sample.strip()) < 100:
            log.warning(
                "PDF appears to have limited text content. May be scanned or image-based."
            )
            warnings_list.append(
                "Limited text detected. PDF may be scanned/image-based."
            )

        chapters = build_chapters(pdf_text.pages)
        toc = [TOCEntry(id=c.id, title=c.title) for c in chapters]

        self.progress(100, "Completed processing PDF.")
        return BookDocument(
            metadata=self._get_metadata(pdf_text.info),
            toc=toc,
            chapters=chapters,
            warning=" ".join(warnings_list) or None,
        )

    def _get_metadata(self, info: dict[str, str]) -> BookMetadata:
        """Metadata from the info dictionary, else from the file name."""
        stem = self.path.stem
        return BookMetadata(
            title=info.get("title") or stem,
            creator=info.get("author") or "Unknown",
            publisher=info.get("producer") or "Unknown",
            # Not standard in PDF metadata
            language="en",
            identifier=f"pdf:{stem}",
        )


def process_pdf(path: Path, progress: ProgressCallback | None = None) -> BookDocument:
    """Process a PDF file into a BookDocument."""
    return PdfProcessor(Path(path), progress).process()
