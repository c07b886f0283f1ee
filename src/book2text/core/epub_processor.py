"""EPUB processing using ebooklib."""

import logging
import warnings
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

import ebooklib
from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning
from ebooklib import epub

from book2text.core.progress import ProgressCallback, null_progress
from book2text.errors import ProcessingError
from book2text.models.book import BookDocument, BookMetadata, Chapter, TOCEntry

# Suppress XML parsing warnings - EPUB files often use XHTML
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)

log = logging.getLogger(__name__)

METADATA_FIELDS = ("title", "creator", "publisher", "language", "identifier")


class EpubProcessor:
    """Turn an EPUB archive into a BookDocument."""

    def __init__(
        self,
        epub_path: Path,
        progress: ProgressCallback | None = None,
        max_workers: int | None = None,
    ):
        self.path = epub_path
        self.progress = progress or null_progress
        self.max_workers = max_workers
        try:
            self.book = epub.read_epub(str(epub_path))
        except Exception as e:
            raise ProcessingError(f"EPUB processing error: {e}") from e

    def process(self) -> BookDocument:
        """Read metadata, TOC and every chapter in reading order."""
        self.progress(10, "Reading metadata...")
        metadata = self._get_metadata()

        self.progress(20, "Processing chapters...")
        toc = self._get_toc()
        chapters = self._get_chapters(toc)

        self.progress(100, "Completed processing ePub.")
        return BookDocument(metadata=metadata, toc=toc, chapters=chapters)

    def _get_metadata(self) -> BookMetadata:
        """Extract Dublin Core metadata, first value of each field."""
        values = {}
        for name in METADATA_FIELDS:
            entries = self.book.get_metadata("DC", name)
            values[name] = _first_non_empty(entries)
        return BookMetadata(**values)

    def _get_toc(self) -> list[TOCEntry]:
        """Flatten the navigation tree, keeping its order."""
        entries: list[TOCEntry] = []
        self._flatten_toc(self.book.toc, entries, level=0)
        return entries

    def _flatten_toc(self, toc_items, entries: list[TOCEntry], level: int) -> None:
        for item in toc_items:
            if isinstance(item, tuple):
                # Section with children: (Section, [children])
                section, children = item
                if section.title:
                    entries.append(self._toc_entry(section, level))
                self._flatten_toc(children, entries, level + 1)
            else:
                entries.append(self._toc_entry(item, level))

    def _toc_entry(self, node, level: int) -> TOCEntry:
        href = getattr(node, "href", None) or getattr(node, "file_name", "") or ""
        title = getattr(node, "title", None) or "Untitled"
        target = self.book.get_item_with_href(href.split("#")[0]) if href else None
        if target is not None:
            entry_id = target.get_id()
        else:
            entry_id = getattr(node, "uid", None) or href
        return TOCEntry(id=entry_id or "", title=title, href=href, level=level)

    def _get_spine_items(self) -> list:
        """Document items listed in the spine, in reading order."""
        items = []
        for spine_entry in self.book.spine:
            item_id = spine_entry[0] if isinstance(spine_entry, tuple) else spine_entry
            if not item_id:
                continue
            item = self.book.get_item_with_id(item_id)
            if item is None or item.get_type() != ebooklib.ITEM_DOCUMENT:
                continue
            if isinstance(item, epub.EpubHtml) and not item.is_chapter():
                # Navigation and cover pages
                continue
            items.append(item)
        return items

    def _get_chapters(self, toc: list[TOCEntry]) -> list[Chapter]:
        """Extract every spine item concurrently, ordered by spine index."""
        items = self._get_spine_items()
        if not items:
            return []

        toc_titles = _build_toc_title_map(toc)
        results: list[Chapter | None] = [None] * len(items)
        total = len(items)
        done = 0

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_index = {
                executor.submit(self._load_chapter, index, item, toc_titles): index
                for index, item in enumerate(items)
            }
            for future in as_completed(future_to_index):
                index = future_to_index[future]
                results[index] = future.result()
                done += 1
                self.progress(
                    20 + (70 * done) // total,
                    f"Processing chapter {done}/{total}...",
                )

        return [chapter for chapter in results if chapter is not None]

    def _load_chapter(self, index: int, item, toc_titles: dict[str, str]) -> Chapter:
        """Extract one chapter; failures are recorded on the chapter."""
        chapter_id = item.get_id()
        try:
            content, heading = self._extract_content(item)
        except Exception as e:
            log.warning(f"Failed to extract chapter {chapter_id}: {e}")
            return Chapter(
                id=chapter_id,
                title=f"Chapter {index + 1}",
                content="",
                error=str(e) or e.__class__.__name__,
            )

        title = toc_titles.get(chapter_id) or heading or f"Chapter {index + 1}"
        return Chapter(id=chapter_id, title=title, content=content)

    def _extract_content(self, item) -> tuple[str, str | None]:
        """Return the body HTML of a document item and its first heading."""
        soup = BeautifulSoup(item.get_content(), "lxml")
        body = soup.body or soup

        heading = None
        for tag in ["h1", "h2"]:
            element = body.find(tag)
            if element:
                text = element.get_text(" ", strip=True)
                if text:
                    heading = text
                    break

        return body.decode_contents().strip(), heading


def _first_non_empty(values: list[tuple[str, dict]] | None) -> str | None:
    if not values:
        return None
    for value, _attrs in values:
        if value and str(value).strip():
            return str(value).strip()
    return None


def _build_toc_title_map(toc: list[TOCEntry]) -> dict[str, str]:
    """Map item ids to the first TOC title pointing at them."""
    title_map: dict[str, str] = {}
    for entry in toc:
        if entry.id and entry.title and entry.id not in title_map:
            title_map[entry.id] = entry.title
    return title_map


def process_epub(
    path: Path,
    progress: ProgressCallback | None = None,
    max_workers: int | None = None,
) -> BookDocument:
    """Process an EPUB file into a BookDocument."""
    return EpubProcessor(Path(path), progress, max_workers=max_workers).process()
