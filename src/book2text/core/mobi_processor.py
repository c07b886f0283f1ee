"""MOBI processing (placeholder output, no binary parsing)."""

import html
import logging
from pathlib import Path

from book2text.core.progress import ProgressCallback, null_progress
from book2text.errors import ProcessingError
from book2text.models.book import BookDocument, BookMetadata, Chapter, TOCEntry

log = logging.getLogger(__name__)

MOBI_WARNING = (
    "MOBI format has limited support. For better results, convert to EPUB first."
)

PLACEHOLDER_TITLE = "Limited MOBI Support"

PLACEHOLDER_TEMPLATE = """
<h1>Limited MOBI Support</h1>
<p>This tool has limited support for direct MOBI parsing.</p>
<p>For better results, consider:</p>
<ul>
  <li>Converting your MOBI file to EPUB first using Calibre or similar tools</li>
  <li>Using the EPUB version with this tool</li>
</ul>
<p>Filename: {file_name}</p>
"""


def process_mobi(path: Path, progress: ProgressCallback | None = None) -> BookDocument:
    """Build a single-chapter placeholder document for a MOBI file.

    Metadata comes from the file name only. The file is read to make sure it
    is accessible; its content is not parsed.

    Raises:
        ProcessingError: If the file cannot be read
    """
    path = Path(path)
    progress = progress or null_progress

    progress(10, "Reading MOBI file...")
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ProcessingError(
            f"MOBI processing error: {e} (Note: MOBI support is limited)"
        ) from e
    log.info(f"Read {len(data)} bytes from {path.name}; MOBI content is not parsed")

    file_name = path.stem
    metadata = BookMetadata(
        title=file_name,
        creator="Unknown",
        publisher="Unknown",
        language="en",
        identifier=f"mobi:{path.name}",
    )

    progress(50, "Creating placeholder content...")
    chapter = Chapter(
        id="chapter1",
        title=PLACEHOLDER_TITLE,
        content=PLACEHOLDER_TEMPLATE.format(file_name=html.escape(file_name)).strip(),
    )

    progress(100, "Completed processing MOBI file (limited support).")
    return BookDocument(
        metadata=metadata,
        toc=[TOCEntry(id=chapter.id, title=chapter.title)],
        chapters=[chapter],
        warning=MOBI_WARNING,
    )
