"""Input and output formats and the dispatch for each pipeline stage."""

from enum import Enum
from functools import partial
from pathlib import Path
from typing import Callable

from book2text.config import Settings
from book2text.core.progress import ProgressCallback
from book2text.errors import (
    ConversionError,
    UnsupportedInputFormatError,
    UnsupportedOutputFormatError,
)
from book2text.models.book import BookDocument
from book2text.models.options import ConversionOptions

Processor = Callable[[Path, ProgressCallback | None], BookDocument]
Converter = Callable[[BookDocument, ConversionOptions | None], str]


class InputFormat(str, Enum):
    """Supported e-book input formats."""

    EPUB = "epub"
    MOBI = "mobi"
    PDF = "pdf"

    @property
    def extension(self) -> str:
        return f".{self.value}"

    @classmethod
    def from_extension(cls, extension: str) -> "InputFormat":
        """Map a file extension (with dot, any case) to a format.

        Raises:
            UnsupportedInputFormatError: If no processor handles the extension
        """
        suffix = extension.lower()
        for fmt in cls:
            if fmt.extension == suffix:
                return fmt
        raise UnsupportedInputFormatError(extension)

    @classmethod
    def from_path(cls, path: Path) -> "InputFormat":
        return cls.from_extension(path.suffix)

    @classmethod
    def is_supported(cls, path: Path) -> bool:
        return any(fmt.extension == path.suffix.lower() for fmt in cls)


class OutputFormat(str, Enum):
    """Supported output formats."""

    JSON = "json"
    MARKDOWN = "markdown"
    TEXT = "text"

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]

    @classmethod
    def parse(cls, name: str) -> "OutputFormat":
        """Resolve a format name or synonym (md, txt), case-insensitively.

        Raises:
            UnsupportedOutputFormatError: If the name is unknown
        """
        key = (name or "").strip().lower()
        if key in _SYNONYMS:
            return _SYNONYMS[key]
        raise UnsupportedOutputFormatError(name)

    @classmethod
    def names(cls) -> list[str]:
        """All accepted format names, synonyms included."""
        return list(_SYNONYMS)


_EXTENSIONS = {
    OutputFormat.JSON: ".json",
    OutputFormat.MARKDOWN: ".md",
    OutputFormat.TEXT: ".txt",
}

_SYNONYMS = {
    "json": OutputFormat.JSON,
    "markdown": OutputFormat.MARKDOWN,
    "md": OutputFormat.MARKDOWN,
    "text": OutputFormat.TEXT,
    "txt": OutputFormat.TEXT,
}


def get_processor(fmt: InputFormat, settings: Settings | None = None) -> Processor:
    """Return the processor function for an input format."""
    if fmt is InputFormat.EPUB:
        from book2text.core.epub_processor import process_epub

        if settings is not None and settings.max_workers is not None:
            return partial(process_epub, max_workers=settings.max_workers)
        return process_epub
    elif fmt is InputFormat.MOBI:
        from book2text.core.mobi_processor import process_mobi

        return process_mobi
    elif fmt is InputFormat.PDF:
        from book2text.core.pdf_processor import process_pdf

        return process_pdf

    # Should never reach here, but satisfy type checker
    raise UnsupportedInputFormatError(str(fmt))


def get_converter(fmt: OutputFormat) -> Converter:
    """Return the converter function for an output format."""
    if fmt is OutputFormat.JSON:
        from book2text.core.json_converter import convert_to_json

        return convert_to_json
    elif fmt is OutputFormat.MARKDOWN:
        from book2text.core.markdown_converter import convert_to_markdown

        return convert_to_markdown
    elif fmt is OutputFormat.TEXT:
        from book2text.core.text_converter import convert_to_text

        return convert_to_text

    raise UnsupportedOutputFormatError(str(fmt))


def run_converter(
    fmt: OutputFormat,
    document: BookDocument,
    options: ConversionOptions | None = None,
) -> str:
    """Render a document, wrapping converter failures in ConversionError."""
    converter = get_converter(fmt)
    try:
        return converter(document, options)
    except ConversionError:
        raise
    except Exception as e:
        raise ConversionError(f"{fmt.value} conversion error: {e}") from e
