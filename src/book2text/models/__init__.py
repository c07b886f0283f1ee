"""Data models."""

from book2text.models.book import (
    BookDocument,
    BookMetadata,
    Chapter,
    TOCEntry,
)
from book2text.models.options import (
    ConversionOptions,
    NormalizerOptions,
)
from book2text.models.result import ConversionResult

__all__ = [
    # Book models
    "TOCEntry",
    "Chapter",
    "BookMetadata",
    "BookDocument",
    # Option models
    "ConversionOptions",
    "NormalizerOptions",
    # Result models
    "ConversionResult",
]
