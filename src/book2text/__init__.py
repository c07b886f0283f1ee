"""Convert EPUB, MOBI and PDF books into JSON, Markdown or plain text."""

from book2text.commands.convert import convert_ebook
from book2text.models import BookDocument, ConversionOptions, ConversionResult

__version__ = "0.1.0"

__all__ = [
    "BookDocument",
    "ConversionOptions",
    "ConversionResult",
    "convert_ebook",
]
