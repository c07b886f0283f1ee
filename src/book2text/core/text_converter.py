"""Render a BookDocument as plain text."""

import re

from book2text.core.html_normalizer import HtmlNormalizer
from book2text.models.book import BookDocument
from book2text.models.options import ConversionOptions

# Applied in order. Bold must go before italic so "**x**" is not read as
# two single-asterisk spans; images before links so "!" is not left behind.
# Emphasis may wrap onto the next line but never across a blank line.
_SPAN = r"(?!\s)((?:.|\n(?!\n))+?)(?<![\s\\])"
# One level of nested parentheses, as in ".../wiki/Foo_(bar)"
_TARGET = r"\((?:[^()\n]|\([^()\n]*\))*\)"

MARKDOWN_STRIP_PATTERNS: list[tuple[str, re.Pattern, str]] = [
    ("code fences", re.compile(r"^[ \t]*(```|~~~).*$", re.MULTILINE), ""),
    ("headings", re.compile(r"^[ \t]*#{1,6}[ \t]+", re.MULTILINE), ""),
    ("bold", re.compile(r"(?<!\\)\*\*" + _SPAN + r"\*\*"), r"\1"),
    ("bold underscore", re.compile(r"(?<![\\\w])__" + _SPAN + r"__(?!\w)"), r"\1"),
    ("italic", re.compile(r"(?<!\\)\*" + _SPAN + r"\*"), r"\1"),
    ("italic underscore", re.compile(r"(?<![\\\w])_" + _SPAN + r"_(?!\w)"), r"\1"),
    ("images", re.compile(r"!\[(.*?)(?<!\\)\]" + _TARGET), r"\1"),
    ("links", re.compile(r"(?<!\\)\[(.*?)(?<!\\)\]" + _TARGET), r"\1"),
    ("autolinks", re.compile(r"<((?:https?|mailto):[^>\s]+)>"), r"\1"),
    ("code spans", re.compile(r"`{1,3}(.*?)`{1,3}"), r"\1"),
    ("blockquotes", re.compile(r"^[ \t]*>[ \t]?", re.MULTILINE), ""),
    ("bullets", re.compile(r"^[ \t]*[-*+][ \t]+", re.MULTILINE), ""),
    ("ordered lists", re.compile(r"^[ \t]*\d+\.[ \t]+", re.MULTILINE), ""),
    ("escapes", re.compile(r"\\([\\`*_{}\[\]()#+\-.!<>|&~=])"), r"\1"),
    ("blank lines", re.compile(r"\n{3,}"), "\n\n"),
]


def strip_markdown(markdown: str) -> str:
    """Remove lightweight markup left by the HTML normalizer."""
    text = markdown
    for _name, pattern, replacement in MARKDOWN_STRIP_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class TextConverter:
    """Build plain text from a document: HTML to Markdown, then stripped."""

    def __init__(self, options: ConversionOptions | None = None):
        self.options = options or ConversionOptions()
        self.normalizer = HtmlNormalizer(self.options.normalizer)

    def convert(self, document: BookDocument) -> str:
        segments = []

        if document.metadata.title:
            segments.append(document.metadata.title)

        if self.options.include_metadata:
            lines = ["METADATA", "---------"]
            lines.extend(
                f"{key}: {value}" for key, value in document.metadata.items() if value
            )
            segments.append("\n".join(lines))

        for chapter in document.chapters:
            if not chapter.content:
                continue
            text = strip_markdown(self.normalizer.normalize(chapter.content)).strip()
            if text:
                segments.append(text)

        return "\n\n".join(segments).strip()


def convert_to_text(document: BookDocument, options: ConversionOptions | None = None) -> str:
    """Render the document as plain text."""
    return TextConverter(options).convert(document)
