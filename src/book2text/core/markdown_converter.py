"""Render a BookDocument as Markdown."""

from book2text.core.html_normalizer import HtmlNormalizer
from book2text.models.book import BookDocument, Chapter
from book2text.models.options import ConversionOptions

NO_CONTENT = "(No content available)"


def heading(level: int, base_level: int = 1) -> str:
    """Heading marker for logical level, shifted by base_level, clamped to 1..6."""
    return "#" * min(6, max(1, base_level + level - 1))


class MarkdownConverter:
    """Build Markdown from a document as an ordered list of segments."""

    def __init__(self, options: ConversionOptions | None = None):
        self.options = options or ConversionOptions()
        self.normalizer = HtmlNormalizer(self.options.normalizer)

    def convert(self, document: BookDocument) -> str:
        segments = [self._title(document)]

        if self.options.custom_css:
            segments.append(f"<style>\n{self.options.custom_css}\n</style>")

        if self.options.include_metadata:
            segments.append(self._metadata(document))

        if self.options.include_toc and document.toc:
            segments.append(self._toc(document))

        segments.extend(self._chapter(chapter) for chapter in document.chapters)

        return "\n\n".join(segments) + "\n"

    def _h(self, level: int) -> str:
        return heading(level, self.options.heading_level)

    def _title(self, document: BookDocument) -> str:
        return f"{self._h(1)} {document.metadata.title or 'Untitled Book'}"

    def _metadata(self, document: BookDocument) -> str:
        lines = [f"{self._h(2)} Metadata", ""]
        lines.extend(
            f"- **{key}**: {value}" for key, value in document.metadata.items() if value
        )
        return "\n".join(lines).rstrip()

    def _toc(self, document: BookDocument) -> str:
        lines = [f"{self._h(2)} Table of Contents", ""]
        lines.extend(
            f"{index}. [{entry.title}](#{entry.id})"
            for index, entry in enumerate(document.toc, start=1)
        )
        return "\n".join(lines)

    def _chapter(self, chapter: Chapter) -> str:
        parts = [f"{self._h(2)} {chapter.title}"]
        if chapter.error:
            parts.append(f"> Extraction error: {chapter.error}")

        body = self.normalizer.normalize(chapter.content) if chapter.content else ""
        parts.append(body or NO_CONTENT)
        return "\n\n".join(parts)


def convert_to_markdown(
    document: BookDocument, options: ConversionOptions | None = None
) -> str:
    """Render the document as Markdown."""
    return MarkdownConverter(options).convert(document)
