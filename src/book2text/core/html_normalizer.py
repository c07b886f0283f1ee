"""Normalize HTML fragments into Markdown."""

import logging
import warnings

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning
from markdownify import markdownify as md

from book2text.models.options import NormalizerOptions

# EPUB chapters are usually XHTML
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)

log = logging.getLogger(__name__)


class HtmlNormalizer:
    """Convert HTML content into Markdown text."""

    def __init__(self, options: NormalizerOptions | None = None):
        self.options = options or NormalizerOptions()

    def normalize(self, html_content: str) -> str:
        """Convert an HTML fragment to Markdown.

        Malformed markup that markdownify cannot handle degrades to the
        plain text of the fragment.
        """
        if not html_content or not html_content.strip():
            return ""

        soup = BeautifulSoup(html_content, "lxml")

        for tag in soup(self.options.strip_tags):
            tag.decompose()

        body = soup.body or soup
        try:
            markdown = md(str(body), **self.options.markdownify_kwargs())
        except Exception as e:
            log.warning(f"Markdown conversion failed, falling back to text: {e}")
            markdown = body.get_text("\n")

        return self._clean_whitespace(markdown)

    def _clean_whitespace(self, markdown: str) -> str:
        """Strip trailing spaces and collapse runs of blank lines."""
        lines = [line.rstrip() for line in markdown.split("\n")]
        cleaned = []
        prev_blank = False
        for line in lines:
            is_blank = not line.strip()
            if is_blank and prev_blank:
                continue
            cleaned.append(line)
            prev_blank = is_blank

        return "\n".join(cleaned).strip()


def html_to_markdown(html_content: str, options: NormalizerOptions | None = None) -> str:
    """Convert an HTML fragment to Markdown with the given options."""
    return HtmlNormalizer(options).normalize(html_content)
