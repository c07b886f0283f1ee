"""Conversion options passed from the caller to the converters."""

from typing import Any, Callable, Literal

from pydantic import BaseModel, ConfigDict, Field

from book2text.models.book import BookDocument


class NormalizerOptions(BaseModel):
    """Tuning knobs for the HTML to Markdown normalizer."""

    heading_style: Literal["ATX", "ATX_CLOSED", "UNDERLINED"] = "ATX"
    bullets: str = "-"
    strong_em_symbol: Literal["*", "_"] = "*"
    code_language: str = ""
    # Backslash-escape text that would otherwise read as markup, e.g. "1999. was"
    escape_misc: bool = True
    strip_tags: list[str] = Field(default_factory=lambda: ["script", "style"])
    # Passed to markdownify unchanged; wins over the fields above
    extra: dict[str, Any] = Field(default_factory=dict)

    def markdownify_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "heading_style": self.heading_style,
            "bullets": self.bullets,
            "strong_em_symbol": self.strong_em_symbol,
            "code_language": self.code_language,
            "escape_misc": self.escape_misc,
        }
        kwargs.update(self.extra)
        return kwargs


class ConversionOptions(BaseModel):
    """Options controlling how a document is rendered."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    include_metadata: bool = True
    include_toc: bool = True
    heading_level: int = Field(default=1, ge=1, le=6)
    custom_css: str = ""
    # JSON only
    pretty: bool = True
    filter: Callable[[BookDocument], BookDocument] | None = None
    normalizer: NormalizerOptions = Field(default_factory=NormalizerOptions)
