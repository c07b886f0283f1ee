"""Canonical book document shared by every processor and converter."""

from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BookMetadata(BaseModel):
    """Book-level metadata. Missing values stay None."""

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    creator: str | None = None
    publisher: str | None = None
    language: str | None = None
    identifier: str | None = None

    def items(self) -> Iterator[tuple[str, str | None]]:
        """Yield (key, value) pairs in declaration order."""
        for key in type(self).model_fields:
            yield key, getattr(self, key)


class TOCEntry(BaseModel):
    """Single entry in table of contents."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    href: str = ""
    level: int = 0


class Chapter(BaseModel):
    """Chapter content as an HTML fragment."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    content: str = ""
    # Set when this chapter alone failed to extract
    error: str | None = None


class BookDocument(BaseModel):
    """Complete processed book (unified for EPUB/MOBI/PDF)."""

    model_config = ConfigDict(frozen=True)

    metadata: BookMetadata = Field(default_factory=BookMetadata)
    toc: list[TOCEntry] = Field(default_factory=list)
    chapters: list[Chapter] = Field(default_factory=list)
    warning: str | None = None

    @model_validator(mode="after")
    def _check_unique_chapter_ids(self) -> "BookDocument":
        seen: set[str] = set()
        for chapter in self.chapters:
            if chapter.id in seen:
                raise ValueError(f"Duplicate chapter id: {chapter.id}")
            seen.add(chapter.id)
        return self
