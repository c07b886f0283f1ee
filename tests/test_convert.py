from __future__ import annotations

import json
from pathlib import Path

import pytest

from book2text import ConversionOptions, convert_ebook
from book2text.config import Settings
from book2text.core.mobi_processor import MOBI_WARNING

FORMATS = [
    ("json", ".json"),
    ("markdown", ".md"),
    ("md", ".md"),
    ("text", ".txt"),
    ("txt", ".txt"),
]


@pytest.mark.parametrize("fixture_name", ["epub_path", "mobi_path", "pdf_path"])
@pytest.mark.parametrize(("output_format", "extension"), FORMATS)
def test_every_input_output_pair_converts(
    request: pytest.FixtureRequest,
    tmp_path: Path,
    settings: Settings,
    fixture_name: str,
    output_format: str,
    extension: str,
) -> None:
    input_path: Path = request.getfixturevalue(fixture_name)
    out_dir = tmp_path / "out"
    out_dir.mkdir()

    result = convert_ebook(input_path, output_format, out_dir, settings=settings)

    assert result.success, result.error
    assert result.output_format == output_format
    output_file = Path(result.output_file)
    assert output_file == out_dir / f"{input_path.stem}{extension}"
    assert output_file.read_text(encoding="utf-8").strip()


def test_missing_input_reports_not_found(tmp_path: Path, settings: Settings) -> None:
    result = convert_ebook(tmp_path / "ghost.epub", "markdown", settings=settings)

    assert not result.success
    assert "not found" in result.error
    assert result.output_file is None


def test_unsupported_input_extension(tmp_path: Path, settings: Settings) -> None:
    path = tmp_path / "notes.docx"
    path.write_text("hello")

    result = convert_ebook(path, "markdown", settings=settings)

    assert not result.success
    assert "Unsupported" in result.error


def test_unsupported_output_format(epub_path: Path, settings: Settings) -> None:
    result = convert_ebook(epub_path, "pdf", settings=settings)

    assert not result.success
    assert "Unsupported" in result.error
    assert not settings.output_dir.exists()


def test_processor_failure_becomes_result(tmp_path: Path, settings: Settings) -> None:
    path = tmp_path / "broken.epub"
    path.write_bytes(b"garbage")

    result = convert_ebook(path, "json", settings=settings)

    assert not result.success
    assert "EPUB processing error" in result.error


def test_unexpected_converter_failure_becomes_result(epub_path: Path, settings: Settings) -> None:
    def explode(document):
        raise RuntimeError("filter blew up")

    result = convert_ebook(epub_path, "json", options=ConversionOptions(filter=explode), settings=settings)

    assert not result.success
    assert "filter blew up" in result.error


def test_default_output_directory(epub_path: Path, settings: Settings) -> None:
    result = convert_ebook(epub_path, "md", settings=settings)

    assert result.success
    assert Path(result.output_file) == settings.output_dir / "sample.md"


def test_clean_output_empties_default_directory(epub_path: Path, settings: Settings) -> None:
    settings.output_dir.mkdir(parents=True)
    stale = settings.output_dir / "old.md"
    stale.write_text("stale")

    result = convert_ebook(epub_path, "md", clean_output=True, settings=settings)

    assert result.success
    assert not stale.exists()
    assert sorted(p.name for p in settings.output_dir.iterdir()) == ["sample.md"]


def test_output_path_without_extension_gets_one(epub_path: Path, tmp_path: Path, settings: Settings) -> None:
    result = convert_ebook(epub_path, "json", tmp_path / "exports" / "book", settings=settings)

    assert result.success
    output_file = Path(result.output_file)
    assert output_file == tmp_path / "exports" / "book.json"
    assert json.loads(output_file.read_text(encoding="utf-8"))["metadata"]["title"] == "Epub Sample"


def test_explicit_file_path_is_kept(epub_path: Path, tmp_path: Path, settings: Settings) -> None:
    result = convert_ebook(epub_path, "markdown", tmp_path / "notes.markdown", settings=settings)

    assert result.success
    assert Path(result.output_file) == tmp_path / "notes.markdown"


def test_options_flow_through_to_markdown(epub_path: Path, tmp_path: Path, settings: Settings) -> None:
    options = ConversionOptions(include_metadata=False, include_toc=False, heading_level=2)

    result = convert_ebook(epub_path, "markdown", tmp_path / "book.md", options, settings=settings)

    markdown = Path(result.output_file).read_text(encoding="utf-8")
    assert markdown.startswith("## Epub Sample")
    assert "Metadata" not in markdown
    assert "Table of Contents" not in markdown
    assert "First paragraph with **bold** text." in markdown


def test_mobi_warning_is_reported(mobi_path: Path, settings: Settings) -> None:
    result = convert_ebook(mobi_path, "text", settings=settings)

    assert result.success
    assert result.warning == MOBI_WARNING


def test_progress_sink_sees_updates(epub_path: Path, settings: Settings) -> None:
    updates: list[float] = []

    result = convert_ebook(
        epub_path, "json", progress=lambda percent, message: updates.append(percent), settings=settings
    )

    assert result.success
    assert updates
    assert updates[-1] == 100


def test_settings_read_from_environment(
    epub_path: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("BOOK2TEXT_OUTPUT_DIR", str(tmp_path / "env_out"))

    result = convert_ebook(epub_path, "txt")

    assert result.success
    assert Path(result.output_file) == tmp_path / "env_out" / "sample.txt"
