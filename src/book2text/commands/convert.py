"""Convert command implementation."""

import logging
from pathlib import Path

from book2text.config import Settings
from book2text.core.formats import InputFormat, OutputFormat, get_processor, run_converter
from book2text.core.output_writer import (
    prepare_default_output_dir,
    resolve_output_path,
    write_output,
)
from book2text.core.progress import ProgressCallback
from book2text.errors import Book2TextError, InputNotFoundError
from book2text.models.options import ConversionOptions
from book2text.models.result import ConversionResult

log = logging.getLogger(__name__)


def convert_ebook(
    input_path: str | Path,
    output_format: str = "markdown",
    output_path: str | Path | None = None,
    options: ConversionOptions | None = None,
    *,
    clean_output: bool = False,
    progress: ProgressCallback | None = None,
    settings: Settings | None = None,
) -> ConversionResult:
    """Convert one e-book file and write the result.

    Never raises: every failure is reported through the returned
    ConversionResult with success=False and a readable error message.
    """
    input_file = str(input_path)
    try:
        output_file, warning = _run(
            Path(input_path),
            output_format,
            Path(output_path) if output_path is not None else None,
            options or ConversionOptions(),
            clean_output,
            progress,
            settings or Settings.from_env(),
        )
    except Book2TextError as e:
        log.error(f"Conversion failed: {e}")
        return ConversionResult.failed(str(e), input_file=input_file)
    except Exception as e:
        log.exception(f"Unexpected error converting {input_file}")
        return ConversionResult.failed(str(e) or e.__class__.__name__, input_file=input_file)

    return ConversionResult.ok(
        input_file=input_file,
        output_file=str(output_file),
        output_format=output_format,
        warning=warning,
    )


def _run(
    input_path: Path,
    output_format: str,
    output_path: Path | None,
    options: ConversionOptions,
    clean_output: bool,
    progress: ProgressCallback | None,
    settings: Settings,
) -> tuple[Path, str | None]:
    if not input_path.is_file():
        raise InputNotFoundError(input_path)

    input_fmt = InputFormat.from_path(input_path)
    output_fmt = OutputFormat.parse(output_format)

    if input_fmt is InputFormat.MOBI:
        log.warning("MOBI support is limited. For best results, convert to EPUB first.")

    process = get_processor(input_fmt, settings)
    log.info(f"Processing {input_path.name}...")
    document = process(input_path, progress)

    log.info(f"Converting to {output_fmt.value}...")
    payload = run_converter(output_fmt, document, options)

    if output_path is None:
        default_dir = prepare_default_output_dir(settings.output_dir, clean_output)
    else:
        default_dir = settings.output_dir
    target = resolve_output_path(input_path, output_fmt.extension, output_path, default_dir)

    write_output(target, payload)
    log.info(f"Wrote {target}")
    return target, document.warning
