"""Resolve output paths and write converted payloads."""

import logging
import shutil
from pathlib import Path

from book2text.errors import OutputError

log = logging.getLogger(__name__)


def ensure_directory(dir_path: Path) -> Path:
    """Create a directory (and parents) if it does not exist."""
    try:
        dir_path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputError(f"Could not create output directory {dir_path}: {e}") from e
    return dir_path


def prepare_default_output_dir(output_dir: Path, clean: bool = False) -> Path:
    """Create the default output directory, emptying it when clean is set."""
    if not output_dir.exists():
        ensure_directory(output_dir)
        log.info(f"Created output directory: {output_dir}")
        return output_dir

    if clean:
        for entry in output_dir.iterdir():
            try:
                if entry.is_dir() and not entry.is_symlink():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
            except OSError as e:
                raise OutputError(f"Could not delete {entry}: {e}") from e
        log.info(f"Cleaned output directory: {output_dir}")

    return output_dir


def resolve_output_path(
    input_path: Path,
    extension: str,
    output_path: Path | None,
    default_dir: Path,
) -> Path:
    """Pick the file to write.

    An existing directory gets ``<input stem><extension>`` inside it. Any
    other explicit path is used as given, with the extension appended only
    when the path has none. Without an explicit path the file goes into
    default_dir.
    """
    file_name = f"{input_path.stem}{extension}"

    if output_path is None:
        return default_dir / file_name

    if output_path.is_dir():
        return output_path / file_name

    if output_path.suffix == "":
        return output_path.with_name(output_path.name + extension)

    return output_path


def write_output(path: Path, payload: str) -> Path:
    """Write the payload as UTF-8, creating the parent directory."""
    ensure_directory(path.parent)
    try:
        path.write_text(payload, encoding="utf-8")
    except OSError as e:
        raise OutputError(f"Could not write output file {path}: {e}") from e
    return path
