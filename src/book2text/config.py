"""Runtime settings for output placement and chapter extraction."""

import os
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel, Field

DEFAULT_OUTPUT_DIR = "converted"


class Settings(BaseModel):
    """Settings not tied to a single conversion."""

    output_dir: Path = Field(default_factory=lambda: Path.cwd() / DEFAULT_OUTPUT_DIR)
    # None lets ThreadPoolExecutor pick its default
    max_workers: int | None = Field(default=None, ge=1)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        values: dict[str, object] = {}

        output_dir = source.get("BOOK2TEXT_OUTPUT_DIR", "").strip()
        if output_dir:
            values["output_dir"] = Path(output_dir).expanduser()

        max_workers = source.get("BOOK2TEXT_MAX_WORKERS", "").strip()
        if max_workers:
            try:
                workers = int(max_workers)
            except ValueError:
                raise ValueError(
                    f"BOOK2TEXT_MAX_WORKERS must be an integer, got {max_workers!r}"
                ) from None
            if workers < 1:
                raise ValueError("BOOK2TEXT_MAX_WORKERS must be at least 1")
            values["max_workers"] = workers

        return cls(**values)
