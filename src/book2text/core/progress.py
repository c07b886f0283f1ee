"""Progress reporting hook used by the processors."""

from typing import Callable

# (percent 0..100, message)
ProgressCallback = Callable[[float, str], None]


def null_progress(percent: float, message: str = "") -> None:
    """Discard progress updates."""
