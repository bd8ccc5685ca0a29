"""Cached loader for the static files shipped with the renderer."""

from functools import lru_cache
from pathlib import Path

_STATIC_DIR = Path(__file__).parent / "static"


@lru_cache(maxsize=8)
def load_static(name: str) -> str:
    """Load a static file from the static/ directory.

    Args:
        name: File name (e.g. "style.css", "main.js").

    Returns:
        File content as a string.

    Raises:
        ValueError: If name contains path traversal.
        FileNotFoundError: If the file does not exist.
    """
    path = (_STATIC_DIR / name).resolve()
    if not path.is_relative_to(_STATIC_DIR.resolve()):
        raise ValueError(f"Invalid static file name: {name}")
    return path.read_text(encoding="utf-8")
