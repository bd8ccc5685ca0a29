"""Script bundle generation."""

from .loader import load_static


def generate_js() -> str:
    """Return the shared script bundle.

    The script embeds no document data: scroll reveal, parallax driven by
    ``data-parallax``, skill-bar fill from ``data-level``, external-link
    hardening, smooth anchor scrolling and a lazy-image fallback, all of which
    respect ``prefers-reduced-motion``.
    """
    return load_static("main.js")
