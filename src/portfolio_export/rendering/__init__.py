"""Pure renderers: portfolio + asset map -> HTML, CSS, JS, README."""

from .css import generate_css
from .html import generate_html, generate_pages, render_section, resolve_image
from .js import generate_js
from .readme import generate_readme

__all__ = [
    "generate_css",
    "generate_html",
    "generate_js",
    "generate_pages",
    "generate_readme",
    "render_section",
    "resolve_image",
]
