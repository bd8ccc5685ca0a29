"""Stylesheet generation."""

import re
from string import Template

from ..models import Theme
from .loader import load_static

DEFAULT_PRIMARY_COLOR = "#7c3aed"

# Anything that could close the declaration or the rule block
_UNSAFE_CSS_VALUE = re.compile(r"[;{}<>\\\n\r]")


def _safe_color(value: str) -> str:
    color = _UNSAFE_CSS_VALUE.sub("", value).strip()
    return color or DEFAULT_PRIMARY_COLOR


def generate_css(theme: Theme) -> str:
    """Render the shared stylesheet.

    The theme's primary color is the only variable part; the output does not
    depend on locale or content.
    """
    template = Template(load_static("style.css"))
    return template.substitute(primary_color=_safe_color(theme.primary_color))
