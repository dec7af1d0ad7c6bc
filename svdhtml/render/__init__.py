"""Output formats.

Importing this package registers the built-in HTML renderers.
"""

from svdhtml.render.html import PagesRenderer, SinglePageRenderer
from svdhtml.render.registry import (
    create_renderer,
    get_renderer,
    list_available_renderers,
    register_renderer,
)

__all__ = [
    "PagesRenderer",
    "SinglePageRenderer",
    "create_renderer",
    "get_renderer",
    "list_available_renderers",
    "register_renderer",
]
