"""SVD register map to HTML.

Parses a CMSIS-SVD chip description, lays out every register's fields over
bits 31..0 and renders static HTML pages for visual inspection.

Getting started:
    from svdhtml import assemble, create_renderer, load_svd

    chip = load_svd(Path("STM32F401.svd"))
    site = assemble(chip)
    docs = create_renderer("pages").render(site)
"""

from svdhtml.core.assembler import Site, assemble
from svdhtml.core.exceptions import SvdHtmlError
from svdhtml.core.parser import load_svd, parse_svd

# Renderers (auto-register when imported)
from svdhtml.render import create_renderer, list_available_renderers
from svdhtml.utils.config_loader import RenderConfig, load_config

__version__ = "0.1.0"

__all__ = [
    "RenderConfig",
    "Site",
    "SvdHtmlError",
    "assemble",
    "create_renderer",
    "list_available_renderers",
    "load_config",
    "load_svd",
    "parse_svd",
]
