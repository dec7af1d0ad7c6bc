"""Jinja2 HTML renderers."""

from __future__ import annotations

import logging
from typing import Optional

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape

from svdhtml.core.assembler import Site
from svdhtml.core.exceptions import ConfigurationError, DocumentError
from svdhtml.interfaces.renderer import Renderer
from svdhtml.render.registry import register_renderer
from svdhtml.utils.consts import ConstUtils

logger = logging.getLogger(__name__)


def create_environment() -> Environment:
    env = Environment(
        loader=PackageLoader("svdhtml", "render/templates"),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.globals["bit_numbers"] = list(range(ConstUtils.MSB, -1, -1))
    return env


class _JinjaRenderer(Renderer):
    def __init__(self, env: Optional[Environment] = None):
        self.env = env or create_environment()


class PagesRenderer(_JinjaRenderer):
    """index.html plus one page per peripheral."""

    name = "pages"

    def render(self, site: Site) -> dict[str, str]:
        index_template = self.env.get_template("index.html")
        page_template = self.env.get_template("peripheral.html")

        docs = {
            site.index.file_name: index_template.render(
                index=site.index, config=site.config
            )
        }
        owners: dict[str, str] = {}
        for page in site.pages:
            if page.file_name == site.index.file_name:
                raise ConfigurationError(
                    "index_name",
                    f"index page {site.index.file_name} would be overwritten "
                    f"by the page for peripheral {page.name}",
                )
            if page.file_name in owners:
                raise DocumentError(
                    f"Peripherals '{owners[page.file_name]}' and '{page.name}' "
                    f"both map to output file '{page.file_name}'",
                    details={"file_name": page.file_name},
                )
            owners[page.file_name] = page.name
            docs[page.file_name] = page_template.render(
                page=page, index=site.index, config=site.config
            )
        logger.debug("Rendered %d documents", len(docs))
        return docs


class SinglePageRenderer(_JinjaRenderer):
    """One document: the peripheral list followed by every peripheral."""

    name = "single"

    def render(self, site: Site) -> dict[str, str]:
        template = self.env.get_template("single.html")
        return {
            site.index.file_name: template.render(
                index=site.index, pages=site.pages, config=site.config
            )
        }


register_renderer(PagesRenderer.name, PagesRenderer)
register_renderer(SinglePageRenderer.name, SinglePageRenderer)
