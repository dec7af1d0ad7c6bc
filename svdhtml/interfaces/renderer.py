"""Renderer interface for turning assembled view models into documents."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from svdhtml.core.assembler import Site


class Renderer(ABC):
    """Interface for output formats.

    Implementations must be pure: the same Site always yields the same
    documents, and nothing is written to disk here.
    """

    name: str = ""

    @abstractmethod
    def render(self, site: "Site") -> dict[str, str]:
        """Render every document for the site.

        Returns:
            Mapping of file name (relative to the output directory) to text.
        """
        ...
