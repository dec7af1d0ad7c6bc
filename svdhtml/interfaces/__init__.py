"""Abstract interfaces shared by the output formats."""

from svdhtml.interfaces.renderer import Renderer

__all__ = ["Renderer"]
