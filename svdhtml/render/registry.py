"""Renderer registry and factory.

Renderer implementations call register_renderer() when their module is
imported; the CLI looks them up by the name given in the config or on the
command line.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Type

from svdhtml.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from svdhtml.interfaces.renderer import Renderer


class RendererRegistry:
    """Registry of available renderer implementations.

    THREAD SAFETY: Not thread-safe. All registration happens at import time.
    """

    def __init__(self):
        self._renderers: dict[str, Type[Renderer]] = {}

    def register(self, name: str, renderer_class: Type[Renderer]) -> None:
        """Register a renderer implementation."""
        if name in self._renderers:
            raise ValueError(f"Renderer '{name}' already registered")
        self._renderers[name] = renderer_class

    def get(self, name: str) -> Type[Renderer]:
        """Get a renderer class by name."""
        if name not in self._renderers:
            raise ConfigurationError(
                "renderer",
                f"unknown renderer '{name}'. Available: {self.list_renderers()}",
            )
        return self._renderers[name]

    def list_renderers(self) -> list[str]:
        """List all registered renderer names."""
        return list(self._renderers.keys())

    def create(self, name: str, **kwargs) -> Any:
        """Instantiate a renderer by name."""
        renderer_class = self.get(name)
        return renderer_class(**kwargs)


# Global registry
_REGISTRY = RendererRegistry()


def register_renderer(name: str, renderer_class: Type[Renderer]) -> None:
    """Register a renderer globally."""
    _REGISTRY.register(name, renderer_class)


def get_renderer(name: str) -> Type[Renderer]:
    """Get a renderer class by name."""
    return _REGISTRY.get(name)


def create_renderer(name: str, **kwargs) -> Any:
    """Create a renderer instance by name."""
    return _REGISTRY.create(name, **kwargs)


def list_available_renderers() -> list[str]:
    """List all registered renderers."""
    return _REGISTRY.list_renderers()
