"""
Rendering Context

Bundles what region generators read during one render pass: the grid, the
renderer's wrappers and element factory, and the renderer settings.
"""

from typing import Any, Optional

from .config import RendererSettings
from .elements import ElementFactory, ElementNode
from .grid import DataGrid
from .wrappers import WrapperRegistry


class RenderContext:
    """
    Per-render view over a grid and the renderer configuration.

    Created for every render call and discarded afterwards; it holds no
    state of its own beyond the references it was given.
    """

    def __init__(self,
                 grid: DataGrid,
                 wrappers: WrapperRegistry,
                 factory: ElementFactory,
                 settings: RendererSettings):
        """
        Initialize the rendering context.

        Args:
            grid: Grid being rendered
            wrappers: Wrapper registry of the renderer (read-only here)
            factory: Element factory
            settings: Renderer settings (formats, ajax class)
        """
        self.grid = grid
        self.wrappers = wrappers
        self.factory = factory
        self.settings = settings

    def wrapper(self, path: str) -> ElementNode:
        """Instantiate a fresh node from the wrapper at ``path``."""
        return self.factory.instantiate(self.wrappers.resolve(path))

    def value(self, path: str) -> Any:
        """Return the raw wrapper value at ``path`` (class names, flags)."""
        return self.wrappers.resolve(path)

    def translate(self, text: str) -> str:
        translator = self.grid.get_translator()
        return text if translator is None else translator.translate(text)

    def link(self, href: str, css_class: Optional[str] = None) -> ElementNode:
        """Build an ajax-enabled link element."""
        return ElementNode("a", {"href": href}).add_class(self.settings.ajax_class, css_class)
