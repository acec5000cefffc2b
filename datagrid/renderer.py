"""
Data Grid Renderer

Public entry point: converts a data grid into markup, either as a whole
body or region by region.
"""

import logging
from enum import Enum
from typing import Callable, Dict, Optional, Union

from .config import RendererSettings
from .context import RenderContext
from .elements import ElementFactory, ElementNode
from .errors import PreconditionError
from .grid import DataGrid
from .regions import (
    generate_content_row,
    generate_errors,
    generate_filter_row,
    generate_footer_row,
    generate_header_row,
    generate_info,
    generate_operations,
    generate_paginator,
    serialize,
)
from .wrappers import WrapperRegistry

logger = logging.getLogger(__name__)


class RenderMode(Enum):
    """Regions that can be rendered on their own."""
    BEGIN = "begin"
    END = "end"
    ERRORS = "errors"
    BODY = "body"
    PAGINATOR = "paginator"
    OPERATIONS = "operations"
    INFO = "info"


class DataGridRenderer:
    """
    Converts a data grid into markup.

    Each renderer owns its wrapper registry and settings; override wrappers
    before rendering, never during a render pass.
    """

    def __init__(self,
                 wrappers: Optional[WrapperRegistry] = None,
                 settings: Optional[RendererSettings] = None,
                 factory: Optional[ElementFactory] = None):
        """
        Initialize the renderer.

        Args:
            wrappers: Wrapper registry; a fresh copy of the defaults if None
            settings: Renderer settings; loaded from the environment if None
            factory: Element factory used to instantiate wrappers
        """
        self.wrappers = wrappers if wrappers is not None else WrapperRegistry()
        self.settings = settings if settings is not None else RendererSettings()
        self.factory = factory or ElementFactory()
        self._modes: Dict[RenderMode, Callable[[DataGrid], str]] = {
            RenderMode.BEGIN: self.render_begin,
            RenderMode.END: self.render_end,
            RenderMode.ERRORS: self.render_errors,
            RenderMode.BODY: self.render_body,
            RenderMode.PAGINATOR: self.render_paginator,
            RenderMode.OPERATIONS: self.render_operations,
            RenderMode.INFO: self.render_info,
        }

    def render(self, grid: DataGrid, mode: Union[RenderMode, str, None] = None) -> str:
        """
        Render a grid, or one named region of it.

        Args:
            grid: Grid to render
            mode: Region to render; the grid body when None

        Returns:
            Markup text

        Raises:
            PreconditionError: If the grid has no data source
            ValueError: If ``mode`` names no known region
        """
        self._check_preconditions(grid)
        if mode is None:
            return self.render_body(grid)

        mode = self._resolve_mode(mode)
        logger.debug(f"Rendering region '{mode.value}' of grid '{grid.name}'")
        return self._modes[mode](grid)

    def render_begin(self, grid: DataGrid) -> str:
        """Render the grid form start tag, resetting every control's rendered marker first."""
        ctx = self._context(grid)
        form = grid.get_form()
        form.reset_rendered()

        element = ctx.wrapper('form container')
        element.update_attrs(form.element.attrs)
        element.add_class(form.element.classes)
        return element.start_tag()

    def render_end(self, grid: DataGrid) -> str:
        """Render the grid form end tag."""
        ctx = self._context(grid)
        return ctx.wrapper('form container').end_tag() + "\n"

    def render_errors(self, grid: DataGrid) -> str:
        """Render form validation errors; empty string when there are none."""
        node = generate_errors(self._context(grid))
        if node is None:
            return ""
        return "\n" + node.render(0)

    def build_body(self, grid: DataGrid) -> ElementNode:
        """
        Assemble the grid body tree: header, filters, rows, footer.

        Raises:
            MissingKeyError: If a record lacks the primary key operations or
                actions need; nothing is returned in that case
        """
        ctx = self._context(grid)
        table = ctx.wrapper('grid container')

        table.add(generate_header_row(ctx))

        if grid.has_filters():
            table.add(generate_filter_row(ctx))

        even_class = ctx.value('row.content .even')
        row_count = 0
        for row_count, record in enumerate(grid.get_rows(), start=1):
            row = generate_content_row(ctx, record)
            if row_count % 2 == 0:
                row.add_class(even_class)
            table.add(row)

        table.add(generate_footer_row(ctx))

        logger.debug(f"Built body of grid '{grid.name}': {len(grid.get_columns())} columns, {row_count} rows")
        return table

    def render_body(self, grid: DataGrid) -> str:
        table = self.build_body(grid)
        return table.render(0 if self.settings.indent_body else None)

    def render_paginator(self, grid: DataGrid) -> str:
        return serialize(generate_paginator(self._context(grid)))

    def render_operations(self, grid: DataGrid) -> str:
        return serialize(generate_operations(self._context(grid)))

    def render_info(self, grid: DataGrid) -> str:
        return serialize(generate_info(self._context(grid)))

    def render_document(self, grid: DataGrid) -> str:
        """Render the complete grid: form begin, errors, body and form end."""
        ctx = self._context(grid)
        parts = [self.render_begin(grid)]
        if ctx.value('form errors'):
            parts.append(self.render_errors(grid))
        parts.append("\n" + self.render_body(grid) + "\n")
        parts.append(self.render_end(grid))
        return "".join(parts)

    def _context(self, grid: DataGrid) -> RenderContext:
        self._check_preconditions(grid)
        return RenderContext(grid, self.wrappers, self.factory, self.settings)

    def _check_preconditions(self, grid: DataGrid) -> None:
        if grid.data_source is None:
            logger.error(f"Data source of grid '{grid.name}' is not set")
            raise PreconditionError(
                "Data source was not set. You must set data source to data grid before rendering."
            )

    @staticmethod
    def _resolve_mode(mode: Union[RenderMode, str]) -> RenderMode:
        if isinstance(mode, RenderMode):
            return mode
        try:
            return RenderMode(str(mode).lower())
        except ValueError:
            raise ValueError(f"Unknown render mode '{mode}'. Expected one of: "
                             f"{', '.join(m.value for m in RenderMode)}") from None
