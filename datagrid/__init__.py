"""
Data Grid Rendering

Renders a tabular data grid (header, filters, rows, footer, paginator and
bulk operations) into HTML markup from an overridable set of wrapper
templates. This package includes the wrapper registry, the element tree,
the region generators and the renderer.
"""

from .errors import (
    DataGridError,
    ConfigurationError,
    PreconditionError,
    MissingKeyError
)

from .elements import (
    ElementNode,
    ElementFactory
)

from .wrappers import (
    DEFAULT_WRAPPERS,
    WrapperRegistry
)

from .sorting import (
    SortDirection,
    SortEntry,
    decode_order
)

from .grid import (
    ColumnKind,
    FilterKind,
    FormControl,
    GridForm,
    GridFilter,
    GridAction,
    GridColumn,
    DataColumn,
    ActionColumn,
    Paginator,
    Translator,
    DataGrid
)

from .config import (
    RendererSettings,
    load_settings,
    configure_logging,
    configure_logging_from_settings
)

from .context import RenderContext

from .renderer import (
    RenderMode,
    DataGridRenderer
)

__all__ = [
    # Errors
    'DataGridError',
    'ConfigurationError',
    'PreconditionError',
    'MissingKeyError',

    # Elements and wrappers
    'ElementNode',
    'ElementFactory',
    'DEFAULT_WRAPPERS',
    'WrapperRegistry',

    # Sorting
    'SortDirection',
    'SortEntry',
    'decode_order',

    # Grid state
    'ColumnKind',
    'FilterKind',
    'FormControl',
    'GridForm',
    'GridFilter',
    'GridAction',
    'GridColumn',
    'DataColumn',
    'ActionColumn',
    'Paginator',
    'Translator',
    'DataGrid',

    # Configuration
    'RendererSettings',
    'load_settings',
    'configure_logging',
    'configure_logging_from_settings',

    # Rendering
    'RenderContext',
    'RenderMode',
    'DataGridRenderer'
]
