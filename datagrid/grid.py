"""
Grid State

The collaborators a renderer reads from: columns, row actions, filters,
form controls, the paginator and the grid itself. The renderer never
mutates any of these apart from the form controls' ``rendered`` marker.
"""

import html
import logging
import math
from enum import Enum
from typing import Any, Callable, Collection, Dict, Iterable, Iterator, List, Mapping, Optional, Union
from urllib.parse import urlencode

from .elements import ElementNode

logger = logging.getLogger(__name__)


class ColumnKind(Enum):
    """Kind of a grid column."""
    PLAIN = "plain"     # formatted record value
    ACTION = "action"   # row-scoped action links


class FilterKind(Enum):
    """Kind of a column filter control."""
    INPUT = "input"
    SELECT = "select"


# ------ Form controls ------

class FormControl:
    """
    A named form control with an optional label.

    The control prototype is never handed out directly: every access to
    ``control`` returns a fresh clone the caller may decorate.
    """

    def __init__(self, name: str, control: ElementNode, caption: Optional[str] = None):
        """
        Initialize the form control.

        Args:
            name: Control name, unique within its form
            control: Prototype element of the control
            caption: Label text, or None for no label
        """
        self.name = name
        self.caption = caption
        self.prototype = control
        self.rendered = False
        if control.get_attr("id") is None:
            control.set_attr("id", html_id(name))

    @property
    def control(self) -> ElementNode:
        return self.get_control()

    def get_control(self) -> ElementNode:
        """Return a fresh copy of the control element and mark it rendered."""
        self.rendered = True
        return self.prototype.clone()

    @property
    def label(self) -> Union[ElementNode, str]:
        if self.caption is None:
            return ""
        return ElementNode("label", {"for": self.prototype.get_attr("id")}).set_text(self.caption)

    @property
    def value(self) -> Any:
        return self.prototype.get_attr("value")

    def __repr__(self) -> str:
        return f"<FormControl {self.name}>"


def html_id(name: str) -> str:
    """Derive an element id from a control name (``checker[5]`` → ``frm-checker-5``)."""
    cleaned = "".join(c if c.isalnum() or c in "-_" else "-" for c in name).strip("-")
    return f"frm-{cleaned}"


def text_input(name: str, caption: Optional[str] = None, value: Any = None, **attrs: Any) -> FormControl:
    node = ElementNode("input", {"type": "text", "name": name})
    if value is not None:
        node.set_attr("value", value)
    node.update_attrs(attrs)
    return FormControl(name, node, caption)


def select_box(name: str, items: Mapping[Any, str], caption: Optional[str] = None,
               selected: Any = None, **attrs: Any) -> FormControl:
    node = ElementNode("select", {"name": name})
    node.update_attrs(attrs)
    for key, text in items.items():
        option = ElementNode("option", {"value": key, "selected": selected is not None and key == selected})
        node.add(option.set_text(text))
    return FormControl(name, node, caption)


def submit_button(name: str, caption: str, **attrs: Any) -> FormControl:
    node = ElementNode("input", {"type": "submit", "name": name, "value": caption})
    node.update_attrs(attrs)
    return FormControl(name, node)


def checkbox(name: str, **attrs: Any) -> FormControl:
    node = ElementNode("input", {"type": "checkbox", "name": name})
    node.update_attrs(attrs)
    return FormControl(name, node)


class GridForm:
    """
    The form a grid is rendered inside.

    Holds the named controls (``page``, ``pageSubmit``, ``filterSubmit``,
    ``operations``, ``operationSubmit`` and the filter controls), one
    ``checker[key]`` checkbox per row key and the validation errors.
    """

    def __init__(self, name: str = "grid", action: str = "", method: str = "post"):
        self.name = name
        self.element = ElementNode("form", {"action": action, "method": method, "id": html_id(name)})
        self.controls: Dict[str, FormControl] = {}
        self.checkers: Dict[str, FormControl] = {}
        self.errors: List[Union[str, ElementNode]] = []

    def add_control(self, control: FormControl) -> FormControl:
        self.controls[control.name] = control
        return control

    def __getitem__(self, name: str) -> FormControl:
        return self.controls[name]

    def __contains__(self, name: str) -> bool:
        return name in self.controls

    def checker(self, key: Any) -> FormControl:
        """Return the row checkbox for a primary-key value, creating it on first use."""
        key = str(key)
        if key not in self.checkers:
            self.checkers[key] = checkbox(f"checker[{key}]")
        return self.checkers[key]

    def get_controls(self) -> Iterator[FormControl]:
        yield from self.controls.values()
        yield from self.checkers.values()

    def reset_rendered(self) -> None:
        """Clear the rendered marker on every control."""
        for control in self.get_controls():
            control.rendered = False

    def add_error(self, message: Union[str, ElementNode]) -> None:
        self.errors.append(message)

    def get_errors(self) -> List[Union[str, ElementNode]]:
        return list(self.errors)


# ------ Filters, actions, columns ------

class GridFilter:
    """A column filter backed by one form control."""

    def __init__(self, control: FormControl, kind: FilterKind = FilterKind.INPUT):
        self.control = control
        self.kind = kind

    def get_form_control(self) -> FormControl:
        return self.control


class GridAction:
    """
    A row-scoped action link (edit, delete, ...).

    The link target is built from the action's destination and the row's
    primary-key value through the grid's link builder.
    """

    def __init__(self, title: str, destination: str, css_class: Optional[str] = None,
                 attrs: Optional[Dict[str, Any]] = None):
        """
        Initialize the action.

        Args:
            title: Caption and tooltip (translated at render time)
            destination: Link destination passed to the grid's link builder
            css_class: Optional class for the generated link
            attrs: Extra link attributes
        """
        self.title = title
        self.destination = destination
        self.css_class = css_class
        self.attrs = dict(attrs or {})

    def generate_link(self, grid: 'DataGrid', key_name: str, key_value: Any) -> str:
        return grid.link(self.destination, **{key_name: key_value})

    def get_html(self, grid: 'DataGrid', key_name: str, key_value: Any,
                 translate: Callable[[str], str]) -> ElementNode:
        """Build the link element for one row."""
        title = translate(self.title)
        link = ElementNode("a", self.attrs)
        link.add_class(self.css_class)
        link.set_attr("href", self.generate_link(grid, key_name, key_value))
        link.set_attr("title", title)
        return link.set_text(title)


class GridColumn:
    """
    Base for grid columns.

    ``kind`` tags the variant; renderers dispatch on it rather than on the
    Python type. A bare column is a plain column showing the escaped record
    value.
    """

    kind: ColumnKind = ColumnKind.PLAIN

    def __init__(self, name: str, caption: Optional[str] = None,
                 header_attrs: Optional[Dict[str, Any]] = None,
                 cell_attrs: Optional[Dict[str, Any]] = None,
                 formatter: Optional[Callable[[Any], Any]] = None):
        self.name = name
        self.caption = name if caption is None else caption
        self.header_attrs = dict(header_attrs or {})
        self.cell_attrs = dict(cell_attrs or {})
        self.orderable = False
        self.filter: Optional[GridFilter] = None
        self.formatter = formatter

    def is_orderable(self) -> bool:
        return self.orderable

    def has_filter(self) -> bool:
        return self.filter is not None

    def format_content(self, value: Any) -> str:
        if self.formatter is not None:
            return str(self.formatter(value))
        if value is None:
            return ""
        return html.escape(str(value))

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name}>"


class DataColumn(GridColumn):
    """Column that shows a formatted record value."""

    kind = ColumnKind.PLAIN

    def __init__(self, name: str, caption: Optional[str] = None, orderable: bool = False,
                 formatter: Optional[Callable[[Any], Any]] = None,
                 filter: Optional[GridFilter] = None, **kwargs: Any):
        """
        Initialize the column.

        Args:
            name: Record field shown by this column
            caption: Header caption, defaults to the name
            orderable: Whether the header renders a sort link
            formatter: Callable returning markup for a raw value; values are
                escaped when no formatter is given
            filter: Optional filter control
        """
        super().__init__(name, caption, formatter=formatter, **kwargs)
        self.orderable = orderable
        self.filter = filter


class ActionColumn(GridColumn):
    """Column whose cells hold the row actions."""

    kind = ColumnKind.ACTION

    def __init__(self, name: str = "actions", caption: Optional[str] = "Actions",
                 actions: Optional[List[GridAction]] = None, **kwargs: Any):
        super().__init__(name, caption, **kwargs)
        self.actions: List[GridAction] = list(actions or [])


# ------ Pagination ------

class Paginator:
    """Pagination state; the renderer only reads these values."""

    def __init__(self, page: int = 1, page_count: int = 1, item_count: int = 0,
                 offset: int = 0, length: int = 0):
        self.page = page
        self.page_count = page_count
        self.item_count = item_count
        self.offset = offset
        self.length = length

    @classmethod
    def from_counts(cls, page: int, items_per_page: int, item_count: int) -> 'Paginator':
        """Derive the pagination state for a page of a result set."""
        items_per_page = max(1, items_per_page)
        page_count = max(1, math.ceil(item_count / items_per_page))
        page = min(max(1, page), page_count)
        offset = (page - 1) * items_per_page
        length = max(0, min(items_per_page, item_count - offset))
        return cls(page, page_count, item_count, offset, length)

    def is_first(self) -> bool:
        return self.page <= 1

    def is_last(self) -> bool:
        return self.page >= self.page_count

    def __repr__(self) -> str:
        return f"<Paginator page={self.page}/{self.page_count} items={self.item_count}>"


# ------ Grid ------

class Translator:
    """Translator interface; identity unless overridden."""

    def translate(self, text: str) -> str:
        return text


LinkBuilder = Callable[[str, Dict[str, Any]], str]


class DataGrid:
    """
    The grid state a renderer consumes.

    The data source is any iterable of record mappings that has already been
    fetched (query execution lives outside the grid). One-shot iterables are
    read into a list on first use so rows and counts agree.
    """

    def __init__(self,
                 name: str = "grid",
                 columns: Optional[List[GridColumn]] = None,
                 data_source: Optional[Iterable[Mapping[str, Any]]] = None,
                 paginator: Optional[Paginator] = None,
                 order: str = "",
                 key_name: str = "id",
                 operations: Optional[Dict[str, str]] = None,
                 filters_enabled: bool = True,
                 translator: Optional[Translator] = None,
                 link_builder: Optional[LinkBuilder] = None,
                 form_action: str = ""):
        """
        Initialize the grid.

        Args:
            name: Grid name, used as link and form prefix
            columns: Ordered columns
            data_source: Fetched row records
            paginator: Pagination state; derived from the data source if None
            order: Serialized order expression (``"name=a&id=d"``)
            key_name: Primary-key field required by operations and actions
            operations: Bulk operations as value → caption
            filters_enabled: Whether the filter row may render
            translator: Optional translator
            link_builder: Callable(destination, params) → URL
            form_action: Action URL of the grid form
        """
        self.name = name
        self.columns: List[GridColumn] = []
        self.data_source = data_source
        self._paginator = paginator
        self.order = order
        self.key_name = key_name
        self.operations: Dict[str, str] = dict(operations or {})
        self.filters_enabled = filters_enabled
        self.translator = translator
        self.link_builder = link_builder
        self.form_action = form_action
        self._form: Optional[GridForm] = None
        for column in columns or []:
            self.add_column(column)

    def add_column(self, column: GridColumn) -> GridColumn:
        if any(existing.name == column.name for existing in self.columns):
            raise ValueError(f"Column '{column.name}' is already defined in grid '{self.name}'.")
        self.columns.append(column)
        return column

    def get_columns(self) -> List[GridColumn]:
        return self.columns

    @property
    def paginator(self) -> Paginator:
        if self._paginator is None:
            count = len(self._materialize())
            self._paginator = Paginator.from_counts(1, max(1, count), count)
        return self._paginator

    @paginator.setter
    def paginator(self, value: Paginator) -> None:
        self._paginator = value

    def get_rows(self) -> Iterator[Mapping[str, Any]]:
        return iter(self._materialize())

    def _materialize(self) -> Collection[Mapping[str, Any]]:
        """Turn a one-shot iterable data source into a list so it can be counted and re-read."""
        if self.data_source is None:
            return []
        if not isinstance(self.data_source, Collection):
            self.data_source = list(self.data_source)
            logger.debug(f"Materialized {len(self.data_source)} rows of grid '{self.name}'")
        return self.data_source

    def has_filters(self) -> bool:
        return self.filters_enabled and any(column.has_filter() for column in self.columns)

    def has_operations(self) -> bool:
        return bool(self.operations)

    def get_actions(self) -> List[GridAction]:
        actions: List[GridAction] = []
        for column in self.columns:
            if column.kind is ColumnKind.ACTION:
                actions.extend(column.actions)
        return actions

    def has_actions(self) -> bool:
        return bool(self.get_actions())

    def get_translator(self) -> Optional[Translator]:
        return self.translator

    def link(self, destination: str, **params: Any) -> str:
        """Build a URL for a grid signal (``page``, ``order``, an action ...)."""
        if self.link_builder is not None:
            return self.link_builder(destination, params)
        query = {"do": f"{self.name}-{destination}"}
        query.update({f"{self.name}-{key}": value for key, value in params.items()})
        return "?" + urlencode(query)

    def get_column_link(self, column: GridColumn) -> str:
        return self.link("order", by=column.name)

    def get_form(self) -> GridForm:
        """Return the bound grid form, building it on first use."""
        if self._form is None:
            self._form = self._build_form()
        return self._form

    def _build_form(self) -> GridForm:
        form = GridForm(self.name, action=self.form_action)
        form.add_control(text_input("page", "Page", value=self.paginator.page, size=3))
        form.add_control(submit_button("pageSubmit", "Change page"))
        form.add_control(submit_button("filterSubmit", "Apply filters"))
        if self.has_operations():
            form.add_control(select_box("operations", self.operations, "Selected"))
            form.add_control(submit_button("operationSubmit", "Send"))
        for column in self.columns:
            if column.has_filter():
                form.add_control(column.filter.get_form_control())
        logger.debug(f"Built form for grid '{self.name}' with {len(form.controls)} controls")
        return form
