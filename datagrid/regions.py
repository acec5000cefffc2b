"""
Region Generators

One generator per grid region. Each takes a RenderContext and returns the
element subtree of its region, or None when the region renders nothing.
"""

import html
import logging
from typing import Any, Callable, Mapping, Optional

from .context import RenderContext
from .elements import ElementNode
from .errors import MissingKeyError
from .grid import ColumnKind, FilterKind, GridColumn
from .sorting import SortState, decode_order

logger = logging.getLogger(__name__)

# Separator characters trimmed off the footer when a segment is empty
FOOTER_TRIM = " |"


def serialize(node: Optional[ElementNode], indent: Optional[int] = None) -> str:
    """Serialize an optional region node; None becomes an empty string."""
    return "" if node is None else node.render(indent)


# ------ Rows ------

def generate_header_row(ctx: RenderContext) -> ElementNode:
    """
    Build the header row: an optional checker cell, then one cell per column.

    Orderable columns get a sort link carrying ``asc``/``desc`` and, when more
    than one column is sorted, a precedence badge.
    """
    grid = ctx.grid
    row = ctx.wrapper('row.header container')

    if grid.has_operations():
        cell = ctx.wrapper('row.header cell container').add_class('checker')
        if grid.has_filters():
            cell.set_attr('rowspan', 2)
        row.add(cell)

    sort_state = decode_order(grid.order)
    for column in grid.get_columns():
        cell = ctx.wrapper('row.header cell container')
        cell.update_attrs(column.header_attrs)
        if column.is_orderable():
            cell.add(_sort_link(ctx, column, sort_state))
        else:
            cell.set_text(column.caption)
        if column.kind is ColumnKind.ACTION:
            cell.add_class('actions')
        row.add(cell)

    return row


def _sort_link(ctx: RenderContext, column: GridColumn, sort_state: SortState) -> ElementNode:
    entry = sort_state.get(column.name)
    text = html.escape(str(column.caption))
    if entry is not None and len(sort_state) > 1:
        text += f'&nbsp;<span>{entry.rank}</span>'

    link = ctx.link(ctx.grid.get_column_link(column), entry.direction.value if entry else None)
    return link.set_html(text)


def generate_filter_row(ctx: RenderContext) -> ElementNode:
    """
    Build the filter row: a submit control in action columns, the filter's
    control in filterable columns and a blank placeholder elsewhere.
    """
    grid = ctx.grid
    form = grid.get_form()
    row = ctx.wrapper('row.filter container')

    for column in grid.get_columns():
        cell = ctx.wrapper('row.filter cell container')
        cell.update_attrs(column.cell_attrs)

        if column.kind is ColumnKind.ACTION:
            control = form['filterSubmit'].get_control()
            control.add_class(ctx.value('row.filter control .submit'))
            cell.add(control)
            cell.add_class('actions')
        elif column.has_filter():
            grid_filter = column.filter
            key = '.select' if grid_filter.kind is FilterKind.SELECT else '.input'
            control = grid_filter.get_form_control().get_control()
            control.add_class(ctx.value(f'row.filter control {key}'))
            cell.add(control)
        else:
            cell.set_html('&nbsp;')

        row.add(cell)

    return row


def generate_content_row(ctx: RenderContext, record: Mapping[str, Any]) -> ElementNode:
    """
    Build one data row.

    Raises:
        MissingKeyError: If operations or actions are enabled and the record
            lacks the grid's primary-key field
    """
    grid = ctx.grid
    key_name = grid.key_name
    has_operations = grid.has_operations()

    if (has_operations or grid.has_actions()) and key_name not in record:
        logger.error(f"Record in grid '{grid.name}' has no primary-key field '{key_name}'")
        raise MissingKeyError(key_name)

    row = ctx.wrapper('row.content container')

    if has_operations:
        checker = grid.get_form().checker(record[key_name]).get_control()
        cell = ctx.wrapper('row.content cell container').add_class('checker')
        row.add(cell.add(checker))

    for column in grid.get_columns():
        cell = ctx.wrapper('row.content cell container')
        cell.update_attrs(column.cell_attrs)

        if column.kind is ColumnKind.ACTION:
            links = [
                action.get_html(grid, key_name, record[key_name], ctx.translate).render() + ' '
                for action in column.actions
            ]
            cell.set_html(''.join(links))
            cell.add_class('actions')
        else:
            cell.set_html(column.format_content(record.get(column.name)))

        row.add(cell)

    return row


def generate_footer_row(ctx: RenderContext) -> ElementNode:
    """
    Build the footer row: one cell spanning the whole grid, filled from the
    footer format with the operations, paginator and info regions.
    """
    grid = ctx.grid
    row = ctx.wrapper('row.footer container')

    count = len(grid.get_columns())
    if grid.has_operations():
        count += 1

    cell = ctx.wrapper('row.footer cell container').set_attr('colspan', count)

    markup = ctx.translate(ctx.settings.footer_format)
    regions: Mapping[str, Callable[[RenderContext], Optional[ElementNode]]] = {
        '%operations%': generate_operations,
        '%paginator%': generate_paginator,
        '%info%': generate_info,
    }
    for placeholder, generator in regions.items():
        if placeholder in markup:
            markup = markup.replace(placeholder, serialize(generator(ctx)))

    cell.set_html(markup.strip(FOOTER_TRIM))
    return row.add(cell)


# ------ Control regions ------

def generate_paginator(ctx: RenderContext) -> Optional[ElementNode]:
    """Build first/previous, page input, next/last controls; None for a single page."""
    grid = ctx.grid
    paginator = grid.paginator
    if paginator.page_count <= 1:
        return None

    container = ctx.wrapper('paginator container')

    container.add(_paginator_button(ctx, 'paginator-first', '« ' + ctx.translate('First'),
                                    paginator.is_first(), 1))
    container.add(_paginator_button(ctx, 'paginator-prev', '« ' + ctx.translate('Previous'),
                                    paginator.is_first(), paginator.page - 1))

    form = grid.get_form()
    page = form['page']
    control = page.get_control().set_attr('value', paginator.page)
    segment = ctx.translate(ctx.settings.page_format)
    for placeholder, value in (('%label%', page.label), ('%input%', control), ('%count%', paginator.page_count)):
        segment = segment.replace(placeholder, str(value))
    container.add(ElementNode().set_html(segment))
    container.add(form['pageSubmit'].get_control())

    container.add(_paginator_button(ctx, 'paginator-next', ctx.translate('Next') + ' »',
                                    paginator.is_last(), paginator.page + 1))
    container.add(_paginator_button(ctx, 'paginator-last', ctx.translate('Last') + ' »',
                                    paginator.is_last(), paginator.page_count))

    return container


def _paginator_button(ctx: RenderContext, css_class: str, title: str,
                      at_boundary: bool, page: int) -> ElementNode:
    button = ctx.wrapper('paginator button container').add_class(css_class)
    if at_boundary:
        return button.set_text(title)

    link = ctx.link(ctx.grid.link('page', page=page))
    link.set_attr('title', title)
    return button.add(link.set_text(title))


def generate_operations(ctx: RenderContext) -> Optional[ElementNode]:
    """Build the bulk-operation selector and its submit; None without operations."""
    grid = ctx.grid
    if not grid.has_operations():
        return None

    form = grid.get_form()
    operations = form['operations']
    container = ctx.wrapper('operations container')
    container.add(operations.label)
    container.add(operations.get_control())
    container.add(form['operationSubmit'].get_control())
    return container


def generate_info(ctx: RenderContext) -> ElementNode:
    """Build the "items X - Y of Z" info span."""
    paginator = ctx.grid.paginator
    values = {
        '%from%': paginator.offset if paginator.item_count == 0 else paginator.offset + 1,
        '%to%': paginator.offset + paginator.length,
        '%count%': paginator.item_count,
    }

    markup = ctx.translate(ctx.settings.info_format)
    for placeholder, value in values.items():
        markup = markup.replace(placeholder, str(value))

    return ctx.wrapper('info container').set_html(markup)


def generate_errors(ctx: RenderContext) -> Optional[ElementNode]:
    """Build the list of form validation errors; None when there are none."""
    errors = ctx.grid.get_form().get_errors()
    if not errors:
        return None

    container = ctx.wrapper('error container')
    for error in errors:
        item = ctx.wrapper('error item')
        if isinstance(error, ElementNode):
            item.add(error.clone())
        else:
            item.set_text(error)
        container.add(item)
    return container
