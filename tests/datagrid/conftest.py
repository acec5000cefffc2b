"""
Test configuration and fixtures for the data grid renderer tests.
"""

import logging

import pytest
from unittest.mock import MagicMock

from datagrid.config import RendererSettings
from datagrid.context import RenderContext
from datagrid.elements import ElementFactory
from datagrid.grid import (
    ActionColumn,
    DataColumn,
    DataGrid,
    FilterKind,
    GridAction,
    GridFilter,
    Paginator,
    select_box,
    text_input,
)
from datagrid.renderer import DataGridRenderer
from datagrid.wrappers import WrapperRegistry


@pytest.fixture
def settings():
    """
    Fixture that provides default renderer settings, ignoring any .env file.
    """
    return RendererSettings(_env_file=None)


@pytest.fixture
def renderer(settings):
    """
    Fixture that provides a renderer with default wrappers.
    """
    return DataGridRenderer(settings=settings)


@pytest.fixture
def sample_records():
    """
    Fixture that provides two sample row records.
    """
    return [
        {"id": 1, "name": "Alice", "email": "alice@example.com"},
        {"id": 2, "name": "Bob", "email": "bob@example.com"},
    ]


@pytest.fixture
def simple_grid(sample_records):
    """
    Fixture that provides a grid with 3 plain columns, 2 rows, no filters
    and no operations.
    """
    return DataGrid(
        columns=[
            DataColumn("id", "ID"),
            DataColumn("name", "Name"),
            DataColumn("email", "E-mail"),
        ],
        data_source=sample_records,
    )


@pytest.fixture
def full_grid(sample_records):
    """
    Fixture that provides a grid with filters, sorting, row actions and bulk
    operations, showing page 2 of 3.
    """
    actions = ActionColumn(actions=[
        GridAction("Edit", "edit", css_class="edit"),
        GridAction("Delete", "delete", css_class="delete"),
    ])
    return DataGrid(
        columns=[
            DataColumn("name", "Name", orderable=True,
                       filter=GridFilter(text_input("nameFilter"))),
            DataColumn("email", "E-mail", orderable=True),
            DataColumn("status", "Status",
                       filter=GridFilter(select_box("statusFilter", {"": "All", "on": "Active"}),
                                         FilterKind.SELECT)),
            actions,
        ],
        data_source=sample_records,
        paginator=Paginator(page=2, page_count=3, item_count=25, offset=10, length=10),
        operations={"delete": "Delete", "export": "Export"},
    )


@pytest.fixture
def bracket_translator():
    """
    Fixture that provides a mock translator wrapping every text in brackets.
    """
    translator = MagicMock()
    translator.translate = MagicMock(side_effect=lambda text: f"[{text}]")
    return translator


@pytest.fixture
def make_context(settings):
    """
    Fixture that builds a RenderContext for a grid.
    """
    def _make(grid, wrappers=None):
        return RenderContext(grid, wrappers or WrapperRegistry(), ElementFactory(), settings)

    return _make


@pytest.fixture
def restore_logging():
    """
    Fixture that restores root logger handlers and level after a test.
    """
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield root_logger
    for handler in root_logger.handlers[:]:
        if handler not in handlers:
            handler.close()
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)
