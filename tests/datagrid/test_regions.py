"""
Tests for the region generators.
"""

import pytest

from datagrid.elements import ElementNode
from datagrid.errors import MissingKeyError
from datagrid.grid import ActionColumn, DataColumn, DataGrid, GridAction, GridColumn, Paginator
from datagrid.regions import (
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


def sortable_grid(order):
    return DataGrid(
        columns=[
            DataColumn("name", "Name", orderable=True),
            DataColumn("email", "E-mail", orderable=True),
            DataColumn("id", "ID"),
        ],
        data_source=[],
        order=order,
    )


class TestHeaderRow:
    """Test suite for generate_header_row."""

    def test_one_cell_per_column(self, simple_grid, make_context):
        """Test a plain header without checker or sort links."""
        row = generate_header_row(make_context(simple_grid))

        cells = row.element_children()
        assert row.render() == (
            '<tr class="header"><th>ID</th><th>Name</th><th>E-mail</th></tr>'
        )
        assert [cell.name for cell in cells] == ["th", "th", "th"]

    def test_precedence_badges_with_two_sorted_columns(self, make_context):
        """Test that both sorted columns get a badge in expression order."""
        row = generate_header_row(make_context(sortable_grid("email=d&name=a")))
        name_cell, email_cell, id_cell = row.element_children()

        name_link = next(name_cell.iter("a"))
        email_link = next(email_cell.iter("a"))
        assert name_link.has_class("asc")
        assert email_link.has_class("desc")
        assert "&nbsp;<span>2</span>" in name_cell.render()
        assert "&nbsp;<span>1</span>" in email_cell.render()
        assert "<span>" not in id_cell.render()

    def test_no_badge_with_single_sorted_column(self, make_context):
        """Test that one sorted column gets a direction class but no badge."""
        row = generate_header_row(make_context(sortable_grid("name=a")))
        name_cell, email_cell, _ = row.element_children()

        name_link = next(name_cell.iter("a"))
        email_link = next(email_cell.iter("a"))
        assert name_link.has_class("asc")
        assert name_link.has_class("datagrid-ajax")
        assert not email_link.has_class("asc") and not email_link.has_class("desc")
        assert "<span>" not in row.render()

    def test_sort_link_target(self, make_context):
        """Test the sort link href and escaped caption."""
        grid = sortable_grid("")
        grid.columns[0].caption = "Name & Title"
        row = generate_header_row(make_context(grid))

        link = next(row.element_children()[0].iter("a"))
        assert link.get_attr("href") == "?do=grid-order&grid-by=name"
        assert link.children == ["Name &amp; Title"]

    def test_checker_and_action_cells(self, full_grid, make_context):
        """Test the checker cell spanning the filter row and the actions class."""
        row = generate_header_row(make_context(full_grid))
        cells = row.element_children()

        assert len(cells) == 5
        assert cells[0].has_class("checker")
        assert cells[0].get_attr("rowspan") == 2
        assert cells[-1].has_class("actions")

    def test_checker_without_filters_has_no_rowspan(self, full_grid, make_context):
        """Test that the checker only spans two rows when filters render."""
        full_grid.filters_enabled = False
        checker = generate_header_row(make_context(full_grid)).element_children()[0]

        assert checker.get_attr("rowspan") is None

    def test_header_attrs_merge(self, make_context):
        """Test that column header attributes are merged onto the cell."""
        grid = DataGrid(columns=[DataColumn("id", header_attrs={"class": "num", "width": 50})],
                        data_source=[])
        cell = generate_header_row(make_context(grid)).element_children()[0]

        assert cell.render() == '<th class="num" width="50">id</th>'


class TestFilterRow:
    """Test suite for generate_filter_row."""

    def test_cells_per_column_kind(self, full_grid, make_context):
        """Test input, placeholder, select and submit cells."""
        row = generate_filter_row(make_context(full_grid))
        name_cell, email_cell, status_cell, action_cell = row.element_children()

        assert row.has_class("filters")
        assert next(name_cell.iter("input")).has_class("text")
        assert email_cell.children == ["&nbsp;"]
        assert next(status_cell.iter("select")).has_class("select")
        submit = next(action_cell.iter("input"))
        assert submit.get_attr("name") == "filterSubmit"
        assert submit.has_class("button")
        assert action_cell.has_class("actions")

    def test_controls_are_not_shared(self, full_grid, make_context):
        """Test that decorating a rendered control leaves the prototype alone."""
        generate_filter_row(make_context(full_grid))

        assert full_grid.get_form()["filterSubmit"].prototype.classes == []


class TestContentRow:
    """Test suite for generate_content_row."""

    def test_plain_cells(self, simple_grid, make_context):
        """Test that plain columns render formatted values."""
        row = generate_content_row(make_context(simple_grid),
                                   {"id": 7, "name": "<Eve>", "email": None})

        assert row.render() == "<tr><td>7</td><td>&lt;Eve&gt;</td><td></td></tr>"

    def test_checker_and_actions(self, full_grid, make_context, bracket_translator):
        """Test the checker cell and the translated action links."""
        full_grid.translator = bracket_translator
        row = generate_content_row(make_context(full_grid),
                                   {"id": 3, "name": "Carol", "email": "c@example.com", "status": "on"})
        cells = row.element_children()

        checker = next(cells[0].iter("input"))
        assert cells[0].has_class("checker")
        assert checker.get_attr("name") == "checker[3]"

        actions = cells[-1]
        assert actions.has_class("actions")
        markup = actions.render()
        assert 'href="?do=grid-edit&amp;grid-id=3"' in markup
        assert 'title="[Edit]"' in markup
        assert 'title="[Delete]"' in markup
        assert markup.count("<a ") == 2

    def test_missing_key_with_operations_raises(self, full_grid, make_context):
        """Test that a record without the primary key aborts the row."""
        with pytest.raises(MissingKeyError) as exc_info:
            generate_content_row(make_context(full_grid), {"name": "No key"})

        assert exc_info.value.key_name == "id"
        assert "Column 'id' does not exist" in str(exc_info.value)

    def test_missing_key_with_actions_only_raises(self, make_context):
        """Test that row actions alone make the primary key mandatory."""
        grid = DataGrid(
            columns=[DataColumn("name"), ActionColumn(actions=[GridAction("Edit", "edit")])],
            data_source=[],
        )
        assert not grid.has_operations()

        with pytest.raises(MissingKeyError) as exc_info:
            generate_content_row(make_context(grid), {"name": "No key"})

        assert exc_info.value.key_name == "id"

    def test_bare_grid_column(self, renderer):
        """Test that a base column renders its escaped value."""
        grid = DataGrid(columns=[GridColumn("id", "ID")], data_source=[{"id": "<1>"}])

        assert "<td>&lt;1&gt;</td>" in renderer.render(grid)

    def test_missing_key_without_operations_or_actions(self, simple_grid, make_context):
        """Test that the key is only required for operations and actions."""
        simple_grid.key_name = "uuid"
        row = generate_content_row(make_context(simple_grid), {"id": 1, "name": "A", "email": "a@x"})

        assert len(row.element_children()) == 3

    def test_cell_attrs(self, make_context):
        """Test that column cell attributes are applied to content cells."""
        grid = DataGrid(columns=[DataColumn("id", cell_attrs={"class": "num"})], data_source=[])
        row = generate_content_row(make_context(grid), {"id": 1})

        assert row.render() == '<tr><td class="num">1</td></tr>'


class TestFooterRow:
    """Test suite for generate_footer_row."""

    def test_empty_segments_are_trimmed(self, simple_grid, make_context):
        """Test that empty operations and paginator leave only the info segment."""
        row = generate_footer_row(make_context(simple_grid))
        cell = row.element_children()[0]

        assert cell.get_attr("colspan") == 3
        assert cell.children == ['<span class="grid-info">Displaying items 1 - 2 of 2</span>']

    def test_all_segments(self, full_grid, make_context):
        """Test a footer with operations, paginator and info."""
        cell = generate_footer_row(make_context(full_grid)).element_children()[0]
        markup = cell.render()

        assert cell.get_attr("colspan") == 5
        assert markup.index('class="operations"') < markup.index('class="paginator"') < markup.index('class="grid-info"')
        assert " | " in markup

    def test_footer_format_is_translated(self, simple_grid, make_context, bracket_translator):
        """Test that the footer format passes through the translator."""
        simple_grid.translator = bracket_translator
        cell = generate_footer_row(make_context(simple_grid)).element_children()[0]

        bracket_translator.translate.assert_any_call("%operations% | %paginator% | %info%")
        assert '<span class="grid-info">[Displaying items 1 - 2 of 2]</span>' in cell.children[0]


class TestPaginator:
    """Test suite for generate_paginator."""

    def test_single_page_renders_nothing(self, simple_grid, make_context):
        """Test that a single page suppresses the paginator."""
        assert generate_paginator(make_context(simple_grid)) is None

    def test_middle_page_links_everywhere(self, full_grid, make_context):
        """Test that every button is a link on a middle page."""
        container = generate_paginator(make_context(full_grid))
        buttons = list(container.iter("span"))

        assert [button.classes for button in buttons] == [
            ["paginator-first"], ["paginator-prev"], ["paginator-next"], ["paginator-last"],
        ]
        hrefs = [next(button.iter("a")).get_attr("href") for button in buttons]
        assert hrefs == [
            "?do=grid-page&grid-page=1",
            "?do=grid-page&grid-page=1",
            "?do=grid-page&grid-page=3",
            "?do=grid-page&grid-page=3",
        ]
        first_link = next(buttons[0].iter("a"))
        assert first_link.get_attr("title") == "« First"
        assert first_link.has_class("datagrid-ajax")

    def test_first_page_boundaries_are_plain_text(self, full_grid, make_context):
        """Test that first/previous are text on the first page."""
        full_grid.paginator = Paginator(page=1, page_count=3, item_count=25, offset=0, length=10)
        buttons = list(generate_paginator(make_context(full_grid)).iter("span"))

        assert list(buttons[0].iter("a")) == []
        assert list(buttons[1].iter("a")) == []
        assert buttons[0].children == ["« First"]
        assert len(list(buttons[2].iter("a"))) == 1
        assert len(list(buttons[3].iter("a"))) == 1

    def test_page_input_segment(self, full_grid, make_context):
        """Test the page input label, control and page count."""
        markup = serialize(generate_paginator(make_context(full_grid)))

        assert '<label for="frm-page">Page</label>' in markup
        assert 'name="page"' in markup and 'value="2"' in markup
        assert " of 3" in markup
        assert 'name="pageSubmit"' in markup


class TestOperationsAndInfo:
    """Test suite for generate_operations and generate_info."""

    def test_no_operations(self, simple_grid, make_context):
        assert generate_operations(make_context(simple_grid)) is None

    def test_operations(self, full_grid, make_context):
        """Test the operation selector, its label and its submit."""
        markup = serialize(generate_operations(make_context(full_grid)))

        assert markup.startswith('<span class="operations"><label for="frm-operations">Selected</label><select')
        assert '<option value="delete">Delete</option>' in markup
        assert 'name="operationSubmit"' in markup

    @pytest.mark.parametrize("item_count, expected", [
        (0, "Displaying items 0 - 10 of 0"),
        (25, "Displaying items 1 - 10 of 25"),
    ])
    def test_info_counts(self, make_context, item_count, expected):
        """Test the from/to/count arithmetic."""
        grid = DataGrid(data_source=[],
                        paginator=Paginator(page=1, page_count=3, item_count=item_count, offset=0, length=10))

        node = generate_info(make_context(grid))

        assert node.render() == f'<span class="grid-info">{expected}</span>'


class TestErrors:
    """Test suite for generate_errors."""

    def test_no_errors(self, simple_grid, make_context):
        assert generate_errors(make_context(simple_grid)) is None

    def test_text_and_markup_errors(self, simple_grid, make_context):
        """Test that text is escaped and markup errors are embedded."""
        form = simple_grid.get_form()
        form.add_error("Pick <one> row")
        form.add_error(ElementNode("strong").set_text("Denied"))

        node = generate_errors(make_context(simple_grid))

        assert node.render() == (
            '<ul class="error"><li>Pick &lt;one&gt; row</li><li><strong>Denied</strong></li></ul>'
        )
