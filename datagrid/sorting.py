"""
Sort State

Decodes the grid's serialized order expression (``"name=a&created=d"``) into
per-column sort direction and precedence rank.
"""

from enum import Enum
from typing import Dict, NamedTuple, Optional
from urllib.parse import parse_qsl


class SortDirection(str, Enum):
    """Sort direction of one column."""
    ASC = "asc"
    DESC = "desc"


class SortEntry(NamedTuple):
    direction: SortDirection
    rank: int  # 1-based position in the expression


SortState = Dict[str, SortEntry]


def decode_order(expr: Optional[str]) -> SortState:
    """
    Decode an order expression into an ordered column → SortEntry mapping.

    Pairs are read left to right; the first occurrence of a field fixes its
    rank, a repeated field overwrites its direction. A direction starting
    with ``'a'`` is ascending, anything else is descending.

    Args:
        expr: Query-string shaped expression, may be empty or None

    Returns:
        Mapping in precedence order; unsorted columns have no entry
    """
    state: SortState = {}
    if not expr:
        return state

    for field, value in parse_qsl(expr, keep_blank_values=True):
        if not field:
            continue
        direction = SortDirection.ASC if value.startswith("a") else SortDirection.DESC
        rank = state[field].rank if field in state else len(state) + 1
        state[field] = SortEntry(direction, rank)
    return state
