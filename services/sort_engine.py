"""
Tri-state column sorting.

Toggling a column cycles ascending -> descending -> unsorted. Sorting is
stable and keeps None values at the end in both directions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Sequence, TypeVar

T = TypeVar("T")


class SortDirection(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"


@dataclass(frozen=True)
class SortState:
    key: str
    direction: SortDirection = SortDirection.ASCENDING


def toggle_sort(current: Optional[SortState], field_name: str) -> Optional[SortState]:
    """
    Compute the next sort state after the user toggles ``field_name``.

    Args:
        current: Current state, None when unsorted
        field_name: Column the user clicked

    Returns:
        New state, None when the column returns to unsorted
    """
    if current is None or current.key != field_name:
        return SortState(field_name, SortDirection.ASCENDING)
    if current.direction == SortDirection.ASCENDING:
        return SortState(field_name, SortDirection.DESCENDING)
    return None


def _sort_value(row: Any, key: str) -> Any:
    if isinstance(row, dict):
        return row.get(key)
    return getattr(row, key, None)


def sort_rows(rows: Sequence[T], state: Optional[SortState]) -> List[T]:
    """
    Sort rows by the active column.

    Non-None values use their natural ordering and flip with direction;
    None values always follow them in their original relative order.
    ``state`` of None returns the rows in the given order.
    """
    if state is None:
        return list(rows)

    present = [row for row in rows if _sort_value(row, state.key) is not None]
    missing = [row for row in rows if _sort_value(row, state.key) is None]

    # sorted() stays stable with reverse=True
    present = sorted(
        present,
        key=lambda row: _sort_value(row, state.key),
        reverse=state.direction == SortDirection.DESCENDING,
    )
    return present + missing


def sort_indicator(state: Optional[SortState], labels: Optional[dict] = None) -> str:
    """Short text describing the active sort, for display above a table."""
    if state is None:
        return "Tidak diurutkan"
    label = (labels or {}).get(state.key, state.key)
    arrow = "▲" if state.direction == SortDirection.ASCENDING else "▼"
    return f"Urut: {label} {arrow}"
