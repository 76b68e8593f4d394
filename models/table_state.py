"""
View state model for one records table.

Holds the rows returned by the last successful fetch together with the
search and sort settings the user picked. Everything shown on screen is
recomputed from this container.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from services.sort_engine import SortState


@dataclass
class TableState:
    """
    State container for a table view.

    Attributes:
        rows: Rows from the last successful fetch, in fetch order
        search_query: Current search text
        sort_state: Active sort, or None for fetch order
        last_error: Message of the most recent failed store call
        loaded: Whether at least one fetch has completed
    """

    rows: List[Any] = field(default_factory=list)
    search_query: str = ""
    sort_state: Optional["SortState"] = None
    last_error: str = ""
    loaded: bool = False
