"""
Case-insensitive substring search over a configured set of fields.

The store applies the same predicate when it filters a query, so in-memory
and store-side search agree.
"""

from typing import Any, Iterable, List, Sequence, TypeVar

T = TypeVar("T")

# Registry search only covers registry-side fields, never update fields
REGISTRY_SEARCH_FIELDS = ("sample_code", "kecamatan", "desa_kelurahan", "pml", "ppl")

# Mail search covers the displayed text columns, using labels for coded ones
MAIL_SEARCH_FIELDS = (
    "number",
    "origin",
    "destination",
    "classification_name",
    "description",
    "delivery_method_name",
    "reference",
    "employee_name",
)


def _field_value(row: Any, field_name: str) -> Any:
    if isinstance(row, dict):
        return row.get(field_name)
    return getattr(row, field_name, None)


def matches(row: Any, query: str, fields: Sequence[str]) -> bool:
    """
    Check whether any configured field contains the query.

    Args:
        row: Dataclass instance or dict
        query: Search text; empty matches everything
        fields: Field names to test, in order

    Returns:
        True if at least one field contains the case-folded query
    """
    if not query:
        return True

    needle = query.casefold()
    for field_name in fields:
        value = _field_value(row, field_name)
        if value is None:
            continue
        if needle in str(value).casefold():
            return True
    return False


def filter_rows(rows: Iterable[T], query: str, fields: Sequence[str]) -> List[T]:
    """Return rows matching query, preserving input order."""
    return [row for row in rows if matches(row, query, fields)]
