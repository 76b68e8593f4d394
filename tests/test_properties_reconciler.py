"""
Property-based tests for reconciliation.

Tests invariants that hold for any registry and update stream.
"""

from datetime import datetime, timedelta

from hypothesis import given, strategies as st

from models import RegistryEntry, UpdateRecord
from services import reduce_latest_per_key, reconcile

codes = st.text(alphabet="ABCDEF0123", min_size=1, max_size=3)


def build_updates(keys):
    """Updates for the given keys, newest first, ids in creation order."""
    base = datetime(2025, 1, 1)
    total = len(keys)
    return [
        UpdateRecord(sample_code=key, id=total - i, created_at=base + timedelta(minutes=total - i))
        for i, key in enumerate(keys)
    ]


# Feature: office-records-workbench, Property 1: One row per registry entry
@given(
    st.lists(codes, min_size=1, max_size=30, unique=True),
    st.lists(codes, max_size=60)
)
def test_merge_length_equals_registry(registry_codes, update_codes):
    """
    For any non-empty registry and any update stream, the merged view has
    exactly one row per registry entry, in registry order.
    """
    registry = [RegistryEntry(code) for code in registry_codes]
    updates = build_updates(update_codes)

    rows = reconcile(registry, reduce_latest_per_key(updates))

    assert len(rows) == len(registry)
    assert [row.sample_code for row in rows] == registry_codes


# Feature: office-records-workbench, Property 2: Reducer keeps first per key
@given(st.lists(codes, max_size=60))
def test_reduce_keeps_first_encountered(update_codes):
    """
    For any update stream ordered newest first, the reducer keeps at most one
    update per key and it is the first one seen for that key.
    """
    updates = build_updates(update_codes)

    latest = reduce_latest_per_key(updates)

    assert set(latest) == set(update_codes)
    for key, update in latest.items():
        first = next(u for u in updates if u.sample_code == key)
        assert update is first
        assert update.created_at == max(u.created_at for u in updates if u.sample_code == key)


# Feature: office-records-workbench, Property 3: Updates only attach to their own sample
@given(
    st.lists(codes, min_size=1, max_size=20, unique=True),
    st.lists(codes, max_size=40)
)
def test_rows_only_carry_matching_updates(registry_codes, update_codes):
    registry = [RegistryEntry(code) for code in registry_codes]
    updates = build_updates(update_codes)
    by_id = {u.id: u for u in updates}

    rows = reconcile(registry, reduce_latest_per_key(updates))

    for row in rows:
        if row.has_update:
            assert by_id[row.update_id].sample_code == row.sample_code
        else:
            assert row.sample_code not in update_codes
