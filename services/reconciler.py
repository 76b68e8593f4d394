"""
Reconciliation of the sample registry with its progress updates.

The update stream may hold several rows per sample code (legacy
duplicates). It is collapsed to one row per code, then left-joined onto
the registry so every registry entry yields exactly one row.
"""

from typing import Dict, Iterable, List, Sequence

from models import RegistryEntry, UpdateRecord, ReconciledRow


def reduce_latest_per_key(updates: Iterable[UpdateRecord]) -> Dict[str, UpdateRecord]:
    """
    Keep the first update seen for each sample code.

    The store returns updates ordered by ``created_at`` descending, so the
    first one per code is the most recent. Ordering is trusted, not
    re-checked here.

    Args:
        updates: Update records, newest first

    Returns:
        Mapping of sample code to its single update
    """
    latest: Dict[str, UpdateRecord] = {}
    for update in updates:
        if update.sample_code not in latest:
            latest[update.sample_code] = update
    return latest


def reconcile(
    registry: Sequence[RegistryEntry],
    latest: Dict[str, UpdateRecord],
) -> List[ReconciledRow]:
    """
    Left-join registry entries with their reduced updates.

    Output has one row per registry entry, in registry order. Updates whose
    sample code is not in ``registry`` are dropped.

    Args:
        registry: Registry entries in fetch order
        latest: Output of reduce_latest_per_key

    Returns:
        List of ReconciledRow, same length as registry
    """
    rows = []
    for entry in registry:
        update = latest.get(entry.sample_code)
        row = ReconciledRow(
            sample_code=entry.sample_code,
            kecamatan=entry.kecamatan,
            desa_kelurahan=entry.desa_kelurahan,
            pml=entry.pml,
            ppl=entry.ppl,
        )
        if update is not None:
            row.update_id = update.id
            row.families_before = update.families_before
            row.families_after = update.families_after
            row.households_after = update.households_after
            row.status = update.status
            row.created_at = update.created_at
        rows.append(row)
    return rows
