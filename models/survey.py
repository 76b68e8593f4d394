"""
Survey data models for the office records workbench.

A survey has a fixed sample registry (immutable from this tool's point of
view) and a separately edited table of progress updates keyed by the same
sample code.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class UpdateStatus(str, Enum):
    """Progress status of a sample update."""

    NOT_DONE = "belum"
    DONE = "sudah"


STATUS_LABELS = {
    UpdateStatus.NOT_DONE.value: "Belum Selesai",
    UpdateStatus.DONE.value: "Sudah Selesai",
}


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


def _optional_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


@dataclass
class RegistryEntry:
    """
    One sample of the survey registry.

    Attributes:
        sample_code: Natural key of the sample (NKS)
        kecamatan: District name
        desa_kelurahan: Village name
        pml: Assigned field supervisor
        ppl: Assigned field enumerator
    """

    sample_code: str
    kecamatan: str = ""
    desa_kelurahan: str = ""
    pml: str = ""
    ppl: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RegistryEntry":
        return cls(
            sample_code=str(data["sample_code"]),
            kecamatan=str(data.get("kecamatan") or ""),
            desa_kelurahan=str(data.get("desa_kelurahan") or ""),
            pml=str(data.get("pml") or ""),
            ppl=str(data.get("ppl") or ""),
        )


@dataclass
class UpdateRecord:
    """
    Mutable progress record for one registry sample.

    ``id`` is None until the store has inserted the record.
    """

    sample_code: str
    families_before: Optional[int] = None
    families_after: Optional[int] = None
    households_after: Optional[int] = None
    status: str = UpdateStatus.NOT_DONE.value
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["created_at"] = self.created_at.isoformat() if self.created_at else None
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UpdateRecord":
        return cls(
            sample_code=str(data["sample_code"]),
            families_before=_optional_int(data.get("families_before")),
            families_after=_optional_int(data.get("families_after")),
            households_after=_optional_int(data.get("households_after")),
            status=str(data.get("status") or UpdateStatus.NOT_DONE.value),
            id=_optional_int(data.get("id")),
            created_at=_optional_datetime(data.get("created_at")),
        )


@dataclass
class ReconciledRow:
    """
    Registry entry joined with its latest update, if any.

    Update-side fields are None when the sample has no update yet; the
    ``update_id`` tells the form whether saving creates or edits.
    """

    sample_code: str
    kecamatan: str = ""
    desa_kelurahan: str = ""
    pml: str = ""
    ppl: str = ""
    update_id: Optional[int] = None
    families_before: Optional[int] = None
    families_after: Optional[int] = None
    households_after: Optional[int] = None
    status: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def has_update(self) -> bool:
        return self.update_id is not None

    def to_update_record(self) -> UpdateRecord:
        """Build the form payload for editing (or creating) this row's update."""
        return UpdateRecord(
            sample_code=self.sample_code,
            families_before=self.families_before,
            families_after=self.families_after,
            households_after=self.households_after,
            status=self.status or UpdateStatus.NOT_DONE.value,
            id=self.update_id,
        )
