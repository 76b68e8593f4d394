"""
Correspondence (mail log) data models.

Incoming and outgoing letters share the same fields; the direction only
selects which table they live in.
"""

from dataclasses import dataclass, asdict
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional

from .survey import STATUS_LABELS


MISSING_LABEL = "-"


class MailDirection(str, Enum):
    INCOMING = "incoming"
    OUTGOING = "outgoing"

    @property
    def table_name(self) -> str:
        return f"{self.value}_mails"


# Letter classification codes and their display labels
LETTER_CLASSIFICATIONS = {
    "UM": "Umum",
    "KP": "Kepegawaian",
    "KU": "Keuangan",
    "PR": "Perencanaan",
    "HM": "Hubungan Masyarakat",
    "SK": "Surat Keputusan",
}

DELIVERY_METHODS = {
    "email": "Email",
    "pos": "Pos",
    "kurir": "Kurir",
    "langsung": "Diantar Langsung",
}


def classification_label(code: Optional[str]) -> str:
    return LETTER_CLASSIFICATIONS.get(code or "", MISSING_LABEL)


def delivery_method_label(code: Optional[str]) -> str:
    return DELIVERY_METHODS.get(code or "", MISSING_LABEL)


def status_label(code: Optional[str]) -> str:
    return STATUS_LABELS.get(code or "", MISSING_LABEL)


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "ya", "yes")
    return bool(value)


def _parse_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


@dataclass
class MailRecord:
    """
    A single logged letter.

    Attributes:
        number: Letter number as written on the letter
        date: Letter date (may be unknown)
        origin: Sender
        destination: Recipient
        classification: Code from LETTER_CLASSIFICATIONS
        description: Free-text subject
        delivery_method: Code from DELIVERY_METHODS
        is_reply_letter: Whether the letter answers an earlier one
        reference: Reference text (e.g. the letter being replied to)
        employee_name: Staff member who logged the letter
        link: Optional URL to the scanned document
        id: Store id, None until inserted
    """

    number: str
    date: Optional[date] = None
    origin: str = ""
    destination: str = ""
    classification: str = ""
    description: str = ""
    delivery_method: str = ""
    is_reply_letter: bool = False
    reference: str = ""
    employee_name: str = ""
    link: Optional[str] = None
    id: Optional[int] = None

    @property
    def classification_name(self) -> Optional[str]:
        """Displayed classification label, None for an unknown code."""
        return LETTER_CLASSIFICATIONS.get(self.classification)

    @property
    def delivery_method_name(self) -> Optional[str]:
        return DELIVERY_METHODS.get(self.delivery_method)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["date"] = self.date.isoformat() if self.date else None
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MailRecord":
        raw_id = data.get("id")
        return cls(
            number=str(data.get("number") or ""),
            date=_parse_date(data.get("date")),
            origin=str(data.get("origin") or ""),
            destination=str(data.get("destination") or ""),
            classification=str(data.get("classification") or ""),
            description=str(data.get("description") or ""),
            delivery_method=str(data.get("delivery_method") or ""),
            is_reply_letter=_parse_bool(data.get("is_reply_letter")),
            reference=str(data.get("reference") or ""),
            employee_name=str(data.get("employee_name") or ""),
            link=data.get("link") or None,
            id=int(raw_id) if raw_id not in (None, "") else None,
        )
