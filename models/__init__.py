"""Data models for the office records workbench."""

from .survey import (
    RegistryEntry,
    UpdateRecord,
    ReconciledRow,
    UpdateStatus,
    STATUS_LABELS,
)
from .mail import (
    MailRecord,
    MailDirection,
    LETTER_CLASSIFICATIONS,
    DELIVERY_METHODS,
    MISSING_LABEL,
    classification_label,
    delivery_method_label,
    status_label,
)
from .table_state import TableState

__all__ = [
    "RegistryEntry",
    "UpdateRecord",
    "ReconciledRow",
    "UpdateStatus",
    "STATUS_LABELS",
    "MailRecord",
    "MailDirection",
    "LETTER_CLASSIFICATIONS",
    "DELIVERY_METHODS",
    "MISSING_LABEL",
    "classification_label",
    "delivery_method_label",
    "status_label",
    "TableState",
]
