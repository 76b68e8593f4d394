"""Business logic services for the office records workbench."""

from .errors import StoreError, ValidationError
from .reconciler import reduce_latest_per_key, reconcile
from .search_filter import matches, filter_rows, REGISTRY_SEARCH_FIELDS, MAIL_SEARCH_FIELDS
from .sort_engine import SortDirection, SortState, toggle_sort, sort_rows
from .export_manager import ExportManager
from .store import RecordStore, InMemoryStore, CsvStore
from .survey_service import SurveyUpdateService
from .mail_service import MailService
from .stats import mail_stats

__all__ = [
    "StoreError",
    "ValidationError",
    "reduce_latest_per_key",
    "reconcile",
    "matches",
    "filter_rows",
    "REGISTRY_SEARCH_FIELDS",
    "MAIL_SEARCH_FIELDS",
    "SortDirection",
    "SortState",
    "toggle_sort",
    "sort_rows",
    "ExportManager",
    "RecordStore",
    "InMemoryStore",
    "CsvStore",
    "SurveyUpdateService",
    "MailService",
    "mail_stats",
]
