"""
Summary counts for the dashboard tab.
"""

import asyncio
from typing import Dict, Iterable

from models import MailDirection, MailRecord
from .store import RecordStore

DECREE_CLASSIFICATION = "SK"


def count_mail(incoming: Iterable[MailRecord], outgoing: Iterable[MailRecord]) -> Dict[str, int]:
    incoming = list(incoming)
    outgoing = list(outgoing)
    decrees = sum(
        1 for mail in incoming + outgoing
        if mail.classification == DECREE_CLASSIFICATION
    )
    return {
        "incoming": len(incoming),
        "outgoing": len(outgoing),
        "decree": decrees,
        "total": len(incoming) + len(outgoing),
    }


async def mail_stats(store: RecordStore) -> Dict[str, int]:
    """
    Count logged letters per direction.

    The two tables are independent, so both fetches run concurrently.

    Raises:
        StoreError: If either fetch fails
    """
    incoming, outgoing = await asyncio.gather(
        store.fetch_mails(MailDirection.INCOMING),
        store.fetch_mails(MailDirection.OUTGOING),
    )
    return count_mail(incoming, outgoing)
