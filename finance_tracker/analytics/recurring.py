"""Recurring charge detection by exact description + amount clustering.

Charges whose amount varies from month to month (utility bills, for example)
never cluster; only exact repeats are reported.
"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

import structlog

from .money import round_money
from .periods import window_start
from .records import TransactionRecord

logger = structlog.get_logger()

LOOKBACK_MONTHS = 6
MIN_OCCURRENCES = 2
TOP_N = 10


@dataclass(frozen=True)
class RecurringCharge:
    description: str
    amount: float
    occurrences: int
    last_date: date


def normalize_description(description: str) -> str:
    return description.strip().casefold()


class _Cluster:
    __slots__ = ("description", "amount", "count", "last_date")

    def __init__(self, description: str, amount: float, when: date):
        self.description = description
        self.amount = amount
        self.count = 0
        self.last_date = when


def detect_recurring(
    transactions: Iterable[TransactionRecord],
    lookback_months: int = LOOKBACK_MONTHS,
    min_occurrences: int = MIN_OCCURRENCES,
    top_n: int = TOP_N,
    today: Optional[date] = None,
) -> List[RecurringCharge]:
    """
    Group expenses with the same normalized description and rounded amount.

    The input order does not matter: each cluster tracks its own latest date
    and reports the raw description of that latest occurrence.

    Args:
        transactions: Records already scoped to one user and one currency.
        lookback_months: Only expenses from the first day of the month
            ``lookback_months - 1`` months ago onward are considered.
        min_occurrences: Smallest cluster reported as recurring.
        top_n: Maximum number of clusters returned.
        today: Reference date, defaults to ``date.today()``.

    Returns:
        Clusters ordered by occurrences (most first), then most recent.
    """
    since = window_start(lookback_months, today)
    clusters: Dict[Tuple[str, float], _Cluster] = {}

    for t in transactions:
        if not t.is_expense or not t.description or not t.description.strip():
            continue
        if t.date < since:
            continue
        amount = round_money(t.amount)
        key = (normalize_description(t.description), amount)
        cluster = clusters.get(key)
        if cluster is None:
            cluster = clusters[key] = _Cluster(t.description, amount, t.date)
        cluster.count += 1
        if t.date > cluster.last_date:
            cluster.last_date = t.date
            cluster.description = t.description

    recurring = [c for c in clusters.values() if c.count >= min_occurrences]
    recurring.sort(key=lambda c: (-c.count, -c.last_date.toordinal()))

    logger.debug(
        "recurring_detected",
        candidates=len(clusters),
        recurring=len(recurring),
        since=since.isoformat(),
    )
    return [
        RecurringCharge(
            description=c.description,
            amount=c.amount,
            occurrences=c.count,
            last_date=c.last_date,
        )
        for c in recurring[:top_n]
    ]
