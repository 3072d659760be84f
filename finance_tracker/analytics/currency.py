from typing import Any, Dict, Iterable, List, Mapping

from .records import TransactionRecord


def partition_by_currency(
    transactions: Iterable[TransactionRecord],
    account_currencies: Mapping[Any, str],
) -> Dict[str, List[TransactionRecord]]:
    """Split a feed into one list per account currency, amounts are never mixed."""
    groups: Dict[str, List[TransactionRecord]] = {
        currency: [] for currency in dict.fromkeys(account_currencies.values())
    }
    for t in transactions:
        currency = account_currencies.get(t.account_id)
        if currency is None:
            continue
        groups[currency].append(t)
    return groups
