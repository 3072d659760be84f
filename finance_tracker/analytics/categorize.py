"""Keyword-based category assignment for imported transactions.

Categories are scanned in ascending name order and the first one with a
keyword contained in the description wins. There is no scoring, so on an
ambiguous description the alphabetically earlier category is chosen.
"""

from typing import Any, Iterable, List, Optional

from .records import CategoryKeywords

FALLBACK_CATEGORY_NAME = "Other"


def order_categories(categories: Iterable[CategoryKeywords]) -> List[CategoryKeywords]:
    return sorted(categories, key=lambda c: c.name.casefold())


def auto_categorize(description: Optional[str], categories: Iterable[CategoryKeywords]) -> Optional[Any]:
    """Id of the first category whose keywords match ``description``, else None."""
    if not description:
        return None
    text = description.casefold()
    for category in order_categories(categories):
        for keyword in category.keywords:
            needle = keyword.strip().casefold()
            # empty keywords would match everything
            if needle and needle in text:
                return category.id
    return None


def select_fallback_category(categories: Iterable[CategoryKeywords]) -> Optional[Any]:
    """The "Other" category (the default one first), else the first category by name."""
    ordered = order_categories(categories)
    others = [c for c in ordered if c.name == FALLBACK_CATEGORY_NAME]
    if others:
        defaults = [c for c in others if c.is_default]
        return (defaults or others)[0].id
    return ordered[0].id if ordered else None
