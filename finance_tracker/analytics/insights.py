"""Rule-based observations about the current month."""

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

import structlog

from .aggregation import CategoryTotal
from .forecast import Forecast, TRAILING_MONTHS
from .money import format_amount, round_whole

logger = structlog.get_logger()

# Month-over-month change, in percent, that makes a category worth mentioning
CHANGE_THRESHOLD_PERCENT = 20.0

UP = "up"
DOWN = "down"
INFO = "info"


@dataclass(frozen=True)
class Insight:
    type: str
    message: str


def percent_change(current: float, prior: float) -> Optional[float]:
    if prior <= 0:
        return None
    return (current - prior) * 100 / prior


def savings_rate(income: float, expenses: float) -> Optional[float]:
    """Percent of income left after expenses; None without income.

    Unrounded, so threshold checks see the exact figure.
    """
    if income <= 0:
        return None
    return (income - expenses) * 100 / income


def _label(total: CategoryTotal) -> str:
    return f"{total.icon} {total.name}".strip()


def _category_deltas(
    current: Mapping[Any, CategoryTotal],
    prior: Mapping[Any, CategoryTotal],
    currency: str,
) -> List[Insight]:
    insights = []
    for category_id, now in current.items():
        before = prior.get(category_id)
        if before is None:
            continue
        change = percent_change(now.total, before.total)
        if change is None:
            continue
        amounts = f"({format_amount(now.total)} vs {format_amount(before.total, currency)})"
        if change > CHANGE_THRESHOLD_PERCENT:
            insights.append(Insight(
                type=UP,
                message=f"{_label(now)}: spending up {round_whole(change)}% vs last month {amounts}",
            ))
        elif change < -CHANGE_THRESHOLD_PERCENT:
            insights.append(Insight(
                type=DOWN,
                message=f"{_label(now)}: spending down {round_whole(abs(change))}% vs last month {amounts}",
            ))
    return insights


def generate_insights(
    current_totals: Mapping[Any, CategoryTotal],
    prior_totals: Mapping[Any, CategoryTotal],
    current_income: float,
    current_expense: float,
    currency: str = "",
    forecast: Optional[Forecast] = None,
) -> List[Insight]:
    """
    Build the month's insights from per-category totals and the month's cash flow.

    Rules, each evaluated independently:
      - a category present in both months with a positive prior total gets an
        "up"/"down" insight when it moved by more than CHANGE_THRESHOLD_PERCENT;
      - the top spending category of the month gets an "info" insight;
      - with income, the savings rate is reported ("info"), or the deficit
        when the rate is not positive ("up");
      - with a forecast that is over pace, the projected overspend ("up").

    Args:
        current_totals: ``category_totals`` for the current month.
        prior_totals: ``category_totals`` for the previous month.
        current_income: Income booked this month.
        current_expense: Expenses booked this month.
        currency: Code appended to amounts in messages.
        forecast: Optional ``forecast_expenses`` result.
    """
    insights = _category_deltas(current_totals, prior_totals, currency)

    if current_totals:
        top = max(current_totals.values(), key=lambda c: c.total)
        insights.append(Insight(
            type=INFO,
            message=f"{_label(top)} is your top spending category this month ({format_amount(top.total, currency)})",
        ))

    rate = savings_rate(current_income, current_expense)
    if rate is not None:
        if rate > 0:
            insights.append(Insight(
                type=INFO,
                message=f"Your savings rate this month is {round_whole(rate)}%",
            ))
        else:
            deficit = abs(current_income - current_expense)
            insights.append(Insight(
                type=UP,
                message=(
                    "You're spending more than you earn this month: "
                    f"expenses exceed income by {format_amount(deficit, currency)}"
                ),
            ))

    if forecast is not None and forecast.over_pace:
        insights.append(Insight(
            type=UP,
            message=(
                f"At this pace you will spend {format_amount(forecast.projected_expenses, currency)} "
                f"this month, {forecast.overage_percent}% more than your "
                f"{TRAILING_MONTHS}-month average ({format_amount(forecast.avg_monthly_expenses, currency)})"
            ),
        ))

    logger.debug("insights_generated", count=len(insights), savings_rate=rate)
    return insights
