"""Trailing-average baseline and day-of-month projection for the current month."""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence

import structlog

from .aggregation import MonthlyTotals
from .money import round_money, round_whole
from .periods import days_in_month, month_key, parse_month_key

logger = structlog.get_logger()

TRAILING_MONTHS = 3
# Projection above average * OVERAGE_FACTOR counts as "over pace"
OVERAGE_FACTOR = 1.1


@dataclass(frozen=True)
class Forecast:
    month: str
    avg_monthly_expenses: float
    avg_monthly_income: float
    current_month_expenses: float
    current_month_income: float
    projected_expenses: float
    over_pace: bool
    overage_percent: Optional[int]


def _mean(values: List[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def project_month_total(so_far: float, day_of_month: int, month_days: int) -> float:
    """Linear extrapolation of a partial month to the full month."""
    if day_of_month <= 0:
        return 0.0
    return round_money(so_far / day_of_month * month_days)


def forecast_expenses(
    rollup: Sequence[MonthlyTotals],
    today: Optional[date] = None,
) -> Optional[Forecast]:
    """
    Forecast the current month from a chronological monthly rollup.

    The last bucket is the month in progress; the ones before it are complete.
    The baseline averages the last ``TRAILING_MONTHS`` complete months (fewer
    when history is shorter, 0 when there is none). The projection scales the
    current month's expenses by ``days_in_month / day_of_month``.

    Args:
        rollup: Output of ``monthly_rollup``, oldest month first.
        today: Reference date, defaults to ``date.today()``. When the last
            bucket is not today's month it is treated as a finished month.

    Returns:
        The forecast, or None when the rollup is empty.
    """
    if not rollup:
        return None
    today = today or date.today()

    completed = list(rollup[:-1])[-TRAILING_MONTHS:]
    current = rollup[-1]

    avg_expense = _mean([m.expenses for m in completed])
    avg_income = _mean([m.income for m in completed])

    year, month = parse_month_key(current.month)
    month_days = days_in_month(year, month)
    day_of_month = today.day if current.month == month_key(today) else month_days
    projected = project_month_total(current.expenses, day_of_month, month_days)

    over_pace = avg_expense > 0 and projected > avg_expense * OVERAGE_FACTOR
    overage_percent = (
        round_whole((projected - avg_expense) / avg_expense * 100) if avg_expense > 0 else None
    )

    forecast = Forecast(
        month=current.month,
        avg_monthly_expenses=round_money(avg_expense),
        avg_monthly_income=round_money(avg_income),
        current_month_expenses=round_money(current.expenses),
        current_month_income=round_money(current.income),
        projected_expenses=projected,
        over_pace=over_pace,
        overage_percent=overage_percent,
    )
    logger.debug(
        "forecast_computed",
        month=forecast.month,
        projected=forecast.projected_expenses,
        baseline=forecast.avg_monthly_expenses,
        over_pace=over_pace,
    )
    return forecast
