"""Reduction of sales aggregates into dashboard metrics.

Everything here is pure: the service fetches sums and counts from the
database and these helpers turn them into the formatted, compared values
the dashboard shows.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from app.features.dashboard.periods import local_date
from app.features.dashboard.schemas import (
    CountMetric,
    DailySalesPoint,
    MoneyMetric,
    RankedItem,
)

UNKNOWN_NAME = "Unknown"

CENTS = Decimal("0.01")
TENTHS = Decimal("0.1")
ZERO = Decimal("0")


@dataclass(frozen=True)
class PeriodSummary:
    """Scalar aggregates of one window.

    Attributes:
        total_sales: Sum of sale totals.
        order_count: Number of sales.
        products_sold: Sum of line item quantities.
    """

    total_sales: Decimal = ZERO
    order_count: int = 0
    products_sold: int = 0

    @property
    def avg_ticket(self) -> Decimal:
        """Mean sale total, zero when there were no sales."""
        if self.order_count == 0:
            return ZERO
        return self.total_sales / self.order_count


def format_money(value: Decimal) -> str:
    """Render an amount with two decimals, rounding half up."""
    return str(value.quantize(CENTS, rounding=ROUND_HALF_UP))


def percent_change(current: Decimal | int, previous: Decimal | int) -> Decimal:
    """Percentage change from previous to current, rounded half up to one decimal.

    A zero (or negative) previous value yields 0.0 instead of dividing by
    zero, even when the current value is positive.
    """
    previous_d = Decimal(previous)
    if previous_d <= 0:
        return Decimal("0.0")
    change = ((Decimal(current) - previous_d) / previous_d * 100).quantize(
        TENTHS, rounding=ROUND_HALF_UP
    )
    # -0.0 renders as "0.0"
    return change if change != 0 else Decimal("0.0")


def money_metric(current: Decimal, previous: Decimal) -> MoneyMetric:
    """Compare two amounts as a MoneyMetric."""
    change = percent_change(current, previous)
    return MoneyMetric(value=format_money(current), change=str(change), positive=change >= 0)


def count_metric(current: int, previous: int) -> CountMetric:
    """Compare two counts as a CountMetric."""
    change = percent_change(current, previous)
    return CountMetric(value=current, change=str(change), positive=change >= 0)


def assemble_ranking(
    ranked: Sequence[tuple[int, int]],
    names: Mapping[int, str],
) -> list[RankedItem]:
    """Attach display names to ranked ``(id, quantity)`` rows.

    Rank order is preserved. Ids missing from ``names`` are reported as
    "Unknown" rather than dropped, as are blank names.
    """
    return [
        RankedItem(name=names.get(item_id) or UNKNOWN_NAME, sales=int(quantity or 0))
        for item_id, quantity in ranked
    ]


def bucket_daily_sales(
    sales: Iterable[tuple[datetime, Decimal]],
    days: Sequence[date],
    tz: timezone,
) -> list[DailySalesPoint]:
    """Group ``(created_at, total)`` rows into one bucket per local day.

    Days with no sales are kept with zero values; rows outside ``days``
    are ignored.
    """
    totals: dict[date, Decimal] = {day: ZERO for day in days}
    orders: dict[date, int] = {day: 0 for day in days}

    for created_at, total in sales:
        day = local_date(created_at, tz)
        if day in totals:
            totals[day] += Decimal(total)
            orders[day] += 1

    return [
        DailySalesPoint(date=day, total=format_money(totals[day]), orders=orders[day])
        for day in days
    ]
