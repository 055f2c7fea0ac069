"""Pydantic schemas for the dashboard statistics endpoint.

Field names are snake_case in Python and camelCase on the wire
(``total_sales`` is serialized as ``totalSales``), matching what the POS
front end consumes.
"""

import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.features.dashboard.periods import PeriodKind


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Metric Schemas
# =============================================================================


class MoneyMetric(CamelModel):
    """Monetary metric compared against the previous period."""

    value: str = Field(
        ...,
        description="Amount for the current period with two decimals (e.g. '30.00').",
    )
    change: str = Field(
        ...,
        description="Percentage change vs. the previous period with one decimal. "
        "'0.0' when the previous period is zero.",
    )
    positive: bool = Field(..., description="True when change >= 0.")


class CountMetric(CamelModel):
    """Integer metric compared against the previous period."""

    value: int = Field(..., ge=0, description="Count for the current period.")
    change: str = Field(
        ...,
        description="Percentage change vs. the previous period with one decimal. "
        "'0.0' when the previous period is zero.",
    )
    positive: bool = Field(..., description="True when change >= 0.")


class RankedItem(CamelModel):
    """Entry of a top-N ranking by quantity sold."""

    name: str = Field(
        ..., description="Display name, or 'Unknown' when the catalog name is blank."
    )
    sales: int = Field(..., ge=0, description="Units sold in the current period.")


class DailySalesPoint(CamelModel):
    """One local calendar day of the trailing sales series."""

    date: datetime.date = Field(..., description="Local calendar day.")
    total: str = Field(..., description="Sum of sale totals with two decimals.")
    orders: int = Field(..., ge=0, description="Number of sales.")


class PeriodBounds(CamelModel):
    """Resolved windows the metrics were computed over (UTC, bounds inclusive)."""

    period: PeriodKind
    current_start: datetime.datetime
    current_end: datetime.datetime
    previous_start: datetime.datetime
    previous_end: datetime.datetime


# =============================================================================
# Response
# =============================================================================


class DashboardStatsResponse(CamelModel):
    """Dashboard summary for the current period compared with the previous one."""

    total_sales: MoneyMetric = Field(..., description="Sum of sale totals.")
    orders: CountMetric = Field(..., description="Number of sales (tickets).")
    products_sold: CountMetric = Field(..., description="Sum of line item quantities.")
    avg_ticket: MoneyMetric = Field(
        ..., description="Average sale total; '0.00' when there were no sales."
    )
    top_products: list[RankedItem] = Field(
        default_factory=list, description="Best selling products by units, highest first."
    )
    top_combos: list[RankedItem] = Field(
        default_factory=list, description="Best selling combos by units, highest first."
    )
    top_categories: list[RankedItem] = Field(
        default_factory=list,
        description="Best selling product types by units, highest first.",
    )
    daily_sales: list[DailySalesPoint] = Field(
        default_factory=list,
        description="Trailing daily series ending today, oldest first. "
        "Independent of the requested period.",
    )
    period: PeriodBounds
    branch_filter_applied: bool = Field(
        False, description="True when results were restricted to a branch."
    )
