"""Service layer for dashboard statistics.

Aggregates sales for the current and previous windows, ranks the best
sellers of the current window and builds the trailing daily series, all
with SQLAlchemy 2.0 style queries against the POS tables.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.logging import get_logger
from app.features.dashboard.metrics import (
    PeriodSummary,
    assemble_ranking,
    bucket_daily_sales,
    count_metric,
    money_metric,
)
from app.features.dashboard.periods import (
    ComparisonWindows,
    PeriodWindow,
    fixed_offset,
    local_days_window,
    parse_period,
    resolve_windows,
    trailing_days,
)
from app.features.dashboard.schemas import DashboardStatsResponse, PeriodBounds, RankedItem
from app.features.pos.models import (
    BINARY_ID_LENGTH,
    Combo,
    Product,
    ProductType,
    Sale,
    SaleDetail,
    UserBranch,
)

logger = get_logger(__name__)

NamedModel = type[Product] | type[Combo] | type[ProductType]


def parse_branch_id(value: str | None) -> bytes | None:
    """Decode a hex-encoded branch id.

    Args:
        value: Hex string from the query, or None.

    Returns:
        The 16-byte id, or None when no branch was requested.

    Raises:
        ValueError: If the value is not hex or has the wrong length.
    """
    if value is None or value == "":
        return None
    try:
        branch_id = bytes.fromhex(value)
    except ValueError:
        raise ValueError(f"Invalid branch_id '{value}'. Expected a hex string") from None
    if len(branch_id) != BINARY_ID_LENGTH:
        raise ValueError(
            f"Invalid branch_id '{value}'. Expected {BINARY_ID_LENGTH * 2} hex characters"
        )
    return branch_id


class DashboardService:
    """Compute dashboard statistics.

    Settings read once per instance:
        dashboard_utc_offset_minutes: civil offset for calendar boundaries.
        dashboard_branch_filter_enabled: whether branch_id scopes the queries.
        dashboard_top_n: length of each ranking.
        dashboard_daily_series_days: length of the trailing daily series.
        dashboard_max_range_days: longest custom range accepted.
    """

    def __init__(self) -> None:
        """Initialize dashboard service."""
        self.settings = get_settings()
        self.tz = fixed_offset(self.settings.dashboard_utc_offset_minutes)

    def resolve_windows(
        self,
        period: str | None,
        start_date: str | None,
        end_date: str | None,
        now: datetime,
    ) -> ComparisonWindows:
        """Resolve raw query values into comparison windows.

        Raises:
            ValueError: If the period or its dates are invalid.
        """
        return resolve_windows(
            parse_period(period),
            now=now,
            tz=self.tz,
            start_date=start_date,
            end_date=end_date,
            max_range_days=self.settings.dashboard_max_range_days,
        )

    async def get_stats(
        self,
        db: AsyncSession,
        windows: ComparisonWindows,
        now: datetime,
        branch_id: bytes | None = None,
    ) -> DashboardStatsResponse:
        """Compute the dashboard summary.

        Args:
            db: Database session.
            windows: Current and previous windows to compare.
            now: Current instant, anchors the trailing daily series.
            branch_id: Restrict to sales by members of this branch (optional).

        Returns:
            Metrics, rankings and daily series.
        """
        scope = self._branch_scope(branch_id)

        current = await self._summarize(db, windows.current, scope)
        previous = await self._summarize(db, windows.previous, scope)

        top_products = await self._ranking(db, SaleDetail.product_id, Product, windows.current, scope)
        top_combos = await self._ranking(db, SaleDetail.combo_id, Combo, windows.current, scope)
        top_categories = await self._ranking(
            db, Product.type_id, ProductType, windows.current, scope, join_product=True
        )

        days = trailing_days(now, self.tz, self.settings.dashboard_daily_series_days)
        daily_window = local_days_window(days[0], days[-1], self.tz)
        daily_result = await db.execute(
            select(Sale.created_at, Sale.total).where(*self._sale_filters(daily_window, scope))
        )
        daily_sales = bucket_daily_sales(
            ((row.created_at, row.total) for row in daily_result.all()), days, self.tz
        )

        logger.info(
            "dashboard.stats_computed",
            period=windows.period.value,
            current_start=windows.current.start.isoformat(),
            current_end=windows.current.end.isoformat(),
            branch_filter_applied=scope is not None,
            total_sales=float(current.total_sales),
            order_count=current.order_count,
            previous_order_count=previous.order_count,
        )

        return DashboardStatsResponse(
            total_sales=money_metric(current.total_sales, previous.total_sales),
            orders=count_metric(current.order_count, previous.order_count),
            products_sold=count_metric(current.products_sold, previous.products_sold),
            avg_ticket=money_metric(current.avg_ticket, previous.avg_ticket),
            top_products=top_products,
            top_combos=top_combos,
            top_categories=top_categories,
            daily_sales=daily_sales,
            period=PeriodBounds(
                period=windows.period,
                current_start=windows.current.start,
                current_end=windows.current.end,
                previous_start=windows.previous.start,
                previous_end=windows.previous.end,
            ),
            branch_filter_applied=scope is not None,
        )

    # -------------------------------------------------------------------------
    # Query helpers
    # -------------------------------------------------------------------------

    def _branch_scope(self, branch_id: bytes | None) -> ColumnElement[bool] | None:
        """Membership condition restricting sales to a branch, if filtering applies."""
        if branch_id is None:
            return None
        if not self.settings.dashboard_branch_filter_enabled:
            logger.warning("dashboard.branch_filter_disabled", branch_id=branch_id.hex())
            return None
        members = select(UserBranch.user_id).where(UserBranch.branch_id == branch_id)
        return Sale.user_id.in_(members)

    @staticmethod
    def _sale_filters(
        window: PeriodWindow,
        scope: ColumnElement[bool] | None,
    ) -> list[ColumnElement[bool]]:
        filters: list[ColumnElement[bool]] = [
            Sale.created_at >= window.start,
            Sale.created_at <= window.end,
        ]
        if scope is not None:
            filters.append(scope)
        return filters

    async def _summarize(
        self,
        db: AsyncSession,
        window: PeriodWindow,
        scope: ColumnElement[bool] | None,
    ) -> PeriodSummary:
        """Total sales, order count and units sold within a window."""
        filters = self._sale_filters(window, scope)

        sales_stmt = select(
            func.coalesce(func.sum(Sale.total), 0).label("total_sales"),
            func.count(Sale.id).label("order_count"),
        ).where(*filters)
        sales_row = (await db.execute(sales_stmt)).one()

        units_stmt = (
            select(func.coalesce(func.sum(SaleDetail.amount), 0))
            .join(Sale, SaleDetail.sale_id == Sale.id)
            .where(*filters)
        )
        products_sold = (await db.execute(units_stmt)).scalar_one()

        return PeriodSummary(
            total_sales=Decimal(str(sales_row.total_sales)),
            order_count=int(sales_row.order_count),
            products_sold=int(products_sold),
        )

    async def _ranking(
        self,
        db: AsyncSession,
        key: Any,
        named: NamedModel,
        window: PeriodWindow,
        scope: ColumnElement[bool] | None,
        join_product: bool = False,
    ) -> list[RankedItem]:
        """Top-N ids of ``key`` by units sold, with names from ``named``.

        Ties on quantity are broken by ascending id.
        """
        quantity = func.sum(SaleDetail.amount).label("quantity")
        stmt = (
            select(key.label("item_id"), quantity)
            .select_from(SaleDetail)
            .join(Sale, SaleDetail.sale_id == Sale.id)
        )
        if join_product:
            stmt = stmt.join(Product, SaleDetail.product_id == Product.id)

        stmt = (
            stmt.where(*self._sale_filters(window, scope), key.isnot(None))
            .group_by(key)
            .order_by(quantity.desc(), key.asc())
            .limit(self.settings.dashboard_top_n)
        )
        ranked = [(row.item_id, int(row.quantity or 0)) for row in (await db.execute(stmt)).all()]

        names = await self._lookup_names(db, named, [item_id for item_id, _ in ranked])
        return assemble_ranking(ranked, names)

    @staticmethod
    async def _lookup_names(
        db: AsyncSession,
        named: NamedModel,
        ids: list[int],
    ) -> dict[int, str]:
        """Display names for ids in a single query; absent ids are omitted."""
        if not ids:
            return {}
        result = await db.execute(select(named.id, named.name).where(named.id.in_(ids)))
        return {row.id: row.name for row in result.all()}
