"""API routes for the dashboard statistics endpoint."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import BadRequestError, DatabaseError
from app.core.logging import get_logger
from app.features.dashboard.schemas import DashboardStatsResponse
from app.features.dashboard.service import DashboardService, parse_branch_id

logger = get_logger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

STATS_FAILED_MESSAGE = "Failed to get dashboard stats"


def get_current_time() -> datetime:
    """Current instant in UTC; overridden in tests to freeze the clock."""
    return datetime.now(UTC)


@router.get(
    "/stats",
    response_model=DashboardStatsResponse,
    summary="Get dashboard sales statistics",
    description="""
Summarize sales for a reporting period and compare them with the previous
period of the same length.

**Periods** (calendar days in the configured civil offset, UTC-6 by default):
- `today`: the current day
- `week`: the last seven days including today
- `month` (default): the current calendar month
- `custom`: `startDate` through `endDate` (YYYY-MM-DD, both inclusive, required)

The previous period has the same duration and ends 1 ms before the current one starts.

**Metrics**: `totalSales`, `orders`, `productsSold`, `avgTicket`, each with the
percentage `change` vs. the previous period ("0.0" when the previous value is zero).

**Rankings**: top products, combos and product types by units sold in the current period.

**Daily series**: sales per day for the trailing week, regardless of `period`.

**Branch filter**: `branch_id` (hex) limits every figure to sales made by users
of that branch, when branch filtering is enabled.
""",
)
async def get_stats(
    period: str | None = Query(
        None,
        description="Reporting period: today, week, month or custom. Defaults to month.",
    ),
    start_date: str | None = Query(
        None,
        alias="startDate",
        description="First day of a custom period (inclusive). Format: YYYY-MM-DD.",
    ),
    end_date: str | None = Query(
        None,
        alias="endDate",
        description="Last day of a custom period (inclusive). Format: YYYY-MM-DD.",
    ),
    branch_id: str | None = Query(
        None,
        description="Hex-encoded branch id to restrict results to (optional).",
    ),
    now: datetime = Depends(get_current_time),
    db: AsyncSession = Depends(get_db),
) -> DashboardStatsResponse:
    """Compute dashboard statistics.

    Args:
        period: Reporting period name.
        start_date: Custom period start (YYYY-MM-DD).
        end_date: Custom period end (YYYY-MM-DD).
        branch_id: Hex branch id filter.
        now: Current instant.
        db: Database session.

    Returns:
        Dashboard summary.

    Raises:
        BadRequestError: If period or branch parameters are invalid.
        DatabaseError: If computing the statistics fails.
    """
    logger.info(
        "dashboard.stats_requested",
        period=period,
        start_date=start_date,
        end_date=end_date,
        branch_id=branch_id,
    )

    service = DashboardService()

    try:
        windows = service.resolve_windows(period, start_date, end_date, now)
        branch = parse_branch_id(branch_id)
    except ValueError as e:
        raise BadRequestError(
            message=str(e),
            details={"period": period, "start_date": start_date, "end_date": end_date},
        ) from e

    try:
        return await service.get_stats(db=db, windows=windows, now=now, branch_id=branch)
    except Exception as e:
        logger.error(
            "dashboard.stats_failed",
            period=windows.period.value,
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        raise DatabaseError(
            message=STATS_FAILED_MESSAGE,
            details={"error_type": type(e).__name__},
        ) from e
