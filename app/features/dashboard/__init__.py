"""Dashboard module for period-over-period sales statistics.

Exposes GET /dashboard/stats: totals, order counts, units sold and average
ticket compared with the previous period, plus best-seller rankings and a
trailing daily sales series.
"""

from app.features.dashboard.periods import ComparisonWindows, PeriodKind, PeriodWindow
from app.features.dashboard.routes import router
from app.features.dashboard.schemas import DashboardStatsResponse
from app.features.dashboard.service import DashboardService

__all__ = [
    "ComparisonWindows",
    "DashboardService",
    "DashboardStatsResponse",
    "PeriodKind",
    "PeriodWindow",
    "router",
]
