"""Test fixtures for dashboard module.

Unit tests run against a mocked AsyncSession and a frozen clock, so they
need no database. Integration fixtures live in test_service_integration.py.
"""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.features.dashboard.periods import PeriodKind, fixed_offset
from app.features.dashboard.routes import get_current_time
from app.features.dashboard.schemas import (
    CountMetric,
    DailySalesPoint,
    DashboardStatsResponse,
    MoneyMetric,
    PeriodBounds,
    RankedItem,
)
from app.main import app

# 12:30 on 2024-03-15 in UTC-6
FROZEN_NOW = datetime(2024, 3, 15, 18, 30, tzinfo=UTC)
CST = fixed_offset(-360)


@pytest.fixture
def frozen_now() -> datetime:
    """Fixed current instant."""
    return FROZEN_NOW


@pytest.fixture
def cst():
    """Fixed UTC-6 civil offset."""
    return CST


@pytest.fixture
def mock_db() -> AsyncMock:
    """AsyncSession double; tests program execute() results as needed."""
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
async def client(mock_db: AsyncMock) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database and clock overrides."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield mock_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_time] = lambda: FROZEN_NOW

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def sample_stats_response() -> DashboardStatsResponse:
    """Create a sample dashboard response for testing."""
    return DashboardStatsResponse(
        total_sales=MoneyMetric(value="30.00", change="100.0", positive=True),
        orders=CountMetric(value=2, change="100.0", positive=True),
        products_sold=CountMetric(value=5, change="0.0", positive=True),
        avg_ticket=MoneyMetric(value="15.00", change="0.0", positive=True),
        top_products=[
            RankedItem(name="Latte", sales=3),
            RankedItem(name="Unknown", sales=2),
        ],
        top_combos=[RankedItem(name="Breakfast Combo", sales=1)],
        top_categories=[RankedItem(name="Drinks", sales=5)],
        daily_sales=[
            DailySalesPoint(date=datetime(2024, 3, 15).date(), total="30.00", orders=2),
        ],
        period=PeriodBounds(
            period=PeriodKind.TODAY,
            current_start=datetime(2024, 3, 15, 6, 0, tzinfo=UTC),
            current_end=datetime(2024, 3, 16, 5, 59, 59, 999000, tzinfo=UTC),
            previous_start=datetime(2024, 3, 14, 6, 0, tzinfo=UTC),
            previous_end=datetime(2024, 3, 15, 5, 59, 59, 999000, tzinfo=UTC),
        ),
        branch_filter_applied=False,
    )
