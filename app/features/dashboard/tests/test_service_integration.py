"""Integration tests for DashboardService against PostgreSQL.

These tests require a running PostgreSQL database (docker-compose up -d).
Run with: pytest app/features/dashboard/tests/ -v -m integration
"""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import get_settings
from app.core.database import Base
from app.features.dashboard.periods import PeriodKind, resolve_windows
from app.features.dashboard.service import DashboardService
from app.features.pos.models import (
    Branch,
    Combo,
    Product,
    ProductType,
    Sale,
    SaleDetail,
    User,
    UserBranch,
)

pytestmark = pytest.mark.integration

BRANCH_A = bytes.fromhex("a" * 32)
BRANCH_B = bytes.fromhex("b" * 32)
CASHIER_A = bytes.fromhex("1" * 32)
CASHIER_B = bytes.fromhex("2" * 32)


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create async database session for integration tests.

    Creates all tables, provides a session, and drops them afterwards.
    """
    settings = get_settings()
    engine = create_async_engine(settings.database_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def catalog(db_session: AsyncSession) -> dict[str, int]:
    """Seed branches, cashiers and a small catalog."""
    db_session.add_all(
        [
            Branch(id=BRANCH_A, name="Centro"),
            Branch(id=BRANCH_B, name="Norte"),
            User(id=CASHIER_A, username="ana", name="Ana"),
            User(id=CASHIER_B, username="beto", name="Beto"),
        ]
    )
    await db_session.flush()
    db_session.add_all(
        [
            UserBranch(user_id=CASHIER_A, branch_id=BRANCH_A),
            UserBranch(user_id=CASHIER_B, branch_id=BRANCH_B),
            ProductType(id=1, name="Drinks"),
            ProductType(id=2, name="Bakery"),
        ]
    )
    await db_session.flush()
    db_session.add_all(
        [
            Product(id=1, name="Latte", type_id=1, price=Decimal("3.50")),
            Product(id=2, name="Croissant", type_id=2, price=Decimal("2.00")),
            Product(id=3, name="Water", type_id=None, price=Decimal("1.00")),
            Combo(id=1, name="Breakfast", price=Decimal("5.00")),
        ]
    )
    await db_session.commit()
    return {"latte": 1, "croissant": 2, "water": 3, "breakfast": 1}


async def add_sale(
    db: AsyncSession,
    created_at: datetime,
    total: str,
    lines: list[tuple[int | None, int | None, int]],
    user_id: bytes | None = CASHIER_A,
) -> Sale:
    """Insert a sale with (product_id, combo_id, amount) lines."""
    sale = Sale(user_id=user_id, total=Decimal(total), created_at=created_at)
    db.add(sale)
    await db.flush()
    for product_id, combo_id, amount in lines:
        db.add(SaleDetail(sale_id=sale.id, product_id=product_id, combo_id=combo_id, amount=amount))
    await db.commit()
    return sale


class TestDashboardStatsIntegration:
    """End-to-end aggregation against real SQL."""

    async def test_today_without_sales(self, db_session, catalog, frozen_now, cst):
        """A day with no sales reports zeros and empty rankings."""
        windows = resolve_windows(PeriodKind.TODAY, now=frozen_now, tz=cst)

        stats = await DashboardService().get_stats(db=db_session, windows=windows, now=frozen_now)

        assert stats.orders.value == 0
        assert stats.total_sales.value == "0.00"
        assert stats.top_products == []
        assert len(stats.daily_sales) == 7

    async def test_growth_and_rankings(self, db_session, catalog, frozen_now, cst):
        """Totals, deltas and rankings computed from real rows."""
        windows = resolve_windows(PeriodKind.TODAY, now=frozen_now, tz=cst)
        today = windows.current.start

        await add_sale(db_session, today + timedelta(hours=3), "10.00", [(1, None, 2), (2, None, 1)])
        await add_sale(db_session, today + timedelta(hours=5), "20.00", [(1, None, 1), (None, 1, 1)])
        await add_sale(db_session, windows.previous.start + timedelta(hours=1), "15.00", [(3, None, 4)])

        stats = await DashboardService().get_stats(db=db_session, windows=windows, now=frozen_now)

        assert stats.total_sales.value == "30.00"
        assert stats.total_sales.change == "100.0"
        assert stats.total_sales.positive is True
        assert stats.orders.value == 2
        assert stats.products_sold.value == 5
        assert stats.products_sold.change == "25.0"
        assert stats.avg_ticket.value == "15.00"
        assert [(i.name, i.sales) for i in stats.top_products] == [("Latte", 3), ("Croissant", 1)]
        assert [(i.name, i.sales) for i in stats.top_combos] == [("Breakfast", 1)]
        assert [(i.name, i.sales) for i in stats.top_categories] == [("Drinks", 3), ("Bakery", 1)]
        assert stats.daily_sales[-1].total == "30.00"

    async def test_window_bounds_are_inclusive(self, db_session, catalog, frozen_now, cst):
        """Sales exactly on the bounds count; sales 1 ms outside do not."""
        windows = resolve_windows(PeriodKind.TODAY, now=frozen_now, tz=cst)

        await add_sale(db_session, windows.current.start, "1.00", [(1, None, 1)])
        await add_sale(db_session, windows.current.end, "2.00", [(1, None, 1)])
        await add_sale(
            db_session, windows.current.end + timedelta(milliseconds=1), "40.00", [(1, None, 1)]
        )
        await add_sale(db_session, windows.previous.end, "8.00", [(1, None, 1)])

        stats = await DashboardService().get_stats(db=db_session, windows=windows, now=frozen_now)

        assert stats.total_sales.value == "3.00"
        assert stats.orders.value == 2
        assert stats.orders.change == "100.0"

    async def test_branch_filter(self, db_session, catalog, frozen_now, cst):
        """Only sales by members of the requested branch are counted."""
        windows = resolve_windows(PeriodKind.TODAY, now=frozen_now, tz=cst)
        start = windows.current.start

        await add_sale(db_session, start + timedelta(hours=1), "10.00", [(1, None, 1)], CASHIER_A)
        await add_sale(db_session, start + timedelta(hours=2), "50.00", [(2, None, 7)], CASHIER_B)
        await add_sale(db_session, start + timedelta(hours=3), "99.00", [(3, None, 1)], None)

        stats = await DashboardService().get_stats(
            db=db_session, windows=windows, now=frozen_now, branch_id=BRANCH_A
        )

        assert stats.branch_filter_applied is True
        assert stats.total_sales.value == "10.00"
        assert [(i.name, i.sales) for i in stats.top_products] == [("Latte", 1)]

    async def test_top_n_limit(self, db_session, catalog, frozen_now, cst):
        """Rankings never exceed dashboard_top_n entries and are sorted descending."""
        windows = resolve_windows(PeriodKind.TODAY, now=frozen_now, tz=cst)
        for product_id in range(10, 17):
            db_session.add(Product(id=product_id, name=f"Item {product_id}", price=Decimal("1")))
        await db_session.commit()

        for product_id in range(10, 17):
            await add_sale(
                db_session,
                windows.current.start + timedelta(hours=1),
                "1.00",
                [(product_id, None, product_id)],
            )

        stats = await DashboardService().get_stats(db=db_session, windows=windows, now=frozen_now)

        quantities = [item.sales for item in stats.top_products]
        assert len(quantities) == get_settings().dashboard_top_n == 5
        assert quantities == sorted(quantities, reverse=True)
        assert quantities[0] == 16

    async def test_blank_catalog_name_ranks_as_unknown(
        self, db_session, catalog, frozen_now, cst
    ):
        """Products and combos with blank names appear as Unknown in rankings."""
        windows = resolve_windows(PeriodKind.TODAY, now=frozen_now, tz=cst)
        db_session.add_all(
            [
                Product(id=20, name="", type_id=1, price=Decimal("1.00")),
                Combo(id=20, name="", price=Decimal("2.00")),
            ]
        )
        await db_session.commit()

        await add_sale(
            db_session,
            windows.current.start + timedelta(hours=1),
            "6.00",
            [(20, None, 4), (None, 20, 1)],
        )

        stats = await DashboardService().get_stats(db=db_session, windows=windows, now=frozen_now)

        assert [(i.name, i.sales) for i in stats.top_products] == [("Unknown", 4)]
        assert [(i.name, i.sales) for i in stats.top_combos] == [("Unknown", 1)]
        assert [(i.name, i.sales) for i in stats.top_categories] == [("Drinks", 4)]
