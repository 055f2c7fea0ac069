#!/usr/bin/env python
"""Demo data seeder for the POS dashboard.

Generates a small, reproducible catalog (branches, cashiers, product types,
products, combos) and a history of sales ending today.

Usage:
    # Seed 60 days of sales
    uv run python scripts/seed_demo_sales.py --days 60 --seed 42 --confirm

    # Remove all POS data
    uv run python scripts/seed_demo_sales.py --delete --confirm

    # Show current table counts
    uv run python scripts/seed_demo_sales.py --status
"""

from __future__ import annotations

import argparse
import asyncio
import random
import sys
from datetime import UTC, datetime, timedelta
from decimal import Decimal

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import get_settings
from app.features.pos.models import (
    BINARY_ID_LENGTH,
    Branch,
    Combo,
    Product,
    ProductType,
    Sale,
    SaleDetail,
    User,
    UserBranch,
)

BRANCH_NAMES = ["Centro", "Norte", "Sur", "Poniente", "Oriente"]
CASHIER_NAMES = ["Ana", "Beto", "Carla", "Diego", "Elena", "Fer", "Gabi", "Hugo", "Iris", "Juan"]
CATALOG: dict[str, list[tuple[str, str]]] = {
    "Drinks": [("Latte", "3.50"), ("Americano", "2.50"), ("Orange Juice", "3.00")],
    "Bakery": [("Croissant", "2.00"), ("Muffin", "2.25"), ("Bagel", "1.75")],
    "Meals": [("Club Sandwich", "6.50"), ("Chicken Wrap", "5.75"), ("Salad Bowl", "7.00")],
}
COMBOS = [("Breakfast", "5.00"), ("Lunch Deal", "9.50"), ("Coffee & Cake", "4.25")]

# Delete order respects foreign keys
TABLES = [SaleDetail, Sale, Combo, Product, ProductType, UserBranch, User, Branch]


def positive_int(value: str) -> int:
    """argparse type for integers >= 1."""
    try:
        parsed = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid integer: {value}") from e
    if parsed < 1:
        raise argparse.ArgumentTypeError(f"Expected a positive integer, got {parsed}")
    return parsed


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        description="POS Dashboard demo data seeder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--delete",
        action="store_true",
        help="Delete all POS data",
    )
    mode_group.add_argument(
        "--status",
        action="store_true",
        help="Show current data counts",
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility (default: 42)",
    )
    parser.add_argument(
        "--days",
        type=positive_int,
        default=60,
        help="Number of days of sales history ending today (default: 60)",
    )
    parser.add_argument(
        "--branches",
        type=positive_int,
        default=3,
        help=f"Number of branches, at most {len(BRANCH_NAMES)} (default: 3)",
    )
    parser.add_argument(
        "--max-sales-per-day",
        type=positive_int,
        default=12,
        help="Upper bound of sales per cashier per day (default: 12)",
    )
    parser.add_argument(
        "--confirm",
        action="store_true",
        help="Confirm destructive operations",
    )

    return parser


async def get_session() -> AsyncSession:
    """Create database session."""
    settings = get_settings()
    engine = create_async_engine(settings.database_url)
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    return session_maker()


def print_counts(counts: dict[str, int], title: str = "Current Data Counts") -> None:
    """Print table counts in a formatted way."""
    print(f"\n{title}:")
    print("-" * 40)
    for table, count in counts.items():
        print(f"  {table:<30} {count:>8,}")
    print("-" * 40)
    print(f"  {'Total':<30} {sum(counts.values()):>8,}")
    print()


async def get_counts(session: AsyncSession) -> dict[str, int]:
    """Row count per POS table."""
    counts: dict[str, int] = {}
    for model in reversed(TABLES):
        result = await session.execute(select(func.count()).select_from(model))
        counts[model.__tablename__] = result.scalar_one()
    return counts


async def build_catalog(
    session: AsyncSession, rng: random.Random, branch_count: int
) -> tuple[list[bytes], list[Product], list[Combo]]:
    """Insert branches, cashiers and the product catalog.

    Returns:
        Tuple of (cashier ids, products, combos).
    """
    branches = [
        Branch(id=rng.randbytes(BINARY_ID_LENGTH), name=name)
        for name in BRANCH_NAMES[:branch_count]
    ]
    cashiers = [
        User(id=rng.randbytes(BINARY_ID_LENGTH), username=name.lower(), name=name)
        for name in CASHIER_NAMES[: branch_count * 2]
    ]
    session.add_all([*branches, *cashiers])
    await session.flush()

    # two cashiers per branch
    session.add_all(
        UserBranch(user_id=cashier.id, branch_id=branches[i // 2].id)
        for i, cashier in enumerate(cashiers)
    )

    products: list[Product] = []
    for type_name, items in CATALOG.items():
        product_type = ProductType(name=type_name)
        session.add(product_type)
        await session.flush()
        for name, price in items:
            products.append(Product(name=name, type_id=product_type.id, price=Decimal(price)))
    # uncategorized item
    products.append(Product(name="Bottled Water", type_id=None, price=Decimal("1.00")))
    combos = [Combo(name=name, price=Decimal(price)) for name, price in COMBOS]
    session.add_all([*products, *combos])
    await session.flush()

    return [cashier.id for cashier in cashiers], products, combos


async def generate_sales(
    session: AsyncSession,
    rng: random.Random,
    cashier_ids: list[bytes],
    products: list[Product],
    combos: list[Combo],
    days: int,
    max_sales_per_day: int,
) -> int:
    """Insert a sales history of `days` days ending now.

    Returns:
        Number of sales inserted.
    """
    now = datetime.now(UTC)
    sales_count = 0

    for day_offset in range(days - 1, -1, -1):
        day_start = (now - timedelta(days=day_offset)).replace(
            hour=0, minute=0, second=0, microsecond=0
        )
        for cashier_id in cashier_ids:
            for _ in range(rng.randint(0, max_sales_per_day)):
                created_at = day_start + timedelta(seconds=rng.randrange(24 * 60 * 60))
                if created_at > now:
                    continue

                # (product_id, combo_id, amount, unit_price)
                lines: list[tuple[int | None, int | None, int, Decimal]] = [
                    (product.id, None, rng.randint(1, 4), product.price)
                    for product in rng.sample(products, k=rng.randint(1, 3))
                ]
                if rng.random() < 0.3:
                    combo = rng.choice(combos)
                    lines.append((None, combo.id, 1, combo.price))

                total = sum((price * amount for _, _, amount, price in lines), Decimal("0"))
                sale = Sale(user_id=cashier_id, total=total, created_at=created_at)
                session.add(sale)
                await session.flush()
                session.add_all(
                    SaleDetail(
                        sale_id=sale.id,
                        product_id=product_id,
                        combo_id=combo_id,
                        amount=amount,
                    )
                    for product_id, combo_id, amount, _ in lines
                )
                sales_count += 1

    return sales_count


async def run_seed(args: argparse.Namespace, session: AsyncSession) -> int:
    """Seed the catalog and sales history."""
    settings = get_settings()

    if settings.is_production:
        print("ERROR: Cannot run seeder in production environment.")
        return 1

    if not args.confirm:
        print("ERROR: --confirm flag required for data generation.")
        return 1

    if args.branches > len(BRANCH_NAMES):
        print(f"ERROR: --branches must be at most {len(BRANCH_NAMES)}.")
        return 1

    counts = await get_counts(session)
    if counts[Sale.__tablename__] or counts[Branch.__tablename__]:
        print("ERROR: Database already contains POS data. Run --delete first.")
        return 1

    print("Configuration:")
    print(f"  Seed: {args.seed}")
    print(f"  Branches: {args.branches}")
    print(f"  Days: {args.days}")
    print()

    rng = random.Random(args.seed)
    cashier_ids, products, combos = await build_catalog(session, rng, args.branches)
    sales_count = await generate_sales(
        session, rng, cashier_ids, products, combos, args.days, args.max_sales_per_day
    )
    await session.commit()

    print(f"Generated {sales_count:,} sales.")
    print_counts(await get_counts(session), title="Seeded Data Counts")
    return 0


async def run_delete(args: argparse.Namespace, session: AsyncSession) -> int:
    """Delete all POS rows."""
    if not args.confirm:
        print("ERROR: --confirm flag required for data deletion.")
        return 1

    counts = await get_counts(session)
    for model in TABLES:
        await session.execute(delete(model))
    await session.commit()

    print_counts(counts, title="Deleted")
    return 0


async def main() -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    session = await get_session()

    try:
        if args.status:
            print_counts(await get_counts(session))
            return 0
        if args.delete:
            return await run_delete(args, session)
        return await run_seed(args, session)
    finally:
        await session.close()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
