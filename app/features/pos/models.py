"""Point-of-sale ORM models read by the dashboard.

Catalog: ProductType, Product, Combo
Organization: Branch, User, UserBranch (branch membership)
Transactions: Sale (one ticket) and SaleDetail (its line items)

The dashboard only reads these tables. A sale belongs to a branch through
the branch memberships of the user who rang it up.
"""

from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.shared.models import TimestampMixin

# Branch and user ids are 16-byte binary UUIDs; clients pass them hex-encoded.
BINARY_ID_LENGTH = 16


# ============================================================================
# ORGANIZATION
# ============================================================================


class Branch(TimestampMixin, Base):
    """Store location.

    Attributes:
        id: 16-byte binary primary key.
        name: Branch display name.
    """

    __tablename__ = "branch"

    id: Mapped[bytes] = mapped_column(LargeBinary(BINARY_ID_LENGTH), primary_key=True)
    name: Mapped[str] = mapped_column(String(100))

    memberships: Mapped[list["UserBranch"]] = relationship(back_populates="branch")


class User(TimestampMixin, Base):
    """Cashier or manager account.

    Attributes:
        id: 16-byte binary primary key.
        username: Unique login name.
        name: Display name.
    """

    __tablename__ = "user"

    id: Mapped[bytes] = mapped_column(LargeBinary(BINARY_ID_LENGTH), primary_key=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(100))

    memberships: Mapped[list["UserBranch"]] = relationship(back_populates="user")
    sales: Mapped[list["Sale"]] = relationship(back_populates="user")


class UserBranch(Base):
    """Association between users and the branches they work at."""

    __tablename__ = "user_branch"

    user_id: Mapped[bytes] = mapped_column(
        LargeBinary(BINARY_ID_LENGTH), ForeignKey("user.id"), primary_key=True
    )
    branch_id: Mapped[bytes] = mapped_column(
        LargeBinary(BINARY_ID_LENGTH), ForeignKey("branch.id"), primary_key=True, index=True
    )

    user: Mapped["User"] = relationship(back_populates="memberships")
    branch: Mapped["Branch"] = relationship(back_populates="memberships")


# ============================================================================
# CATALOG
# ============================================================================


class ProductType(TimestampMixin, Base):
    """Product category (e.g. "Drinks", "Desserts")."""

    __tablename__ = "product_type"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))

    products: Mapped[list["Product"]] = relationship(back_populates="product_type")


class Product(TimestampMixin, Base):
    """Sellable product.

    Attributes:
        id: Primary key.
        name: Product display name.
        type_id: Optional category (FK to product_type).
        price: Current list price.
    """

    __tablename__ = "product"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("product_type.id"), index=True, nullable=True
    )
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))

    product_type: Mapped["ProductType | None"] = relationship(back_populates="products")
    sale_details: Mapped[list["SaleDetail"]] = relationship(back_populates="product")

    __table_args__ = (CheckConstraint("price >= 0", name="ck_product_price_positive"),)


class Combo(TimestampMixin, Base):
    """Bundle of products sold at a single price."""

    __tablename__ = "combo"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))

    sale_details: Mapped[list["SaleDetail"]] = relationship(back_populates="combo")

    __table_args__ = (CheckConstraint("price >= 0", name="ck_combo_price_positive"),)


# ============================================================================
# TRANSACTIONS
# ============================================================================


class Sale(TimestampMixin, Base):
    """A single ticket.

    ``created_at`` (from TimestampMixin) is the instant the sale was rung
    up and is the column every dashboard window filters on.

    Attributes:
        id: Primary key.
        user_id: User who made the sale (nullable for imported history).
        total: Ticket total.
    """

    __tablename__ = "sale"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[bytes | None] = mapped_column(
        LargeBinary(BINARY_ID_LENGTH), ForeignKey("user.id"), index=True, nullable=True
    )
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2))

    user: Mapped["User | None"] = relationship(back_populates="sales")
    details: Mapped[list["SaleDetail"]] = relationship(back_populates="sale")

    __table_args__ = (
        Index("ix_sale_created_at", "created_at"),
        CheckConstraint("total >= 0", name="ck_sale_total_positive"),
    )


class SaleDetail(Base):
    """Line item of a sale: a quantity of one product or one combo.

    product_id and combo_id are enforced foreign keys, so every ranked id has
    a catalog row. The dashboard still reports "Unknown" for a row whose
    name is blank.
    """

    __tablename__ = "sale_detail"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    sale_id: Mapped[int] = mapped_column(Integer, ForeignKey("sale.id"), index=True)
    product_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("product.id"), index=True, nullable=True
    )
    combo_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("combo.id"), index=True, nullable=True
    )
    amount: Mapped[int] = mapped_column(Integer)

    sale: Mapped["Sale"] = relationship(back_populates="details")
    product: Mapped["Product | None"] = relationship(back_populates="sale_details")
    combo: Mapped["Combo | None"] = relationship(back_populates="sale_details")

    __table_args__ = (CheckConstraint("amount >= 0", name="ck_sale_detail_amount_positive"),)
