"""Point-of-sale data models.

Read-only view of the POS schema used by the dashboard:
- Organization: Branch, User, UserBranch
- Catalog: ProductType, Product, Combo
- Transactions: Sale, SaleDetail
"""

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

__all__ = [
    "Branch",
    "Combo",
    "Product",
    "ProductType",
    "Sale",
    "SaleDetail",
    "User",
    "UserBranch",
]
