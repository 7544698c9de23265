from datetime import datetime, timezone

from sqlalchemy import (
    Column, Integer, String, Text, DateTime, func, JSON,
    Numeric, CheckConstraint, Index
)

from .database import Base
from .identifiers import new_id


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(Base):
    __tablename__ = "products"

    id = Column(String(32), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    code = Column(String(100), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)         # 💰 exact money
    stock = Column(Integer, nullable=False, default=0)      # 📦 units in stock, never negative
    # set in Python so rows created within the same second still sort by creation
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_nonneg"),
        CheckConstraint("stock >= 0", name="ck_products_stock_nonneg"),
        Index("ix_products_code", "code"),
    )


class Cart(Base):
    """A cart is a single document: its line items live in one JSON column.

    Every cart mutation rewrites the whole ``items`` list, so a write is an
    atomic single-row update. Items reference products by id only; no foreign
    key, a product may be deleted while carts still point at it.
    """
    __tablename__ = "carts"

    id = Column(String(32), primary_key=True, default=new_id)
    items = Column(JSON, nullable=False, default=list)    # [{"id": <product id>, "quantity": n}]
    created_at = Column(DateTime(timezone=True), server_default=func.now())
