# storefront/stores.py
"""SQLAlchemy-backed product and cart stores.

Each write commits on its own, so every call is atomic for the one row
(document) it touches and nothing more. Multi-step flows such as creating a
cart from an order are coordinated by ``reconciliation.CartService``.
"""
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import select, update, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .identifiers import new_id
from .models import Cart, Product
from .schemas import PRODUCT_FIELDS, CartOut, LineItem, ProductOut

logger = logging.getLogger(__name__)


def cart_to_out(cart: Cart) -> CartOut:
    # items without a product id are dropped rather than failing the whole cart
    items = [
        LineItem(id=str(it["id"]), quantity=it.get("quantity", 0))
        for it in (cart.items or [])
        if isinstance(it, dict) and it.get("id")
    ]
    return CartOut(id=cart.id, products=items)


class _SqlStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _execute(self, stmt):
        try:
            return await self.session.execute(stmt)
        except SQLAlchemyError:
            logger.warning("database error, rolling back the session")
            await self.session.rollback()
            raise

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError:
            logger.warning("database error, rolling back the session")
            await self.session.rollback()
            raise


class SqlProductStore(_SqlStore):

    async def _load(self, product_id: str) -> Optional[Product]:
        # populate_existing: stock may have been changed by a bulk UPDATE
        return await self.session.get(Product, product_id, populate_existing=True)

    async def get(self, product_id: str) -> Optional[ProductOut]:
        product = await self._load(product_id)
        return ProductOut.model_validate(product) if product else None

    async def get_many(self, product_ids: Iterable[str]) -> Dict[str, ProductOut]:
        ids = list(set(product_ids))
        if not ids:
            return {}
        result = await self._execute(select(Product).where(Product.id.in_(ids)))
        return {p.id: ProductOut.model_validate(p) for p in result.scalars().all()}

    async def list(self, page: int, limit: int) -> Tuple[List[ProductOut], int]:
        total = (await self._execute(select(func.count()).select_from(Product))).scalar_one()
        offset = (page - 1) * limit
        if offset >= total:
            # past the last page; also keeps huge page numbers away from the driver
            return [], total
        result = await self._execute(
            select(Product)
            .order_by(Product.created_at, Product.id)
            .offset(offset)
            .limit(limit)
        )
        return [ProductOut.model_validate(p) for p in result.scalars().all()], total

    async def create(self, fields: dict) -> ProductOut:
        product = Product(id=new_id(), **{k: fields[k] for k in PRODUCT_FIELDS})
        self.session.add(product)
        await self._commit()
        return ProductOut.model_validate(product)

    async def update(self, product_id: str, fields: dict) -> Optional[ProductOut]:
        product = await self._load(product_id)
        if not product:
            return None
        for key, value in fields.items():
            if key in PRODUCT_FIELDS:
                setattr(product, key, value)
        await self._commit()
        return ProductOut.model_validate(product)

    async def delete(self, product_id: str) -> Optional[ProductOut]:
        product = await self._load(product_id)
        if not product:
            return None
        out = ProductOut.model_validate(product)
        await self.session.delete(product)
        await self._commit()
        return out

    async def decrement_stock(self, product_id: str, quantity: int) -> Optional[ProductOut]:
        """Take ``quantity`` units out of stock in one conditional UPDATE.

        Returns None when the product is gone or has fewer units than asked;
        stock is left untouched in that case.
        """
        result = await self._execute(
            update(Product)
            .where(Product.id == product_id, Product.stock >= quantity)
            .values(stock=Product.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            await self.session.rollback()
            return None
        await self._commit()
        return await self.get(product_id)

    async def restock(self, product_id: str, quantity: int) -> Optional[ProductOut]:
        result = await self._execute(
            update(Product)
            .where(Product.id == product_id)
            .values(stock=Product.stock + quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            await self.session.rollback()
            return None
        await self._commit()
        return await self.get(product_id)


class SqlCartStore(_SqlStore):

    async def get(self, cart_id: str) -> Optional[CartOut]:
        cart = await self.session.get(Cart, cart_id, populate_existing=True)
        return cart_to_out(cart) if cart else None

    async def create(self, items: List[LineItem]) -> CartOut:
        cart = Cart(id=new_id(), items=[it.model_dump() for it in items])
        self.session.add(cart)
        await self._commit()
        return cart_to_out(cart)

    async def replace_items(self, cart_id: str, items: List[LineItem]) -> Optional[CartOut]:
        cart = await self.session.get(Cart, cart_id)
        if not cart:
            return None
        # assign a fresh list so the JSON column is flagged as changed
        cart.items = [it.model_dump() for it in items]
        await self._commit()
        return cart_to_out(cart)

    async def delete(self, cart_id: str) -> Optional[CartOut]:
        cart = await self.session.get(Cart, cart_id)
        if not cart:
            return None
        out = cart_to_out(cart)
        await self.session.delete(cart)
        await self._commit()
        return out
