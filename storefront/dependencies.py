# storefront/dependencies.py
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from .database import get_session
from .reconciliation import CartService
from .stores import SqlCartStore, SqlProductStore


def get_product_store(session: AsyncSession = Depends(get_session)) -> SqlProductStore:
    return SqlProductStore(session)


def get_cart_service(session: AsyncSession = Depends(get_session)) -> CartService:
    # both stores share the request session
    return CartService(SqlProductStore(session), SqlCartStore(session))
