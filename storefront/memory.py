# storefront/memory.py
"""Simple in-memory product and cart stores for local dev/demo and tests.

They honour the same contract as the SQL stores in ``stores.py``: records go
in and out as ``ProductOut`` / ``CartOut`` copies, so callers never hold a
reference into the store itself.
"""
from typing import Dict, Iterable, List, Optional, Tuple

from .identifiers import new_id
from .schemas import PRODUCT_FIELDS, CartOut, LineItem, ProductOut


class MemoryProductStore:
    def __init__(self, products: Optional[Dict[str, ProductOut]] = None):
        # dicts keep insertion order, which doubles as creation order for paging
        self.products: Dict[str, ProductOut] = products if products is not None else {}

    async def get(self, product_id: str) -> Optional[ProductOut]:
        product = self.products.get(product_id)
        return product.model_copy() if product else None

    async def get_many(self, product_ids: Iterable[str]) -> Dict[str, ProductOut]:
        return {pid: self.products[pid].model_copy() for pid in set(product_ids) if pid in self.products}

    async def list(self, page: int, limit: int) -> Tuple[List[ProductOut], int]:
        rows = list(self.products.values())
        start = (page - 1) * limit
        return [p.model_copy() for p in rows[start:start + limit]], len(rows)

    async def create(self, fields: dict) -> ProductOut:
        product = ProductOut(id=new_id(), **{k: fields[k] for k in PRODUCT_FIELDS})
        self.products[product.id] = product
        return product.model_copy()

    async def update(self, product_id: str, fields: dict) -> Optional[ProductOut]:
        product = self.products.get(product_id)
        if not product:
            return None
        changes = {k: v for k, v in fields.items() if k in PRODUCT_FIELDS}
        self.products[product_id] = product.model_copy(update=changes)
        return self.products[product_id].model_copy()

    async def delete(self, product_id: str) -> Optional[ProductOut]:
        product = self.products.pop(product_id, None)
        return product.model_copy() if product else None

    async def decrement_stock(self, product_id: str, quantity: int) -> Optional[ProductOut]:
        product = self.products.get(product_id)
        if not product or product.stock < quantity:
            return None
        return await self.update(product_id, {"stock": product.stock - quantity})

    async def restock(self, product_id: str, quantity: int) -> Optional[ProductOut]:
        product = self.products.get(product_id)
        if not product:
            return None
        return await self.update(product_id, {"stock": product.stock + quantity})


class MemoryCartStore:
    def __init__(self, carts: Optional[Dict[str, List[dict]]] = None):
        # cart id -> raw item dicts, the same shape the SQL store keeps in its JSON column
        self.carts: Dict[str, List[dict]] = carts if carts is not None else {}

    def _out(self, cart_id: str) -> CartOut:
        items = [
            LineItem(id=str(it["id"]), quantity=it.get("quantity", 0))
            for it in self.carts[cart_id]
            if isinstance(it, dict) and it.get("id")
        ]
        return CartOut(id=cart_id, products=items)

    async def get(self, cart_id: str) -> Optional[CartOut]:
        if cart_id not in self.carts:
            return None
        return self._out(cart_id)

    async def create(self, items: List[LineItem]) -> CartOut:
        cart_id = new_id()
        self.carts[cart_id] = [it.model_dump() for it in items]
        return self._out(cart_id)

    async def replace_items(self, cart_id: str, items: List[LineItem]) -> Optional[CartOut]:
        if cart_id not in self.carts:
            return None
        self.carts[cart_id] = [it.model_dump() for it in items]
        return self._out(cart_id)

    async def delete(self, cart_id: str) -> Optional[CartOut]:
        if cart_id not in self.carts:
            return None
        out = self._out(cart_id)
        del self.carts[cart_id]
        return out
