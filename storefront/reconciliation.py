# storefront/reconciliation.py
"""Cart reconciliation: turns a requested cart mutation into a new cart state
and, for carts created from an order, the matching inventory adjustments.

Invariants kept here:

* product stock never goes below zero (decrements are conditional in the store);
* a cart holds at most one line item per product id, repeated ids are merged;
* a cart whose products were deleted is still readable, dangling items are
  simply left out of the resolved view.

The engine only talks to the two stores it is given. There is no transaction
spanning several documents: ``create_cart`` decrements stock item by item and,
if a later item fails, puts back what it already took (compensation) before
re-raising the error.
"""
import logging
from typing import Any, List, Sequence

from .errors import InsufficientStock, ItemNotFound, NotFound, ValidationError
from .identifiers import parse_id
from .schemas import CartOut, LineItem, ResolvedCart, ResolvedLineItem
from .validation import coerce_quantity, merge_line_items, parse_line_items, strict_quantity

logger = logging.getLogger(__name__)


class CartService:
    def __init__(self, products, carts):
        self.products = products
        self.carts = carts

    async def _require_cart(self, cart_id: str) -> CartOut:
        cart = await self.carts.get(cart_id)
        if cart is None:
            raise NotFound("Cart not found")
        return cart

    async def _save(self, cart_id: str, items: List[LineItem]) -> CartOut:
        cart = await self.carts.replace_items(cart_id, items)
        if cart is None:
            # deleted between our read and write
            raise NotFound("Cart not found")
        return cart

    # ✅ Create a cart from an order, taking the units out of stock
    async def create_cart(self, order: Sequence[Any]) -> CartOut:
        if not isinstance(order, (list, tuple)) or len(order) == 0:
            raise ValidationError("The products array cannot be empty")

        # validate the whole order before touching any stock
        requested = []
        for line in order:
            raw_id = line.get("id") if isinstance(line, dict) else getattr(line, "id", None)
            raw_qty = line.get("quantity") if isinstance(line, dict) else getattr(line, "quantity", None)
            requested.append(LineItem(id=parse_id(raw_id), quantity=strict_quantity(raw_qty)))
        requested = merge_line_items(requested)

        taken: List[LineItem] = []
        try:
            for item in requested:
                product = await self.products.get(item.id)
                if product is None:
                    raise NotFound(f"Product with ID {item.id} not found")
                if product.stock < item.quantity:
                    raise InsufficientStock(item.id, item.quantity, product.stock, product.title)

                updated = await self.products.decrement_stock(item.id, item.quantity)
                if updated is None:
                    # stock moved (or the product vanished) since we read it
                    current = await self.products.get(item.id)
                    if current is None:
                        raise NotFound(f"Product with ID {item.id} not found")
                    raise InsufficientStock(item.id, item.quantity, current.stock, current.title)
                taken.append(item)
                logger.info("stock for %s decremented by %d, %d left", item.id, item.quantity, updated.stock)

            cart = await self.carts.create(requested)
        except Exception:
            await self._give_back(taken)
            raise

        logger.info("cart %s created with %d line items", cart.id, len(cart.products))
        return cart

    async def _give_back(self, taken: List[LineItem]) -> None:
        for item in reversed(taken):
            try:
                restored = await self.products.restock(item.id, item.quantity)
            except Exception:
                logger.exception("could not restock %d units of %s", item.quantity, item.id)
                continue
            if restored is None:
                logger.warning("product %s disappeared before %d units could be restocked", item.id, item.quantity)
            else:
                logger.info("restocked %d units of %s after failed order", item.quantity, item.id)

    # 🛒 Line item mutations (no stock movement)
    async def add_item(self, cart_id: str, product_id: str, quantity: Any) -> CartOut:
        qty = coerce_quantity(quantity)
        cart = await self._require_cart(cart_id)

        items = list(cart.products)
        for idx, item in enumerate(items):
            if item.id == product_id:
                items[idx] = LineItem(id=item.id, quantity=item.quantity + qty)
                break
        else:
            items.append(LineItem(id=product_id, quantity=qty))
        return await self._save(cart_id, items)

    async def set_item_quantity(self, cart_id: str, product_id: str, quantity: Any) -> CartOut:
        qty = strict_quantity(quantity)
        cart = await self._require_cart(cart_id)

        items = list(cart.products)
        for idx, item in enumerate(items):
            if item.id == product_id:
                items[idx] = LineItem(id=item.id, quantity=qty)
                break
        else:
            raise ItemNotFound("Product not found in cart")
        return await self._save(cart_id, items)

    async def remove_item(self, cart_id: str, product_id: str) -> CartOut:
        cart = await self._require_cart(cart_id)
        items = [item for item in cart.products if item.id != product_id]
        return await self._save(cart_id, items)

    async def replace_items(self, cart_id: str, items: Any) -> CartOut:
        # shape only; products are not looked up and stock is not checked
        new_items = parse_line_items(items)
        await self._require_cart(cart_id)
        return await self._save(cart_id, new_items)

    async def clear_cart(self, cart_id: str) -> CartOut:
        await self._require_cart(cart_id)
        return await self._save(cart_id, [])

    async def delete_cart(self, cart_id: str) -> CartOut:
        cart = await self.carts.delete(cart_id)
        if cart is None:
            raise NotFound("Cart not found")
        return cart

    # 📦 Read side
    async def get_cart(self, cart_id: str) -> ResolvedCart:
        cart = await self._require_cart(cart_id)
        found = await self.products.get_many(item.id for item in cart.products)
        resolved = [
            ResolvedLineItem(product=found[item.id], quantity=item.quantity)
            for item in cart.products
            if item.id in found
        ]
        if len(resolved) != len(cart.products):
            logger.debug("cart %s has %d dangling line items", cart_id, len(cart.products) - len(resolved))
        return ResolvedCart(id=cart.id, products=resolved)
