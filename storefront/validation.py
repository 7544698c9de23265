# storefront/validation.py
"""Input checks shared by the cart engine and the routers.

All of them raise ``ValidationError`` and never touch a store, so a request
that fails here leaves products and carts exactly as they were.
"""
from typing import Any, Iterable, List

from .errors import ValidationError
from .identifiers import parse_id
from .schemas import LineItem

QUANTITY_MESSAGE = "Quantity must be a valid number greater than 0"


def _whole_number(value: Any):
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def coerce_quantity(value: Any) -> int:
    """Lenient quantity used when adding to a cart: ``3`` and ``"3"`` both pass."""
    if isinstance(value, str):
        text = value.strip()
        try:
            value = int(text)
        except ValueError:
            try:
                value = float(text)
            except ValueError:
                raise ValidationError(QUANTITY_MESSAGE)
    qty = _whole_number(value)
    if qty is None or qty <= 0:
        raise ValidationError(QUANTITY_MESSAGE)
    return qty


def strict_quantity(value: Any) -> int:
    """Quantity for in-place updates: must already be a JSON number."""
    qty = _whole_number(value)
    if qty is None or qty <= 0:
        raise ValidationError("Quantity must be a positive number")
    return qty


def merge_line_items(items: Iterable[LineItem]) -> List[LineItem]:
    """Collapse repeated product ids into one line item, keeping first-seen order."""
    merged = {}
    for item in items:
        if item.id in merged:
            merged[item.id] = merged[item.id] + item.quantity
        else:
            merged[item.id] = item.quantity
    return [LineItem(id=pid, quantity=qty) for pid, qty in merged.items()]


def parse_line_items(raw: Any) -> List[LineItem]:
    """Turn a request ``products`` array into validated, merged line items."""
    if not isinstance(raw, (list, tuple)):
        raise ValidationError("Body must contain an array of products")
    items = []
    for entry in raw:
        if isinstance(entry, LineItem):
            items.append(LineItem(id=parse_id(entry.id), quantity=strict_quantity(entry.quantity)))
            continue
        if not isinstance(entry, dict):
            raise ValidationError("Each product must be an object with id and quantity")
        pid = parse_id(entry.get("id"))
        items.append(LineItem(id=pid, quantity=strict_quantity(entry.get("quantity"))))
    return merge_line_items(items)
