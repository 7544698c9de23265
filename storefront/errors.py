# storefront/errors.py
"""Domain errors raised by the stores, the cart engine and the routers.

Each error knows the HTTP status it maps to; ``main.py`` renders them as
``{"error": <kind>, "message": <text>, "details": <text>}``.
"""
from typing import Optional


class StorefrontError(Exception):
    status_code = 500
    kind = "internal_error"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.kind, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(StorefrontError):
    status_code = 400
    kind = "validation_error"


class NotFound(StorefrontError):
    status_code = 404
    kind = "not_found"


class ItemNotFound(NotFound):
    """The cart exists but has no line item for the requested product."""
    kind = "item_not_found"


class InsufficientStock(StorefrontError):
    status_code = 400
    kind = "insufficient_stock"

    def __init__(self, product_id: str, requested: int, available: int, title: Optional[str] = None):
        name = title or product_id
        super().__init__(
            f"Insufficient stock for product {name}",
            details=f"requested {requested}, available {available}",
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class InternalError(StorefrontError):
    status_code = 500
    kind = "internal_error"
