# storefront/schemas.py
from pydantic import BaseModel, Field
from typing import Any, Optional, List

PRODUCT_FIELDS = ("title", "description", "code", "price", "stock")


# 🛍️ Product
class ProductBase(BaseModel):
    title: str
    description: str
    code: str
    price: float
    stock: int


class ProductOut(ProductBase):
    id: str
    class Config:
        from_attributes = True


class ProductCreate(BaseModel):
    # everything optional here so a missing field is reported as a 400 by the router,
    # not as a schema error
    title: Optional[str] = None
    description: Optional[str] = None
    code: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)

    def missing_fields(self) -> List[str]:
        return [name for name in PRODUCT_FIELDS if not getattr(self, name)]


class ProductUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    code: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)


class ProductMessage(BaseModel):
    message: str
    product: ProductOut


class ProductPage(BaseModel):
    payload: List[ProductOut]
    total_docs: int = Field(alias="totalDocs")
    limit: int
    total_pages: int = Field(alias="totalPages")
    page: int
    paging_counter: int = Field(alias="pagingCounter")
    has_prev_page: bool = Field(alias="hasPrevPage")
    has_next_page: bool = Field(alias="hasNextPage")
    prev_page: Optional[int] = Field(None, alias="prevPage")
    next_page: Optional[int] = Field(None, alias="nextPage")
    class Config:
        populate_by_name = True


# 🛒 Cart line items
class LineItem(BaseModel):
    id: str          # product id, a weak reference
    quantity: int


class CartOut(BaseModel):
    id: str
    products: List[LineItem] = []


class ResolvedLineItem(BaseModel):
    product: ProductOut
    quantity: int


class ResolvedCart(BaseModel):
    id: str
    products: List[ResolvedLineItem] = []


class CartMessage(BaseModel):
    message: str
    cart: CartOut


# 📦 Cart requests
class OrderLine(BaseModel):
    id: Optional[str] = None
    quantity: Any = None


class CartCreate(BaseModel):
    products: List[OrderLine]


class CartReplace(BaseModel):
    products: List[Any]


class QuantityPayload(BaseModel):
    quantity: Any = None
