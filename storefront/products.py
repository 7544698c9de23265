# storefront/products.py
import logging
import math
from typing import Optional

from fastapi import APIRouter, Depends, status

from .dependencies import get_product_store
from .errors import NotFound, ValidationError
from .identifiers import parse_id
from .schemas import ProductCreate, ProductMessage, ProductOut, ProductPage, ProductUpdate
from .stores import SqlProductStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
MAX_PAGE = 1_000_000_000


def _positive_int(raw: Optional[str], default: int) -> int:
    # "abc", "", "0" and "-3" all fall back to the default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


def paginate(items, total: int, page: int, limit: int) -> ProductPage:
    total_pages = max(1, math.ceil(total / limit))
    has_prev = page > 1
    has_next = page < total_pages
    return ProductPage(
        payload=items,
        total_docs=total,
        limit=limit,
        total_pages=total_pages,
        page=page,
        paging_counter=(page - 1) * limit + 1,
        has_prev_page=has_prev,
        has_next_page=has_next,
        prev_page=page - 1 if has_prev else None,
        next_page=page + 1 if has_next else None,
    )


@router.get("", response_model=ProductPage)
async def list_products(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    store: SqlProductStore = Depends(get_product_store),
):
    page_no = min(_positive_int(page, DEFAULT_PAGE), MAX_PAGE)
    per_page = min(_positive_int(limit, DEFAULT_LIMIT), MAX_LIMIT)
    items, total = await store.list(page_no, per_page)
    return paginate(items, total, page_no, per_page)


@router.post("", response_model=ProductMessage, status_code=status.HTTP_201_CREATED)
async def create_product(payload: ProductCreate, store: SqlProductStore = Depends(get_product_store)):
    missing = payload.missing_fields()
    if missing:
        raise ValidationError("All fields are required", details=f"missing: {', '.join(missing)}")

    product = await store.create(payload.model_dump())
    logger.info("product %s created (code=%s, stock=%d)", product.id, product.code, product.stock)
    return {"message": "Product added successfully", "product": product}


@router.get("/{pid}", response_model=ProductOut)
async def get_product(pid: str, store: SqlProductStore = Depends(get_product_store)):
    product = await store.get(parse_id(pid, "Product ID"))
    if not product:
        raise NotFound("Product not found")
    return product


@router.put("/{pid}", response_model=ProductMessage)
async def update_product(pid: str, payload: ProductUpdate, store: SqlProductStore = Depends(get_product_store)):
    product_id = parse_id(pid, "Product ID")
    # only fields the client actually sent; explicit nulls are ignored (columns are NOT NULL)
    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    product = await store.update(product_id, changes)
    if not product:
        raise NotFound("Product not found")
    return {"message": "Product updated", "product": product}


@router.delete("/{pid}", response_model=ProductMessage)
async def delete_product(pid: str, store: SqlProductStore = Depends(get_product_store)):
    product = await store.delete(parse_id(pid, "Product ID"))
    if not product:
        raise NotFound("Product not found")
    logger.info("product %s deleted", product.id)
    return {"message": "Product deleted", "product": product}
