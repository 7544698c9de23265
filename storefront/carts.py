# storefront/carts.py
from fastapi import APIRouter, Depends, status

from .dependencies import get_cart_service
from .identifiers import parse_id
from .reconciliation import CartService
from .schemas import CartCreate, CartMessage, CartReplace, QuantityPayload, ResolvedCart

router = APIRouter(prefix="/api/carts", tags=["carts"])


@router.post("", response_model=CartMessage, status_code=status.HTTP_201_CREATED)
async def create_cart(payload: CartCreate, service: CartService = Depends(get_cart_service)):
    cart = await service.create_cart(payload.products)
    return {"message": "Cart created successfully", "cart": cart}


@router.get("/{cid}", response_model=ResolvedCart)
async def get_cart(cid: str, service: CartService = Depends(get_cart_service)):
    # line items whose product was deleted are left out, the cart itself is still returned
    return await service.get_cart(parse_id(cid, "Cart ID"))


@router.post("/{cid}/product/{pid}", response_model=CartMessage)
async def add_product_to_cart(
    cid: str,
    pid: str,
    payload: QuantityPayload,
    service: CartService = Depends(get_cart_service),
):
    cart_id = parse_id(cid, "Cart ID")
    product_id = parse_id(pid, "Product ID")
    cart = await service.add_item(cart_id, product_id, payload.quantity)
    return {"message": "Product added to cart", "cart": cart}


@router.put("/{cid}/product/{pid}", response_model=CartMessage)
async def update_product_quantity(
    cid: str,
    pid: str,
    payload: QuantityPayload,
    service: CartService = Depends(get_cart_service),
):
    cart_id = parse_id(cid, "Cart ID")
    product_id = parse_id(pid, "Product ID")
    cart = await service.set_item_quantity(cart_id, product_id, payload.quantity)
    return {"message": "Quantity updated successfully", "cart": cart}


@router.delete("/{cid}/product/{pid}", response_model=CartMessage)
async def remove_product_from_cart(cid: str, pid: str, service: CartService = Depends(get_cart_service)):
    cart_id = parse_id(cid, "Cart ID")
    product_id = parse_id(pid, "Product ID")
    cart = await service.remove_item(cart_id, product_id)
    return {"message": "Product removed from cart", "cart": cart}


@router.put("/{cid}", response_model=CartMessage)
async def replace_cart_products(cid: str, payload: CartReplace, service: CartService = Depends(get_cart_service)):
    cart = await service.replace_items(parse_id(cid, "Cart ID"), payload.products)
    return {"message": "Cart updated successfully", "cart": cart}


@router.delete("/{cid}", response_model=CartMessage)
async def clear_cart(cid: str, service: CartService = Depends(get_cart_service)):
    cart = await service.clear_cart(parse_id(cid, "Cart ID"))
    return {"message": "All products were removed from the cart", "cart": cart}
