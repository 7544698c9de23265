"""Seed demo products and one cart by calling the storefront HTTP API.

This script is intentionally simple: it creates a small fixed catalog, then
creates a cart from an order so the stock decrement can be seen in the
product listing afterwards.

Usage:
    python scripts/seed_demo.py

The API base URL is read from API_URL (default http://localhost:8000/api).
"""
import os
import sys
import httpx

API_URL = os.environ.get("API_URL", "http://localhost:8000/api")

FIXED_PRODUCTS = [
    {"title": "Air filter", "description": "Engine air filter, 1.4/1.8/2.0 TSI", "code": "AF-001", "price": 19.90, "stock": 25},
    {"title": "Front brake pads", "description": "Front axle brake pad set", "code": "BP-010", "price": 54.99, "stock": 12},
    {"title": "Spark plug", "description": "Platinum spark plug", "code": "SP-100", "price": 12.50, "stock": 80},
    {"title": "Timing belt kit", "description": "Timing belt with rollers", "code": "TB-200", "price": 129.00, "stock": 5},
    {"title": "Oil filter", "description": "Original oil filter", "code": "OF-300", "price": 9.99, "stock": 40},
]


def create_product(client: httpx.Client, product: dict):
    r = client.post(f"{API_URL}/products", json=product)
    if r.status_code != 201:
        print(f"Create product {product['code']} returned {r.status_code}: {r.text}")
        return None
    created = r.json()["product"]
    print(f"Created product {created['code']} -> {created['id']}")
    return created


def create_cart(client: httpx.Client, lines: list):
    r = client.post(f"{API_URL}/carts", json={"products": lines})
    if r.status_code != 201:
        print(f"Create cart returned {r.status_code}: {r.text}")
        return None
    cart = r.json()["cart"]
    print(f"Created cart {cart['id']} with {len(cart['products'])} line items")
    return cart


def main():
    print("Seeding demo data, API_URL=", API_URL)
    try:
        with httpx.Client(timeout=5.0) as client:
            created = [p for p in (create_product(client, item) for item in FIXED_PRODUCTS) if p]
            if len(created) >= 2:
                create_cart(client, [
                    {"id": created[0]["id"], "quantity": 2},
                    {"id": created[1]["id"], "quantity": 1},
                ])
            listing = client.get(f"{API_URL}/products", params={"limit": 50}).json()
            print("Products after seeding:")
            for p in listing["payload"]:
                print(p["code"], p["title"], "stock:", p["stock"])
    except httpx.HTTPError as e:
        print(f"API unavailable: {e}")
        sys.exit(1)
    print("Seed complete")


if __name__ == "__main__":
    main()
