from typing import Dict, Any

# This file holds the in-memory data stores of the reference backend.

PRODUCTS: Dict[str, Dict[str, Any]] = {}
CATEGORIES: Dict[str, Dict[str, Any]] = {}
ORDERS: Dict[str, Dict[str, Any]] = {}
UPLOADS: Dict[str, bytes] = {}

STORES: Dict[str, Dict[str, Dict[str, Any]]] = {
    "products": PRODUCTS,
    "categories": CATEGORIES,
    "orders": ORDERS,
}


def reset_all() -> None:
    for store in STORES.values():
        store.clear()
    UPLOADS.clear()
