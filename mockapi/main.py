# mockapi/main.py
import uuid
from pathlib import Path
from typing import Any, Dict

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from storeadmin.models import CategoryIn, OrderIn, ProductIn

from .database import CATEGORIES, ORDERS, PRODUCTS, UPLOADS, reset_all

app = FastAPI(title="store-admin reference backend (in-memory)")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# No referential-integrity checks: deleting a category or product never
# touches the records that point at it.


# ---------------------------
# Helpers
# ---------------------------
def _insert(store: Dict[str, Dict[str, Any]], payload: BaseModel) -> Dict[str, Any]:
    rid = uuid.uuid4().hex
    store[rid] = {"_id": rid, **payload.model_dump()}
    return store[rid]


def _replace(store: Dict[str, Dict[str, Any]], rid: str, payload: BaseModel, what: str) -> Dict[str, Any]:
    if rid not in store:
        raise HTTPException(status_code=404, detail=f"{what} not found")
    store[rid] = {"_id": rid, **payload.model_dump()}
    return store[rid]


def _remove(store: Dict[str, Dict[str, Any]], rid: str, what: str) -> Dict[str, Any]:
    if store.pop(rid, None) is None:
        raise HTTPException(status_code=404, detail=f"{what} not found")
    return {"status": "deleted", "_id": rid}


# ---------------------------
# Product endpoints
# ---------------------------
@app.get("/products")
async def list_products():
    return list(PRODUCTS.values())

@app.post("/products", status_code=201)
async def create_product(payload: ProductIn):
    return _insert(PRODUCTS, payload)

@app.put("/products/{product_id}")
async def update_product(product_id: str, payload: ProductIn):
    return _replace(PRODUCTS, product_id, payload, "product")

@app.delete("/products/{product_id}")
async def delete_product(product_id: str):
    return _remove(PRODUCTS, product_id, "product")

# ---------------------------
# Category endpoints
# ---------------------------
@app.get("/categories")
async def list_categories():
    return list(CATEGORIES.values())

@app.post("/categories", status_code=201)
async def create_category(payload: CategoryIn):
    return _insert(CATEGORIES, payload)

@app.put("/categories/{category_id}")
async def update_category(category_id: str, payload: CategoryIn):
    return _replace(CATEGORIES, category_id, payload, "category")

@app.delete("/categories/{category_id}")
async def delete_category(category_id: str):
    return _remove(CATEGORIES, category_id, "category")

# ---------------------------
# Order endpoints
# ---------------------------
@app.get("/orders")
async def list_orders():
    return list(ORDERS.values())

@app.post("/orders", status_code=201)
async def create_order(payload: OrderIn):
    return _insert(ORDERS, payload)

@app.put("/orders/{order_id}")
async def update_order(order_id: str, payload: OrderIn):
    return _replace(ORDERS, order_id, payload, "order")

@app.delete("/orders/{order_id}")
async def delete_order(order_id: str):
    return _remove(ORDERS, order_id, "order")

# ---------------------------
# Object storage
# ---------------------------
@app.post("/uploads", status_code=201)
async def upload(file: UploadFile = File(...)):
    name = Path(file.filename or "image").name
    key = f"{uuid.uuid4().hex}_{name}"
    UPLOADS[key] = await file.read()
    return {"url": f"/uploads/{key}"}

# ---------------------------
# Utility: reset (for tests/demo)
# ---------------------------
@app.post("/reset")
async def reset():
    reset_all()
    return {"status": "reset"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8085)
