from typing import Optional

from .database import ProductRegistry
from .models import Product, ProductPayload

# This file contains the core logic for all API endpoints.

async def add_product_logic(registry: ProductRegistry, payload: ProductPayload) -> Optional[Product]:
    return registry.add_product(payload)

async def get_product_logic(registry: ProductRegistry, product_id: int) -> Product:
    return registry.get_product(product_id)

async def update_product_logic(registry: ProductRegistry, product_id: int, payload: ProductPayload) -> Product:
    return registry.update_product(product_id, payload)

async def delete_product_logic(registry: ProductRegistry, product_id: int) -> Product:
    return registry.delete_product(product_id)

# Utility: reset (for tests/demo)
async def reset_all_logic(registry: ProductRegistry):
    registry.reset()
    return {"status": "reset"}
