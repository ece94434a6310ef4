# app/main.py
import sys
import logging
from typing import Optional, Annotated

from fastapi import FastAPI, Depends, Path, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .core import RegistryError, NotFound
from .database import ProductRegistry, create_registry
from .logic import (
    add_product_logic, get_product_logic, update_product_logic,
    delete_product_logic, reset_all_logic
)
from .models import Product, ProductPayload, U64_MAX

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.PROJECT_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------
# Registry (one per process)
# ---------------------------
registry = create_registry(settings)

def get_registry() -> ProductRegistry:
    return registry

ProductId = Annotated[int, Path(ge=0, le=U64_MAX)]

# ---------------------------
# Errors
# ---------------------------
@app.exception_handler(RegistryError)
async def registry_error_handler(request: Request, exc: RegistryError):
    status = 404 if isinstance(exc, NotFound) else 400
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.kind, exc.msg)
    return JSONResponse(status_code=status, content=exc.to_dict())

# ---------------------------
# Product endpoints
# ---------------------------
@app.post("/products", status_code=201, response_model=Optional[Product])
async def add_product(payload: ProductPayload, reg: ProductRegistry = Depends(get_registry)):
    return await add_product_logic(reg, payload)

@app.get("/products/{product_id}", response_model=Product)
async def get_product(product_id: ProductId, reg: ProductRegistry = Depends(get_registry)):
    return await get_product_logic(reg, product_id)

@app.put("/products/{product_id}", response_model=Product)
async def update_product(product_id: ProductId, payload: ProductPayload,
                         reg: ProductRegistry = Depends(get_registry)):
    return await update_product_logic(reg, product_id, payload)

@app.delete("/products/{product_id}", response_model=Product)
async def delete_product(product_id: ProductId, reg: ProductRegistry = Depends(get_registry)):
    return await delete_product_logic(reg, product_id)

# ---------------------------
# Utility: reset (for tests/demo)
# ---------------------------
@app.post("/reset")
async def reset_all(reg: ProductRegistry = Depends(get_registry)):
    return await reset_all_logic(reg)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8085, log_level=settings.LOG_LEVEL.lower())
