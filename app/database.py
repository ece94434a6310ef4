import time
import logging
from threading import RLock
from typing import Callable, Dict, Optional

from .config import Settings
from .core import NotFound, InvalidInput, validate_payload, _make_product, _apply_payload
from .models import Product, ProductPayload, RegistrySnapshot, U64_MAX
from .storage import SnapshotStore

# This file holds the product registry: the id -> Product map, the id counter
# and the lock serialising every access to both.

logger = logging.getLogger(__name__)


class ProductRegistry:
    """In-memory product registry.

    Ids come from a counter that starts at 0 and is incremented before use,
    so the first product gets id 1. Ids are never handed out twice, even
    after the product that held one has been deleted.

    ``clock`` returns the current time as an int (nanoseconds by default).
    When a ``store`` is given the state is loaded from it on construction and
    saved back after every successful mutation.

    With ``strict`` set, blank payload fields and products whose JSON
    encoding is larger than ``max_product_bytes`` are rejected with
    InvalidInput.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], int]] = None,
        store: Optional[SnapshotStore] = None,
        strict: bool = False,
        max_product_bytes: Optional[int] = None,
    ):
        self._clock = clock or time.time_ns
        self._store = store
        self._strict = strict
        self._max_product_bytes = max_product_bytes
        self._lock = RLock()
        self._products: Dict[int, Product] = {}
        self._counter = 0
        if store is not None:
            snap = store.load()
            if snap is not None:
                self.restore(snap)

    def __len__(self) -> int:
        with self._lock:
            return len(self._products)

    def __contains__(self, product_id: int) -> bool:
        with self._lock:
            return product_id in self._products

    def _next_id(self) -> int:
        if self._counter >= U64_MAX:
            raise RuntimeError("Cannot increment ID counter")
        return self._counter + 1

    def _check_size(self, product: Product) -> None:
        if self._strict and self._max_product_bytes is not None:
            size = len(product.model_dump_json().encode("utf-8"))
            if size > self._max_product_bytes:
                raise InvalidInput(
                    f"Product is {size} bytes, the limit is {self._max_product_bytes}")

    def _commit(self, products: Dict[int, Product], counter: int) -> None:
        # disk first: a failed save leaves the registry as it was
        if self._store is not None:
            self._store.save(RegistrySnapshot(next_id=counter, products=list(products.values())))
        self._products = products
        self._counter = counter

    def add_product(self, payload: ProductPayload) -> Optional[Product]:
        if self._strict:
            validate_payload(payload)
        with self._lock:
            pid = self._next_id()
            if pid in self._products:
                raise RuntimeError(f"Duplicate product id={pid}")
            product = _make_product(pid, payload, self._clock())
            self._check_size(product)
            products = dict(self._products)
            products[pid] = product
            self._commit(products, pid)
        logger.info("Added product %s (%s)", pid, product.name)
        logger.debug("Product payload: %s", product.model_dump_json())
        return product

    def get_product(self, product_id: int) -> Product:
        with self._lock:
            product = self._products.get(product_id)
        if product is None:
            raise NotFound(f"Product with id={product_id} not found")
        return product

    def update_product(self, product_id: int, payload: ProductPayload) -> Product:
        if self._strict:
            validate_payload(payload)
        with self._lock:
            product = self._products.get(product_id)
            if product is None:
                raise NotFound(f"Cannot update product with id={product_id}. Product not found")
            product = _apply_payload(product, payload, self._clock())
            self._check_size(product)
            products = dict(self._products)
            products[product_id] = product
            self._commit(products, self._counter)
        logger.info("Updated product %s: status=%s location=%s",
                    product_id, product.status, product.current_location)
        return product

    def delete_product(self, product_id: int) -> Product:
        with self._lock:
            product = self._products.get(product_id)
            if product is None:
                raise NotFound(f"Cannot delete product with id={product_id}. Product not found.")
            products = dict(self._products)
            del products[product_id]
            self._commit(products, self._counter)
        logger.info("Deleted product %s", product_id)
        return product

    def snapshot(self) -> RegistrySnapshot:
        with self._lock:
            return RegistrySnapshot(next_id=self._counter, products=list(self._products.values()))

    def restore(self, snap: RegistrySnapshot) -> None:
        products = {}
        for p in snap.products:
            if p.id in products:
                raise RuntimeError(f"Duplicate product id={p.id} in snapshot")
            if p.id > snap.next_id:
                raise RuntimeError(f"Product id={p.id} is ahead of the id counter ({snap.next_id})")
            products[p.id] = p
        with self._lock:
            self._products = products
            self._counter = snap.next_id

    def reset(self) -> None:
        """Drop every product. The id counter is kept, so ids stay retired."""
        with self._lock:
            self._commit({}, self._counter)
        logger.info("Registry cleared, next id %s", self._counter + 1)


def create_registry(cfg: Settings) -> ProductRegistry:
    store = SnapshotStore(cfg.DATA_FILE) if cfg.DATA_FILE else None
    return ProductRegistry(store=store, strict=cfg.STRICT_PAYLOADS,
                           max_product_bytes=cfg.MAX_PRODUCT_BYTES)
