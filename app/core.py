from typing import Dict, Any

from .models import Product, ProductPayload


class RegistryError(Exception):
    """Base for errors returned to callers of the registry.

    ``kind`` is the variant tag that goes over the wire next to ``msg``.
    """

    kind = "RegistryError"

    def __init__(self, msg: str):
        super().__init__(msg)
        self.msg = msg

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.kind, "msg": self.msg}


class NotFound(RegistryError):
    kind = "NotFound"


class InvalidInput(RegistryError):
    kind = "InvalidInput"


def validate_payload(payload: ProductPayload) -> None:
    if not payload.name.strip():
        raise InvalidInput("Product name cannot be empty")
    if not payload.origin.strip():
        raise InvalidInput("Product origin cannot be empty")
    if not payload.current_location.strip():
        raise InvalidInput("Current location cannot be empty")
    if not payload.status.strip():
        raise InvalidInput("Status cannot be empty")


def _make_product(product_id: int, p: ProductPayload, timestamp: int) -> Product:
    return Product(
        id=product_id,
        name=p.name,
        origin=p.origin,
        current_location=p.current_location,
        status=p.status,
        certification=p.certification,
        timestamp=timestamp,
        last_update=None,
        iot_data=p.iot_data,
    )


def _apply_payload(product: Product, p: ProductPayload, now: int) -> Product:
    # full replace of the mutable fields, not a merge
    return product.model_copy(update={
        "name": p.name,
        "origin": p.origin,
        "current_location": p.current_location,
        "status": p.status,
        "certification": p.certification,
        "iot_data": p.iot_data,
        "last_update": max(now, product.timestamp),
    })
