from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List

U64_MAX = 2**64 - 1


class ProductPayload(BaseModel):
    name: str
    origin: str
    current_location: str
    status: str
    certification: Optional[str] = None
    iot_data: Optional[str] = None


class Product(BaseModel):
    # frozen: an update builds a new record, the stored one is never touched
    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0, le=U64_MAX)
    name: str
    origin: str
    current_location: str
    status: str  # e.g. "Manufactured", "In Transit", "Delivered"
    certification: Optional[str] = None
    timestamp: int = Field(ge=0, le=U64_MAX)
    last_update: Optional[int] = Field(default=None, ge=0, le=U64_MAX)
    iot_data: Optional[str] = None


class RegistrySnapshot(BaseModel):
    next_id: int = Field(ge=0, le=U64_MAX)
    products: List[Product] = []
