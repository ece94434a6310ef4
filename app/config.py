import os
import json
from typing import List, Optional, Union

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings

project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
load_dotenv(os.path.join(project_root, ".env"))


class Settings(BaseSettings):
    PROJECT_NAME: str = "supply-tracker"
    API_URL: str = "http://127.0.0.1:8085"

    # Registry
    DATA_FILE: Optional[str] = None  # snapshot path, persistence is off when unset
    STRICT_PAYLOADS: bool = False
    MAX_PRODUCT_BYTES: int = 2048  # encoded size cap, enforced with STRICT_PAYLOADS

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [i.strip() for i in v.split(",") if i.strip()]
        return v


settings = Settings()
