# tests/conftest.py
import pytest

from app.database import ProductRegistry
from app.main import app, get_registry


@pytest.fixture(autouse=True)
def registry():
    # every test talks to its own in-memory registry, never to DATA_FILE
    reg = ProductRegistry()
    app.dependency_overrides[get_registry] = lambda: reg
    yield reg
    app.dependency_overrides.clear()
