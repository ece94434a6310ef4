#!/usr/bin/env python
from app.config import settings
from sdk.tracker import TrackerClient, ProductNotFound

def main():
    c = TrackerClient(base_url=settings.API_URL)

    # -----------------------------
    # Reset everything for demo
    # -----------------------------
    print("Resetting registry...")
    print(c.reset())

    # -----------------------------
    # Add a product
    # -----------------------------
    print("\nAdding product...")
    widget = c.add_product("Widget", "Factory A", "Warehouse 1", "created")
    print(widget)
    pid = widget["id"]

    # -----------------------------
    # Read it back
    # -----------------------------
    print(f"\nGetting product {pid}...")
    print(c.get_product(pid))

    # -----------------------------
    # Ship it
    # -----------------------------
    print("\nUpdating product...")
    print(c.update_product(pid, "Widget", "Factory A", "Port", "shipped",
                           certification="ISO 9001", iot_data='{"temp_c": 4.5}'))

    # -----------------------------
    # Delete it
    # -----------------------------
    print("\nDeleting product...")
    print(c.delete_product(pid))

    print("\nGetting deleted product...")
    try:
        c.get_product(pid)
    except ProductNotFound as e:
        print(f"NotFound: {e.msg}")

if __name__ == "__main__":
    main()
