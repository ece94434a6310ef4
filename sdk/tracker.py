# sdk/tracker.py
import requests
import httpx
from typing import Optional, Dict, Any
from rich import print


class TrackerError(Exception):
    def __init__(self, kind: str, msg: str, status_code: Optional[int] = None):
        super().__init__(msg)
        self.kind = kind
        self.msg = msg
        self.status_code = status_code


class ProductNotFound(TrackerError):
    pass


class InvalidProductInput(TrackerError):
    pass


_ERRORS = {"NotFound": ProductNotFound, "InvalidInput": InvalidProductInput}


def _payload(name: str, origin: str, current_location: str, status: str,
             certification: Optional[str] = None, iot_data: Optional[str] = None) -> Dict[str, Any]:
    return {
        "name": name,
        "origin": origin,
        "current_location": current_location,
        "status": status,
        "certification": certification,
        "iot_data": iot_data,
    }


def _unwrap(r):
    """Return the decoded body, or raise the TrackerError the server reported."""
    if r.status_code < 400:
        return r.json()
    try:
        body = r.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and "error" in body:
        cls = _ERRORS.get(body["error"], TrackerError)
        raise cls(body["error"], body.get("msg", ""), r.status_code)
    raise TrackerError("HTTPError", f"HTTP {r.status_code}: {r.text}", r.status_code)


class TrackerClient:
    def __init__(self, base_url: str = "http://localhost:8085", api_key: Optional[str] = None,
                 timeout: int = 10, session=None):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        if api_key:
            self.session.headers.update({"Authorization": f"Bearer {api_key}"})

    def reset(self):
        return _unwrap(self.session.post(f"{self.base_url}/reset", timeout=self.timeout))

    def add_product(self, name: str, origin: str, current_location: str, status: str,
                    certification: Optional[str] = None, iot_data: Optional[str] = None):
        payload = _payload(name, origin, current_location, status, certification, iot_data)
        r = self.session.post(f"{self.base_url}/products", json=payload, timeout=self.timeout)
        return _unwrap(r)

    def get_product(self, product_id: int):
        r = self.session.get(f"{self.base_url}/products/{product_id}", timeout=self.timeout)
        return _unwrap(r)

    def update_product(self, product_id: int, name: str, origin: str, current_location: str,
                       status: str, certification: Optional[str] = None, iot_data: Optional[str] = None):
        payload = _payload(name, origin, current_location, status, certification, iot_data)
        r = self.session.put(f"{self.base_url}/products/{product_id}", json=payload, timeout=self.timeout)
        return _unwrap(r)

    def delete_product(self, product_id: int):
        r = self.session.delete(f"{self.base_url}/products/{product_id}", timeout=self.timeout)
        return _unwrap(r)

    # Async lookup (example)
    async def get_product_async(self, product_id: int):
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.get(f"{self.base_url}/products/{product_id}")
            return _unwrap(r)


if __name__ == "__main__":
    import argparse
    import os

    parser = argparse.ArgumentParser(description="Supply tracker CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def _product_args(p):
        p.add_argument("--name", required=True, help="Product name")
        p.add_argument("--origin", required=True, help="Where the product comes from")
        p.add_argument("--location", required=True, help="Current location")
        p.add_argument("--status", required=True, help="Status, e.g. 'In Transit'")
        p.add_argument("--certification", help="Certification info (optional)")
        p.add_argument("--iot-data", help="IoT sensor data (optional)")

    ap = subparsers.add_parser("add-product", help="Register a new product")
    _product_args(ap)

    gp = subparsers.add_parser("get-product", help="Get a product by its ID")
    gp.add_argument("--product-id", type=int, required=True, help="ID of the product")

    up = subparsers.add_parser("update-product", help="Replace a product's details")
    up.add_argument("--product-id", type=int, required=True, help="ID of the product")
    _product_args(up)

    dp = subparsers.add_parser("delete-product", help="Delete a product")
    dp.add_argument("--product-id", type=int, required=True, help="ID of the product")

    subparsers.add_parser("reset", help="Clear every product")

    args = parser.parse_args()
    c = TrackerClient(base_url=os.environ.get("API_URL", "http://127.0.0.1:8085"))

    try:
        if args.command == "add-product":
            print(c.add_product(args.name, args.origin, args.location, args.status,
                                args.certification, args.iot_data))
        elif args.command == "get-product":
            print(c.get_product(args.product_id))
        elif args.command == "update-product":
            print(c.update_product(args.product_id, args.name, args.origin, args.location,
                                   args.status, args.certification, args.iot_data))
        elif args.command == "delete-product":
            print(c.delete_product(args.product_id))
        elif args.command == "reset":
            print(c.reset())
    except TrackerError as e:
        print(f"[red]{e.kind}:[/red] {e.msg}")
        raise SystemExit(1)
