import asyncio
import httpx
from app.config import settings
from sdk.tracker import TrackerClient

async def add_one(client: httpx.AsyncClient, n: int):
    r = await client.post("/products", json={
        "name": f"Pallet {n}",
        "origin": "Factory A",
        "current_location": "Dock 3",
        "status": "Manufactured",
    })
    r.raise_for_status()
    return r.json()

async def main():
    c = TrackerClient(base_url=settings.API_URL)

    # Reset registry if available
    try:
        c.reset()
    except Exception as e:
        print(f"⚠️  reset failed: {e}")

    print("\n⚡ Adding 50 products concurrently...")
    async with httpx.AsyncClient(base_url=settings.API_URL) as client:
        products = await asyncio.gather(*(add_one(client, n) for n in range(50)))

    ids = [p["id"] for p in products]
    if len(set(ids)) == len(ids):
        print(f"✅ {len(ids)} unique ids, {min(ids)}..{max(ids)}")
    else:
        print(f"❌ duplicate ids issued: {sorted(ids)}")

    # Delete one and add another: the freed id is not reused
    c.delete_product(max(ids))
    fresh = c.add_product("Pallet extra", "Factory A", "Dock 3", "Manufactured")
    print(f"🆕 next id after delete: {fresh['id']} (deleted {max(ids)})")

if __name__ == "__main__":
    asyncio.run(main())
