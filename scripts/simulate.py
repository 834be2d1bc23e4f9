"""
Concurrency Simulation Script

Fires many concurrent orders at a running server and checks that every
stored order matches the quote it was placed from.
Run from project root: python scripts/simulate.py --orders 50
"""

import asyncio
import sys
import random
import time
import argparse
from datetime import datetime
from typing import Any

import httpx

# Configuration
API_BASE_URL = "http://localhost:8001"
TOTAL_ORDERS = 50

STREETS = ["Main St", "Broadway", "5th Avenue", "Park Ave", "Madison Ave", "Lexington Ave", "Amsterdam Ave"]


def generate_random_address() -> str:
    """Generate a random delivery address."""
    return f"{random.randint(1, 999)} {random.choice(STREETS)}"


def generate_random_items(item_ids: list[str]) -> list[dict[str, Any]]:
    """Generate random order lines from the catalog."""
    return [
        {"itemId": random.choice(item_ids), "itemQuantity": random.randint(1, 3)}
        for _ in range(random.randint(1, 4))
    ]


async def fetch_item_ids(client: httpx.AsyncClient, base_url: str) -> list[str]:
    """Read the catalog and return every item id."""
    response = await client.get(f"{base_url}/api/products")
    response.raise_for_status()
    categories = response.json()["data"]["categories"]
    return [p["itemId"] for products in categories.values() for p in products]


async def place_and_verify(
    client: httpx.AsyncClient,
    base_url: str,
    item_ids: list[str],
    order_num: int,
) -> dict[str, Any]:
    """Quote an order, place it, read it back and compare the totals."""
    payload = {
        "orderItems": generate_random_items(item_ids),
        "customerAddress": generate_random_address(),
    }
    start_time = time.time()
    result: dict[str, Any] = {"order_num": order_num, "success": False, "mismatch": False}

    try:
        quote = await client.post(f"{base_url}/api/orders/calculate", json=payload, timeout=30.0)
        created = await client.post(f"{base_url}/api/orders", json=payload, timeout=30.0)
        result["time"] = round(time.time() - start_time, 3)

        if created.status_code != 200:
            result["error"] = created.text[:100]
            return result

        tracking_id = created.json()["data"]["orderTrackingId"]
        fetched = await client.get(f"{base_url}/api/orders/{tracking_id}", timeout=30.0)
        order = fetched.json()["data"]["order"]

        result.update(
            success=True,
            tracking_id=tracking_id,
            total=order["total"],
            mismatch=quote.json()["data"]["total"] != order["total"],
        )
    except Exception as e:
        result["time"] = round(time.time() - start_time, 3)
        result["error"] = str(e)[:100]

    return result


async def run_simulation(
    base_url: str = API_BASE_URL,
    num_orders: int = TOTAL_ORDERS,
) -> dict[str, Any]:
    """
    Run the simulation.

    Args:
        base_url: Server root URL
        num_orders: Number of concurrent orders
    """
    print("=" * 70)
    print("CONCURRENCY SIMULATION")
    print("=" * 70)
    print(f"Total Orders: {num_orders}")
    print(f"Target: {base_url}")
    print(f"Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()

    async with httpx.AsyncClient() as client:
        item_ids = await fetch_item_ids(client, base_url)
        if not item_ids:
            print("\n❌ Catalog is empty, nothing to order.")
            return {"total": num_orders, "successful": 0, "failed": num_orders}

        tasks = [
            place_and_verify(client, base_url, item_ids, i + 1)
            for i in range(num_orders)
        ]
        results = await asyncio.gather(*tasks)

    total_time = round(time.time() - start_time, 2)

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]
    mismatched = [r for r in successful if r["mismatch"]]

    print("\n" + "=" * 70)
    print("SIMULATION RESULTS")
    print("=" * 70)
    print(f"\n✅ Successful Orders: {len(successful)}/{num_orders}")
    print(f"❌ Failed Orders: {len(failed)}/{num_orders}")
    print(f"⚠️  Quote/Order Mismatches: {len(mismatched)}")
    print(f"Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        total_revenue = sum(r["total"] for r in successful)
        print("\nPerformance Metrics:")
        print(f"   Average Round Trip: {avg_time}s")
        print(f"   Fastest: {min(r['time'] for r in successful)}s")
        print(f"   Slowest: {max(r['time'] for r in successful)}s")
        print(f"   Throughput: {len(successful) / total_time:.1f} orders/s")
        print(f"   Total Revenue: ${total_revenue:.2f}")

    if failed:
        print("\nFailed Order Details (showing first 5):")
        for f in failed[:5]:
            print(f"   Order #{f['order_num']}: {f.get('error', 'Unknown error')}")

    print("\n" + "=" * 70)
    print(f"Visit {base_url}/dashboard to see the orders")
    print("=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "failed": len(failed),
        "mismatched": len(mismatched),
        "total_time": total_time,
    }


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Concurrency Simulation Script")
    parser.add_argument("--url", default=API_BASE_URL, help="Server root URL")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    args = parser.parse_args()

    summary = asyncio.run(run_simulation(args.url, args.orders))
    sys.exit(0 if summary["failed"] == 0 and not summary.get("mismatched") else 1)
