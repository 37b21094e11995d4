"""Async load generator for the `POST /payments` endpoint."""

import argparse
import asyncio
import random
import statistics
import time
from collections import Counter
from decimal import Decimal
from uuid import uuid4

import httpx

# (gateway, card) pairs; the last one is refused by MercadoPago's prefix rule.
CARD_MIX = [
    ("pagseguro", "1234567890123456"),
    ("mercadopago", "5234567890123456"),
    ("stripe", "4234567890123456"),
    ("mercadopago", "1234567890123456"),
]


async def send_one(client: httpx.AsyncClient, api_key: str | None, idx: int) -> tuple[str, float]:
    """Send one payment and return (outcome, latency_ms).

    The outcome is the payment status, or `HTTP_<code>` for error responses.
    """

    gateway, card_number = CARD_MIX[idx % len(CARD_MIX)]
    amount = Decimal(random.randint(100, 250000)) / 100
    headers = {"x-correlation-id": str(uuid4())}
    if api_key:
        headers["x-api-key"] = api_key
    started = time.perf_counter()
    try:
        resp = await client.post(
            "/payments",
            json={"amount": str(amount), "card_number": card_number, "gateway": gateway},
            headers=headers,
        )
        latency = (time.perf_counter() - started) * 1000
        if resp.status_code >= 400:
            return f"HTTP_{resp.status_code}", latency
        return resp.json()["status"], latency
    except httpx.HTTPError:
        latency = (time.perf_counter() - started) * 1000
        return "HTTP_599", latency


def pct(values: list[float], p: float) -> float:
    """Simple percentile helper for latency values."""

    if not values:
        return 0.0
    idx = min(len(values) - 1, max(0, int((p / 100.0) * len(values)) - 1))
    return sorted(values)[idx]


async def run(
    total: int,
    concurrency: int,
    base_url: str,
    api_key: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, float]:
    """Execute a bounded-concurrency load run and return summary stats."""

    sem = asyncio.Semaphore(concurrency)
    results = []

    async with httpx.AsyncClient(base_url=base_url, timeout=10.0, transport=transport) as client:
        async def worker(i: int):
            async with sem:
                return await send_one(client, api_key, i)

        tasks = [asyncio.create_task(worker(i)) for i in range(total)]
        for task in asyncio.as_completed(tasks):
            results.append(await task)

    outcomes = Counter(outcome for outcome, _ in results)
    lats = [latency for _, latency in results]
    errors = total - outcomes["COMPLETED"] - outcomes["REJECTED"]
    return {
        "total": total,
        "completed": outcomes["COMPLETED"],
        "rejected": outcomes["REJECTED"],
        "errors": errors,
        "error_rate": (errors / total) * 100 if total else 0.0,
        "p50_ms": pct(lats, 50),
        "p95_ms": pct(lats, 95),
        "p99_ms": pct(lats, 99),
        "avg_ms": statistics.mean(lats) if lats else 0.0,
    }


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Drive concurrent payments against a running service.")
    parser.add_argument("--total", type=int, default=1000)
    parser.add_argument("--concurrency", type=int, default=100)
    parser.add_argument("--base-url", default="http://localhost:8000")
    parser.add_argument("--api-key", default=None)
    args = parser.parse_args(argv)
    summary = asyncio.run(run(args.total, args.concurrency, args.base_url, args.api_key))
    for key, value in summary.items():
        print(f"{key}={value:.2f}" if isinstance(value, float) else f"{key}={value}")


if __name__ == "__main__":
    main()
