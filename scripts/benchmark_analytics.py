#!/usr/bin/env python3
"""
Benchmark Script for the Analytics Engine

Seeds one event type with synthetic events, then times the /analytics query
at several lookbacks.

Usage:
    API_AUTH=<secret> python scripts/benchmark_analytics.py [base_url] [events]
"""

import os
import random
import sys
import time
import requests
import statistics

EVENT_TYPE = "benchmark"
EVENT_NAMES = ["login", "logout", "page_view", "purchase", "search"]


def seed_events(base_url: str, headers: dict, count: int):
    """Post `count` events spread over the last 90 days"""
    now_ms = int(time.time() * 1000)
    session = requests.Session()
    failed = 0

    for i in range(count):
        payload = {
            "name": random.choice(EVENT_NAMES),
            "type": EVENT_TYPE,
            "createdAt": now_ms - random.randint(0, 90 * 86400 * 1000),
            "uniqueId": f"user_{i % 50}",
        }
        response = session.post(f"{base_url}/event", json=payload, headers=headers, timeout=10)
        if response.status_code != 200:
            failed += 1

    print(f"Seeded {count - failed} events ({failed} failed)")


def benchmark_queries(base_url: str, headers: dict):
    """Benchmark aggregation queries"""
    print(f"\n{'=' * 60}")
    print(f"BENCHMARK: Query Performance")
    print(f"{'=' * 60}")

    queries = [
        ("Lookback 1", {"type": EVENT_TYPE, "lookback": 1}),
        ("Lookback 7", {"type": EVENT_TYPE, "lookback": 7}),
        ("Lookback 30", {"type": EVENT_TYPE, "lookback": 30}),
        ("Lookback 7 + uniqueId", {"type": EVENT_TYPE, "lookback": 7, "uniqueId": "user_1"}),
    ]

    results = []

    for name, params in queries:
        times = []

        # Run each query 5 times
        for _ in range(5):
            start = time.time()
            try:
                response = requests.get(f"{base_url}/analytics", params=params, headers=headers, timeout=30)
                elapsed = (time.time() - start) * 1000  # Convert to ms

                if response.status_code == 200:
                    times.append(elapsed)
                else:
                    print(f"Error in {name}: Status {response.status_code}")
            except requests.RequestException as e:
                print(f"Error in {name}: {e}")

        if times:
            results.append({
                "name": name,
                "p50": statistics.median(times),
                "p95": sorted(times)[int(len(times) * 0.95)] if len(times) > 1 else times[0],
                "avg": statistics.mean(times),
            })

    print(f"\n{'Query':<25} {'P50':>10} {'P95':>10} {'Avg':>10}")
    print(f"{'-' * 60}")
    for r in results:
        print(f"{r['name']:<25} {r['p50']:>9.0f}ms {r['p95']:>9.0f}ms {r['avg']:>9.0f}ms")

    print(f"{'=' * 60}\n")

    return results


def main():
    base_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8000"
    count = int(sys.argv[2]) if len(sys.argv) > 2 else 1000
    headers = {"Authorization": os.environ.get("API_AUTH", "")}

    print("\n" + "=" * 60)
    print("ANALYTICS ENGINE - BENCHMARK")
    print("=" * 60)
    print(f"Target: {base_url}")
    print("=" * 60)

    # Test connection
    try:
        response = requests.get(f"{base_url}/health", timeout=5)
        if response.status_code != 200:
            print("Error: API is not healthy")
            sys.exit(1)
    except requests.RequestException as e:
        print(f"Error: Cannot connect to API: {e}")
        sys.exit(1)

    seed_events(base_url, headers, count)
    benchmark_queries(base_url, headers)

    # Leave nothing behind
    requests.delete(f"{base_url}/analytics", params={"type": EVENT_TYPE}, headers=headers, timeout=10)

    print("\n" + "=" * 60)
    print("BENCHMARK COMPLETE")
    print("=" * 60)


if __name__ == "__main__":
    main()
