#!/usr/bin/env python3
"""
Cancellation retention flow script.

DO NOT ADD BUSINESS LOGIC HERE.
This script only orchestrates API calls.
All rules live in the backend.

Usage:
    python scripts/flow_cancel_retention.py --token <BEARER_TOKEN>
    python scripts/flow_cancel_retention.py --token <BEARER_TOKEN> --count 7 --base-url http://localhost:5000

Flow:
    1. Create N future bookings (Hotel 1..Hotel N)
    2. Cancel them in order
    3. List bookings and show which cancellations survived
"""

import argparse
import json
import sys
from datetime import UTC, datetime, timedelta

import httpx

BASE_URL = "http://localhost:5000"


def api_request(base_url: str, token: str, method: str, endpoint: str, data: dict | None = None) -> dict:
    """Make authenticated API request."""
    headers = {"Authorization": f"Bearer {token}"}
    url = f"{base_url}{endpoint}"

    if method == "GET":
        response = httpx.get(url, headers=headers, timeout=10.0, follow_redirects=True)
    elif method == "POST":
        response = httpx.post(url, headers=headers, json=data or {}, timeout=10.0, follow_redirects=True)
    else:
        raise ValueError(f"Unknown method: {method}")

    return {"status": response.status_code, "data": response.json() if response.text else {}}


def print_step(step: int, title: str):
    """Print step header."""
    print(f"\n{'='*60}")
    print(f"STEP {step}: {title}")
    print("="*60)


def check(result: dict) -> bool:
    if result["status"] >= 400:
        print(f"ERROR ({result['status']}): {json.dumps(result['data'], indent=2)}")
        return False
    return True


def main():
    parser = argparse.ArgumentParser(description="Cancellation retention flow")
    parser.add_argument("--token", required=True, help="Bearer token accepted by the identity service")
    parser.add_argument("--base-url", default=BASE_URL, help="Booking service base URL")
    parser.add_argument("--count", type=int, default=7, help="Bookings to create and cancel")
    args = parser.parse_args()

    # Step 1: Create bookings
    print_step(1, f"Create {args.count} bookings")
    start = datetime.now(UTC) + timedelta(days=1)
    booking_ids = []
    for i in range(1, args.count + 1):
        result = api_request(args.base_url, args.token, "POST", "/api/v1/bookings/", {
            "scheduled_at": (start + timedelta(days=i)).isoformat(),
            "service_name": f"Hotel {i}",
        })
        if not check(result):
            sys.exit(1)
        booking_ids.append(result["data"]["id"])
        print(f"Created Hotel {i}: {result['data']['id']}")

    # Step 2: Cancel in order
    print_step(2, "Cancel bookings in order")
    for i, booking_id in enumerate(booking_ids, start=1):
        result = api_request(args.base_url, args.token, "POST", f"/api/v1/bookings/{booking_id}/cancel")
        if not check(result):
            sys.exit(1)
        print(f"Cancelled Hotel {i} at {result['data']['booking']['cancelled_at']}")

    # Step 3: Inspect what survived
    print_step(3, "Surviving cancellations")
    result = api_request(args.base_url, args.token, "GET", "/api/v1/bookings/")
    if not check(result):
        sys.exit(1)
    cancelled = [b for b in result["data"] if b["status"] == "cancelled"]
    for b in sorted(cancelled, key=lambda b: b["cancelled_at"]):
        print(f"{b['service_name']:<12} cancelled_at={b['cancelled_at']}")

    print("\n" + "="*60)
    print("CANCEL RETENTION FLOW COMPLETE")
    print("="*60)
    print(f"Cancelled kept: {len(cancelled)}")


if __name__ == "__main__":
    main()
