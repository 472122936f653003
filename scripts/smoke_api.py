#!/usr/bin/env python3
"""Smoke test a running Chargeback API.

Usage:
    uv run python scripts/smoke_api.py [--base-url http://localhost:8080]

Checks health, chargeback creation, duplicate rejection, validation errors
and unknown routes. Exits non-zero if any check fails.
"""

from __future__ import annotations

import argparse
import sys
import time
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx


def _payload(transaction_id: str, **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "transaction_id": transaction_id,
        "merchant_id": "merchant_smoke_test",
        "amount": 299.99,
        "currency": "BRL",
        "card_number": "4111111111111111",
        "reason": "fraud",
        "description": "Smoke test - fraud",
        "transaction_date": (datetime.now(UTC) - timedelta(days=1)).strftime("%Y-%m-%dT%H:%M:%SZ"),
    }
    payload.update(overrides)
    return payload


def _check(name: str, response: httpx.Response, expected: int) -> bool:
    ok = response.status_code == expected
    icon = "[OK]" if ok else "[FAIL]"
    print(f"  {icon} {name} - status {response.status_code} (expected {expected})")
    if not ok:
        print(f"       body: {response.text}")
    return ok


def run_checks(base_url: str) -> int:
    """Run all checks against base_url. Returns the number of failures."""
    transaction_id = f"txn_smoke_{int(time.time())}"
    failures = 0

    with httpx.Client(base_url=base_url, timeout=10.0) as client:
        print("Health check")
        failures += not _check("GET /health", client.get("/health"), 200)

        print("Create chargeback")
        response = client.post("/chargebacks", json=_payload(transaction_id))
        if _check("POST /chargebacks", response, 201):
            body = response.json()
            if not body["card_number"].endswith("1111") or "*" not in body["card_number"]:
                print(f"  [FAIL] card number not masked: {body['card_number']}")
                failures += 1
        else:
            failures += 1

        print("Duplicate transaction")
        failures += not _check(
            "POST /chargebacks (duplicate)",
            client.post("/chargebacks", json=_payload(transaction_id)),
            409,
        )

        print("Validation errors")
        failures += not _check(
            "POST /chargebacks (amount 0)",
            client.post("/chargebacks", json=_payload(f"{transaction_id}_zero", amount=0)),
            400,
        )
        failures += not _check(
            "POST /chargebacks (bad reason)",
            client.post(
                "/chargebacks", json=_payload(f"{transaction_id}_reason", reason="not_a_reason")
            ),
            400,
        )

        print("Routing")
        failures += not _check("GET /unknown", client.get("/unknown"), 404)
        failures += not _check("DELETE /health", client.delete("/health"), 405)

    return failures


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Chargeback API smoke test")
    parser.add_argument("--base-url", default="http://localhost:8080", help="API base URL")
    args = parser.parse_args()

    print(f"Running smoke tests against {args.base_url}\n")
    try:
        failures = run_checks(args.base_url)
    except httpx.HTTPError as e:
        print(f"ERROR: {e}")
        return 2

    if failures:
        print(f"\nSmoke tests FAILED ({failures} failing checks).")
        return 1

    print("\nSmoke tests PASSED.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
