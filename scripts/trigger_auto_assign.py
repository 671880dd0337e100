#!/usr/bin/env python3
"""
Trigger one auto-assignment run through the API, as the external scheduler does.

Usage:
    python scripts/trigger_auto_assign.py
    python scripts/trigger_auto_assign.py --base-url https://api.example.com --token $SCHEDULER_API_TOKEN
"""

import argparse
import json
import os
import sys

import httpx

BASE_URL = "http://localhost:8000"
ENDPOINT = "/api/v1/jobs/auto-assign"


def trigger(base_url: str, token: str | None) -> int:
    """Call the auto-assign endpoint and print its summary."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}

    try:
        response = httpx.post(f"{base_url}{ENDPOINT}", headers=headers, timeout=60.0)
    except httpx.HTTPError as e:
        print(f"ERROR: Request failed: {e}")
        return 1

    print(f"Status: {response.status_code}")
    try:
        body = response.json()
    except json.JSONDecodeError:
        print(response.text)
        return 1

    print(json.dumps(body, indent=2))

    if not body.get("success"):
        return 1

    data = body["data"]
    print(
        f"\nProcessed {data['total_processed']}: "
        f"{data['assigned']} assigned, {data['skipped']} skipped, {data['errored']} errored"
    )
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Trigger an auto-assignment run")
    parser.add_argument("--base-url", default=os.environ.get("API_BASE_URL", BASE_URL))
    parser.add_argument("--token", default=os.environ.get("SCHEDULER_API_TOKEN"))
    args = parser.parse_args()

    sys.exit(trigger(args.base_url.rstrip("/"), args.token))
