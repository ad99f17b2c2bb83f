#!/usr/bin/env python3
"""
Post-Deployment Health Check Script

Confirms a deployed After8 backend answers on its public endpoints and can
reach its database.

Usage:
    python scripts/health_check.py --url <DEPLOYMENT_URL> [--retry 3] [--retry-delay 10]

Checks Performed:
    1. Root endpoint (/) returns 200
    2. /api/health returns 200 and reports the database as connected
    3. Public event listing (/api/events/all) returns 200

Exit Codes:
    0: All health checks passed
    1: One or more health checks failed
"""

import argparse
import sys
import time
import requests
from typing import Dict, Tuple


def check_endpoint(url: str, endpoint: str, timeout: int = 10, expected_status: int = 200) -> Tuple[bool, str]:
    """
    Checks that an endpoint returns the expected HTTP status code.

    Returns:
        Tuple[bool, str]: (success, message)
    """
    full_url = f"{url.rstrip('/')}{endpoint}"

    try:
        response = requests.get(full_url, timeout=timeout, allow_redirects=True)
    except requests.exceptions.Timeout:
        return False, f"{endpoint} timed out after {timeout} seconds"
    except requests.exceptions.ConnectionError:
        return False, f"{endpoint} connection failed"

    if response.status_code == expected_status:
        return True, f"{endpoint} returned {response.status_code}"
    return False, f"{endpoint} returned {response.status_code} (expected {expected_status})"


def check_database(url: str, timeout: int = 10) -> Tuple[bool, str]:
    """Checks /api/health and its 'database' field."""
    full_url = f"{url.rstrip('/')}/api/health"

    try:
        response = requests.get(full_url, timeout=timeout)
    except requests.exceptions.RequestException as e:
        return False, f"/api/health request failed: {str(e)}"

    try:
        data = response.json()
    except ValueError:
        return False, "/api/health returned invalid JSON"

    database = data.get('database', 'unknown')
    if response.status_code == 200 and database == 'connected':
        return True, "/api/health returned 200, database connected"
    return False, f"/api/health returned {response.status_code}, database {database}"


def run_health_checks(url: str) -> Dict[str, Tuple[bool, str]]:
    print(f"\nHealth checks against {url}\n")

    results = {
        "root": check_endpoint(url, "/", timeout=15),
        "database": check_database(url, timeout=15),
        "events": check_endpoint(url, "/api/events/all", timeout=15),
    }

    for name, (passed, message) in results.items():
        print(f"  [{'PASS' if passed else 'FAIL'}] {name}: {message}")

    return results


def main():
    parser = argparse.ArgumentParser(description="Run post-deployment health checks")
    parser.add_argument("--url", required=True, help="Deployment URL to check")
    parser.add_argument("--retry", type=int, default=3,
                        help="Number of attempts before giving up (default: 3)")
    parser.add_argument("--retry-delay", type=int, default=10,
                        help="Delay in seconds between attempts (default: 10)")
    args = parser.parse_args()

    for attempt in range(1, args.retry + 1):
        if attempt > 1:
            print(f"\nRetry attempt {attempt}/{args.retry}")
            time.sleep(args.retry_delay)

        results = run_health_checks(args.url)
        passed = sum(1 for ok, _ in results.values() if ok)
        print(f"\nTotal: {passed}/{len(results)} checks passed")

        if passed == len(results):
            sys.exit(0)

    print(f"Health checks failed after {args.retry} attempts.", file=sys.stderr)
    sys.exit(1)


if __name__ == "__main__":
    main()
